#!/usr/bin/env python3
"""
Test suite for NameCom Manager

This module provides testing for the field mapping, lifecycle adapters,
providers and plan/apply logic of the manager.
"""

import os
import shutil
import tempfile
import unittest
from unittest.mock import Mock, call, patch

import yaml

from namecom_manager.cli.main import load_config, main
from namecom_manager.core.dnssec_manager import DNSSECManager
from namecom_manager.core.manager import NameComManager
from namecom_manager.core.models import DNSSECState, NameserversState, RecordState
from namecom_manager.core.nameserver_manager import NameserverManager
from namecom_manager.core.record_manager import (
    RecordManager,
    from_response,
    normalize_record,
    record_id,
    to_request,
)
from namecom_manager.core.state import StateStore
from namecom_manager.errors import (
    APIError,
    ConfigurationError,
    FieldAssignmentError,
    IdentifierFormatError,
    MissingPreconditionError,
    NotFoundError,
    RemoteCallError,
    UnsupportedOperationError,
)
from namecom_manager.parsers.resources import RESOURCE_FIELDS, ResourceParser
from namecom_manager.providers.dns_client import DNSClient
from namecom_manager.providers.mock_provider import MockRegistrarProvider
from namecom_manager.providers.models import DEFAULT_NAMESERVERS, DNSSEC, Domain, Record
from namecom_manager.providers.namecom_provider import PRODUCTION_URL, TEST_URL, NameComProvider
from namecom_manager.utils.validators import (
    split_import_id,
    validate_answer,
    validate_fqdn,
    validate_host,
    validate_record_type,
    validate_zone_name,
)

MOCK_CONFIG = {
    "dns_providers": {"mock": {"domains": ["example.com"]}},
    "default_provider": "mock",
}


def _api_record(**overrides) -> Record:
    values = {
        "domain_name": "example.com",
        "host": "www",
        "type": "A",
        "answer": "10.0.0.1",
        "ttl": 300,
        "priority": 0,
        "fqdn": "www.example.com.",
        "id": 42,
    }
    values.update(overrides)
    return Record(**values)


class TestValidators(unittest.TestCase):
    """Test the validation functions."""

    def test_validate_fqdn_valid(self):
        """Test valid FQDN validation."""
        for fqdn in ["example.com", "ns1.name.com", "ns1.custom.com.", "1password.com"]:
            with self.subTest(fqdn=fqdn):
                self.assertTrue(validate_fqdn(fqdn))

    def test_validate_fqdn_invalid(self):
        """Test invalid FQDN validation."""
        invalid_fqdns = [
            "",  # Empty
            "single",  # Single label
            "example..com",  # Consecutive dots
            "example-.com",  # Ends with hyphen
            "-example.com",  # Starts with hyphen
            "a" * 64 + ".com",  # Label too long
        ]
        for fqdn in invalid_fqdns:
            with self.subTest(fqdn=fqdn):
                self.assertFalse(validate_fqdn(fqdn))

    def test_validate_zone_name(self):
        self.assertTrue(validate_zone_name("example.com"))
        self.assertFalse(validate_zone_name("example.com."))
        self.assertFalse(validate_zone_name("10.0.0.1"))
        self.assertFalse(validate_zone_name(None))

    def test_validate_host(self):
        for host in ["@", "", "www", "_sip._tcp", "*", "a.b"]:
            with self.subTest(host=host):
                self.assertTrue(validate_host(host))
        for host in [".www", "www.", "bad host", "-x"]:
            with self.subTest(host=host):
                self.assertFalse(validate_host(host))

    def test_validate_record_type_case_insensitive(self):
        for record_type in ["A", "aaaa", "Aname", "cname", "MX", "ns", "SRV", "txt"]:
            with self.subTest(record_type=record_type):
                self.assertTrue(validate_record_type(record_type))
        self.assertFalse(validate_record_type("PTR"))
        self.assertFalse(validate_record_type(None))

    def test_validate_answer(self):
        self.assertIsNone(validate_answer("a", "192.168.1.1"))
        self.assertIsNotNone(validate_answer("A", "256.1.2.3"))
        self.assertIsNone(validate_answer("AAAA", "2001:db8::1"))
        self.assertIsNotNone(validate_answer("AAAA", "192.168.1.1"))
        self.assertIsNone(validate_answer("SRV", "1 5061 sip.example.org"))
        self.assertIsNotNone(validate_answer("SRV", "sip.example.org"))
        self.assertIsNone(validate_answer("TXT", "v=spf1 -all"))
        self.assertIsNotNone(validate_answer("TXT", ""))

    def test_split_import_id(self):
        self.assertEqual(split_import_id("example.com/42", "Zone/ID"), ("example.com", "42"))
        self.assertEqual(split_import_id("example.com/a/b", "Zone/ID"), ("example.com", "a/b"))
        for identifier in ["example.com", "example.com/", "/42", "", None]:
            with self.subTest(identifier=identifier):
                with self.assertRaises(IdentifierFormatError):
                    split_import_id(identifier, "Zone/ID")


class TestRecordMapping(unittest.TestCase):
    """Test the record field mapping."""

    def test_to_request_normalizes_apex_and_type(self):
        request = to_request(RecordState(zone="example.com", host="@", type="cname", answer="target.example.com"))
        self.assertEqual(request.domain_name, "example.com")
        self.assertEqual(request.host, "")
        self.assertEqual(request.type, "CNAME")
        self.assertEqual(request.answer, "target.example.com")

    def test_to_request_omits_zero_ttl_and_priority(self):
        request = to_request(RecordState(zone="example.com", host="www", type="A", answer="10.0.0.1"))
        self.assertEqual(request.ttl, 0)
        self.assertEqual(request.priority, 0)
        self.assertNotIn("ttl", request.to_api())
        self.assertNotIn("priority", request.to_api())

        request = to_request(
            RecordState(zone="example.com", type="MX", answer="mx.example.com", ttl=600, priority=10)
        )
        self.assertEqual(request.to_api()["ttl"], 600)
        self.assertEqual(request.to_api()["priority"], 10)

    def test_from_response(self):
        state = from_response(_api_record(host="", fqdn="example.com.", ttl=3600))
        self.assertEqual(state.host, "@")
        self.assertEqual(state.zone, "example.com")
        self.assertEqual(state.fqdn, "example.com.")
        self.assertEqual(state.ttl, 3600)
        self.assertEqual(state.id, "42")

    def test_host_round_trip(self):
        for host in ["@", "www", "_sip._tcp"]:
            with self.subTest(host=host):
                request = to_request(RecordState(zone="example.com", host=host, type="A", answer="10.0.0.1"))
                self.assertEqual(request.host, "" if host == "@" else host)
                self.assertEqual(from_response(_api_record(host=request.host)).host, host)

    def test_from_response_rejects_bad_field(self):
        with self.assertRaises(FieldAssignmentError) as ctx:
            from_response(_api_record(ttl="soon"))
        self.assertEqual(ctx.exception.field, "ttl")

    def test_record_id(self):
        self.assertEqual(record_id("123"), 123)
        for identifier in ["abc", "", "1.5", " 12", "2147483648"]:
            with self.subTest(identifier=identifier):
                with self.assertRaises(IdentifierFormatError):
                    record_id(identifier)


class TestRecordDiff(unittest.TestCase):
    """Test change detection on normalized records."""

    def setUp(self):
        self.manager = RecordManager(Mock())
        self.current = from_response(_api_record(host="", fqdn="example.com."))

    def test_apex_host_forms_are_equal(self):
        desired = RecordState(zone="example.com", host="", type="a", answer="10.0.0.1")
        self.assertFalse(self.manager.diff(self.current, desired).has_changes)

        desired.host = "@"
        self.assertFalse(self.manager.diff(self.current, desired).has_changes)

    def test_priority_ignored_for_other_types(self):
        for record_type in ["A", "AAAA", "ANAME", "CNAME", "NS", "TXT"]:
            for old, new in [(0, 10), (5, 0), (1, 65535)]:
                with self.subTest(record_type=record_type, old=old, new=new):
                    current = RecordState(zone="example.com", type=record_type, answer="x", ttl=300, priority=old)
                    desired = RecordState(zone="example.com", type=record_type, answer="x", ttl=300, priority=new)
                    self.assertFalse(self.manager.diff(current, desired).has_changes)

    def test_priority_change_detected_for_mx_and_srv(self):
        for record_type in ["MX", "SRV"]:
            with self.subTest(record_type=record_type):
                current = RecordState(zone="example.com", type=record_type, answer="x", ttl=300, priority=10)
                desired = RecordState(zone="example.com", type=record_type, answer="x", ttl=300, priority=20)
                diff = self.manager.diff(current, desired)
                self.assertEqual(diff.changes, {"priority": (10, 20)})
                self.assertEqual(diff.action, "update")

    def test_zero_ttl_adopts_server_value(self):
        desired = RecordState(zone="example.com", type="A", answer="10.0.0.1")
        self.assertEqual(normalize_record(desired, self.current).ttl, 300)
        self.assertFalse(self.manager.diff(self.current, desired).has_changes)

        desired.ttl = 600
        self.assertEqual(self.manager.diff(self.current, desired).changes, {"ttl": (300, 600)})

    def test_zone_change_requires_replace(self):
        desired = RecordState(zone="example.org", type="A", answer="10.0.0.1")
        self.assertEqual(self.manager.diff(self.current, desired).action, "replace")


class TestRecordManager(unittest.TestCase):
    """Test the record lifecycle against a mocked client."""

    def setUp(self):
        self.client = Mock()
        self.manager = RecordManager(self.client)
        self.state = RecordState(zone="example.com", host="www", type="A", answer="10.0.0.1", ttl=300, id="42")

    def test_create(self):
        self.client.create_record.return_value = _api_record()
        state = self.manager.create(RecordState(zone="example.com", host="www", type="a", answer="10.0.0.1"))

        request = self.client.create_record.call_args[0][0]
        self.assertEqual(request.type, "A")
        self.assertEqual(request.host, "www")
        self.assertEqual(state.id, "42")
        self.assertEqual(state.fqdn, "www.example.com.")

    def test_create_failure_is_wrapped(self):
        self.client.create_record.side_effect = APIError("Invalid Argument", 400)
        with self.assertRaises(RemoteCallError) as ctx:
            self.manager.create(RecordState(zone="example.com", type="A", answer="10.0.0.1"))
        self.assertEqual(ctx.exception.operation, "CreateRecord")
        self.assertIn("Error CreateRecord", str(ctx.exception))

    def test_read(self):
        self.client.get_record.return_value = _api_record(answer="10.0.0.2")
        state = self.manager.read(self.state)
        self.client.get_record.assert_called_once_with("example.com", 42)
        self.assertEqual(state.answer, "10.0.0.2")

    def test_read_not_found_drops_resource(self):
        self.client.get_record.side_effect = NotFoundError("Not Found", 404)
        self.assertIsNone(self.manager.read(self.state))

    def test_read_other_failure_propagates(self):
        self.client.get_record.side_effect = APIError("Internal Error", 500)
        with self.assertRaises(RemoteCallError) as ctx:
            self.manager.read(self.state)
        self.assertEqual(ctx.exception.operation, "GetRecord")
        self.assertFalse(ctx.exception.not_found)

    def test_read_non_numeric_id(self):
        self.state.id = "abc"
        with self.assertRaises(IdentifierFormatError):
            self.manager.read(self.state)
        self.client.get_record.assert_not_called()

    def test_update_uses_current_zone_and_id(self):
        self.client.update_record.return_value = _api_record(answer="10.0.0.9", ttl=600)
        desired = RecordState(zone="example.com", host="www", type="A", answer="10.0.0.9", ttl=600)

        state = self.manager.update(self.state, desired)

        request = self.client.update_record.call_args[0][0]
        self.assertEqual(request.id, 42)
        self.assertEqual(request.domain_name, "example.com")
        self.assertEqual(request.answer, "10.0.0.9")
        self.assertEqual(state.ttl, 600)

    def test_delete_clears_identifier(self):
        self.manager.delete(self.state)
        self.client.delete_record.assert_called_once_with("example.com", 42)
        self.assertEqual(self.state.id, "")

    def test_import(self):
        self.client.get_record.return_value = _api_record()
        states = self.manager.import_state("example.com/42")
        self.client.get_record.assert_called_once_with("example.com", 42)
        self.assertEqual(len(states), 1)
        self.assertEqual(states[0].zone, "example.com")
        self.assertEqual(states[0].id, "42")

    def test_import_invalid_identifier(self):
        for identifier in ["example.com", "example.com/", "example.com/abc"]:
            with self.subTest(identifier=identifier):
                with self.assertRaises(IdentifierFormatError):
                    self.manager.import_state(identifier)
        self.client.get_record.assert_not_called()


class TestNameserverManager(unittest.TestCase):
    """Test the nameserver lifecycle."""

    def setUp(self):
        self.client = Mock()
        self.manager = NameserverManager(self.client)

    def test_set_adopts_remote_values(self):
        self.client.set_nameservers.return_value = Domain(
            domain_name="example.com", nameservers=["ns2.custom.com", "ns1.custom.com"]
        )
        state = self.manager.create(
            NameserversState(zone="example.com", nameservers=["ns1.custom.com", "ns2.custom.com"])
        )
        self.client.set_nameservers.assert_called_once_with("example.com", ["ns1.custom.com", "ns2.custom.com"])
        self.assertEqual(state.id, "example.com")
        self.assertEqual(state.nameservers, ["ns2.custom.com", "ns1.custom.com"])

    def test_delete_resets_to_defaults(self):
        state = NameserversState(
            zone="example.com", nameservers=["ns1.custom.com", "ns2.custom.com"], id="example.com"
        )
        self.manager.delete(state)
        self.client.set_nameservers.assert_called_once_with(
            "example.com", ["ns1.name.com", "ns2.name.com", "ns3.name.com", "ns4.name.com"]
        )
        self.assertEqual(state.id, "")

    def test_read_extracts_only_nameservers(self):
        self.client.get_domain.return_value = Domain(
            domain_name="example.com", nameservers=["ns1.custom.com"]
        )
        state = self.manager.read(NameserversState(zone="example.com", nameservers=[], id="example.com"))
        self.client.get_domain.assert_called_once_with("example.com")
        self.assertEqual(state, NameserversState(zone="example.com", nameservers=["ns1.custom.com"], id="example.com"))

    def test_read_not_found(self):
        self.client.get_domain.side_effect = NotFoundError("Not Found", 404)
        self.assertIsNone(self.manager.read(NameserversState(zone="example.com", id="example.com")))

    def test_import(self):
        self.client.get_domain.return_value = Domain(domain_name="example.com", nameservers=["ns1.custom.com"])
        states = self.manager.import_state("example.com")
        self.assertEqual(states[0].id, "example.com")
        self.assertEqual(states[0].nameservers, ["ns1.custom.com"])

    def test_order_matters_but_case_does_not(self):
        current = NameserversState(zone="example.com", nameservers=["ns1.custom.com", "ns2.custom.com"])
        self.assertFalse(
            self.manager.diff(current, NameserversState(zone="example.com", nameservers=["NS1.custom.com.", "ns2.custom.com"])).has_changes
        )
        self.assertEqual(
            self.manager.diff(current, NameserversState(zone="example.com", nameservers=["ns2.custom.com", "ns1.custom.com"])).action,
            "update",
        )


class TestDNSSECManager(unittest.TestCase):
    """Test the DNSSEC lifecycle."""

    def setUp(self):
        self.client = DNSClient(MOCK_CONFIG)
        self.manager = DNSSECManager(self.client)
        self.config = DNSSECState(zone="example.com", key_tag=1, algorithm=13, digest_type=2, digest="ABCD")

    def test_create_then_read(self):
        state = self.manager.create(self.config)
        self.assertEqual(state.id, "example.com")

        refreshed = self.manager.read(state)
        for name in ("zone", "key_tag", "algorithm", "digest_type", "digest"):
            with self.subTest(field=name):
                self.assertEqual(getattr(refreshed, name), getattr(self.config, name))

    def test_create_reads_only_after_success(self):
        client = Mock()
        client.create_dnssec.side_effect = APIError("Conflict", 409)
        with self.assertRaises(RemoteCallError) as ctx:
            DNSSECManager(client).create(self.config)
        self.assertEqual(ctx.exception.operation, "CreateDNSSEC")
        client.get_dnssec.assert_not_called()

    def test_create_issues_create_before_get(self):
        client = Mock()
        client.get_dnssec.return_value = DNSSEC("example.com", 1, 13, 2, "ABCD")
        DNSSECManager(client).create(self.config)
        self.assertEqual(
            client.method_calls[1:],
            [call.get_dnssec("example.com", "ABCD")],
        )
        self.assertEqual(client.method_calls[0][0], "create_dnssec")

    def test_read_requires_zone_and_digest(self):
        client = Mock()
        manager = DNSSECManager(client)
        for state in (DNSSECState(zone="", digest="ABCD"), DNSSECState(zone="example.com", digest="")):
            with self.subTest(state=state):
                with self.assertRaises(MissingPreconditionError):
                    manager.read(state)
        client.get_dnssec.assert_not_called()

    def test_read_not_found(self):
        self.assertIsNone(self.manager.read(DNSSECState(zone="example.com", digest="FFFF", id="example.com")))

    def test_delete(self):
        state = self.manager.create(self.config)
        self.manager.delete(state)
        self.assertEqual(state.id, "")
        self.assertIsNone(self.manager.read(self.config))

    def test_import(self):
        self.manager.create(self.config)
        states = self.manager.import_state("example.com/ABCD")
        self.assertEqual(states[0], DNSSECState("example.com", 1, 13, 2, "ABCD", "example.com"))

    def test_import_invalid_identifier(self):
        for identifier in ["example.com/", "example.com", "/ABCD"]:
            with self.subTest(identifier=identifier):
                with self.assertRaises(IdentifierFormatError):
                    self.manager.import_state(identifier)

    def test_any_change_forces_replacement(self):
        current = DNSSECState("example.com", 1, 13, 2, "ABCD", "example.com")
        for name, value in (("key_tag", 2), ("algorithm", 8), ("digest_type", 1), ("digest", "EF01"), ("zone", "example.org")):
            with self.subTest(field=name):
                desired = DNSSECState("example.com", 1, 13, 2, "ABCD")
                setattr(desired, name, value)
                self.assertEqual(self.manager.diff(current, desired).action, "replace")

    def test_update_not_supported(self):
        with self.assertRaises(UnsupportedOperationError):
            self.manager.update(self.config, self.config)


class TestMockRegistrarProvider(unittest.TestCase):
    """Test the mock registrar provider."""

    def setUp(self):
        self.provider = MockRegistrarProvider({"domains": ["example.com"]})

    def test_record_lifecycle(self):
        created = self.provider.create_record(Record(domain_name="example.com", host="", type="a", answer="10.0.0.1"))
        self.assertEqual(created.id, 1)
        self.assertEqual(created.ttl, 300)
        self.assertEqual(created.type, "A")
        self.assertEqual(created.fqdn, "example.com.")

        created.answer = "10.0.0.2"
        self.assertEqual(self.provider.update_record(created).answer, "10.0.0.2")

        self.provider.delete_record("example.com", created.id)
        with self.assertRaises(NotFoundError):
            self.provider.get_record("example.com", created.id)

    def test_unknown_domain(self):
        with self.assertRaises(NotFoundError):
            self.provider.get_domain("missing.com")

    def test_minimum_ttl(self):
        with self.assertRaises(APIError):
            self.provider.create_record(Record(domain_name="example.com", type="A", answer="10.0.0.1", ttl=60))

    def test_default_nameservers(self):
        self.assertEqual(self.provider.get_domain("example.com").nameservers, DEFAULT_NAMESERVERS)


def _response(status_code, payload=None, reason="OK"):
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.reason = reason
    response.content = b"" if payload is None else b"{}"
    response.json.return_value = payload
    return response


class TestNameComProvider(unittest.TestCase):
    """Test the name.com HTTP provider with a mocked session."""

    def setUp(self):
        self.provider = NameComProvider({"username": "user", "token": "secret"})
        self.provider.session = Mock()

    def test_endpoint_selection(self):
        self.assertEqual(self.provider.base_url, PRODUCTION_URL)
        test_provider = NameComProvider({"username": "user", "token": "secret", "test": True})
        self.assertEqual(test_provider.base_url, TEST_URL)
        self.assertEqual(test_provider.session.auth, ("user", "secret"))

    def test_missing_credentials(self):
        with self.assertRaises(ConfigurationError):
            NameComProvider({"username": "user"})

    def test_test_flag_must_be_boolean(self):
        for value in ["false", "true", 1, None]:
            with self.subTest(test=value):
                with self.assertRaises(ConfigurationError):
                    NameComProvider({"username": "user", "token": "secret", "test": value})

    def test_create_record(self):
        self.provider.session.request.return_value = _response(
            200,
            {"id": 7, "domainName": "example.com", "host": "www", "fqdn": "www.example.com.",
             "type": "A", "answer": "10.0.0.1", "ttl": 300},
        )
        record = self.provider.create_record(Record(domain_name="example.com", host="www", type="A", answer="10.0.0.1"))

        self.provider.session.request.assert_called_once_with(
            "POST",
            f"{PRODUCTION_URL}/domains/example.com/records",
            json={"domainName": "example.com", "host": "www", "type": "A", "answer": "10.0.0.1"},
            timeout=30,
        )
        self.assertEqual(record.id, 7)
        self.assertEqual(record.fqdn, "www.example.com.")

    def test_set_nameservers(self):
        self.provider.session.request.return_value = _response(
            200, {"domainName": "example.com", "nameservers": ["ns1.custom.com"]}
        )
        domain = self.provider.set_nameservers("example.com", ["ns1.custom.com"])
        args, kwargs = self.provider.session.request.call_args
        self.assertEqual(args, ("POST", f"{PRODUCTION_URL}/domains/example.com:setNameservers"))
        self.assertEqual(kwargs["json"], {"nameservers": ["ns1.custom.com"]})
        self.assertEqual(domain.nameservers, ["ns1.custom.com"])

    def test_dnssec_paths(self):
        self.provider.session.request.return_value = _response(
            200, {"domainName": "example.com", "keyTag": 1, "algorithm": 13, "digestType": 2, "digest": "ABCD"}
        )
        dnssec = self.provider.get_dnssec("example.com", "ABCD")
        args, _ = self.provider.session.request.call_args
        self.assertEqual(args, ("GET", f"{PRODUCTION_URL}/domains/example.com/dnssec/ABCD"))
        self.assertEqual(dnssec, DNSSEC("example.com", 1, 13, 2, "ABCD"))

    def test_delete_with_empty_body(self):
        self.provider.session.request.return_value = _response(200)
        self.assertIsNone(self.provider.delete_record("example.com", 7))

    def test_not_found(self):
        self.provider.session.request.return_value = _response(404, {"message": "Not Found"}, reason="Not Found")
        with self.assertRaises(NotFoundError) as ctx:
            self.provider.get_record("example.com", 7)
        self.assertEqual(ctx.exception.status_code, 404)

    def test_api_error(self):
        self.provider.session.request.return_value = _response(
            400, {"message": "Invalid Argument", "details": "TTL too low"}, reason="Bad Request"
        )
        with self.assertRaises(APIError) as ctx:
            self.provider.get_domain("example.com")
        self.assertNotIsInstance(ctx.exception, NotFoundError)
        self.assertIn("TTL too low", str(ctx.exception))


class TestDNSClient(unittest.TestCase):
    """Test provider selection."""

    def test_environment_fallback(self):
        config = {"default_provider": "namecom", "dns_providers": {"namecom": {"test": True}}}
        with patch.dict(os.environ, {"NAMECOM_USER": "envuser", "NAMECOM_TOKEN": "envtoken"}):
            client = DNSClient(config)
        self.assertIsInstance(client.provider, NameComProvider)
        self.assertEqual(client.provider.username, "envuser")
        self.assertEqual(client.provider.token, "envtoken")
        self.assertEqual(client.provider.base_url, TEST_URL)

    def test_explicit_config_wins(self):
        config = {"default_provider": "namecom", "dns_providers": {"namecom": {"username": "u", "token": "t"}}}
        with patch.dict(os.environ, {"NAMECOM_USER": "envuser", "NAMECOM_TOKEN": "envtoken"}):
            client = DNSClient(config)
        self.assertEqual(client.provider.username, "u")

    def test_missing_credentials(self):
        with patch.dict(os.environ, {}, clear=True):
            with self.assertRaises(ConfigurationError):
                DNSClient({"default_provider": "namecom"})

    def test_unknown_provider_falls_back_to_mock(self):
        client = DNSClient({"default_provider": "route53"})
        self.assertIsInstance(client.provider, MockRegistrarProvider)

    def test_missing_config_file_uses_environment_credentials(self):
        with patch.dict(os.environ, {"NAMECOM_USER": "envuser", "NAMECOM_TOKEN": "envtoken"}):
            client = DNSClient(load_config("/nonexistent/config.yaml"))
        self.assertIsInstance(client.provider, NameComProvider)
        self.assertEqual(client.provider.username, "envuser")
        self.assertEqual(client.provider.base_url, PRODUCTION_URL)

    def test_missing_config_file_without_credentials(self):
        with patch.dict(os.environ, {}, clear=True):
            with self.assertRaises(ConfigurationError):
                DNSClient(load_config("/nonexistent/config.yaml"))


class TestResourceParser(unittest.TestCase):
    """Test resource definition parsing."""

    def setUp(self):
        self.parser = ResourceParser("unused.yaml")

    def test_valid_document(self):
        resources = self.parser.parse_document(
            {
                "resources": {
                    "namecom_record": {"www": {"zone": "example.com", "host": "www", "type": "a", "answer": "10.0.0.1"}},
                    "namecom_nameservers": {"ns": {"zone": "example.com", "nameservers": ["ns1.custom.com"]}},
                    "namecom_dnssec": {
                        "ds": {"zone": "example.com", "key_tag": 1, "algorithm": 13, "digest_type": 2, "digest": "ABCD"}
                    },
                }
            }
        )
        self.assertEqual(
            sorted(resources), ["namecom_dnssec.ds", "namecom_nameservers.ns", "namecom_record.www"]
        )

    def test_invalid_definitions_are_reported_together(self):
        with self.assertRaises(ConfigurationError) as ctx:
            self.parser.parse_document(
                {
                    "resources": {
                        "namecom_record": {"bad": {"zone": "example.com", "type": "PTR", "answer": "x"}},
                        "namecom_nameservers": {"empty": {"zone": "example.com", "nameservers": []}},
                        "namecom_dnssec": {"ds": {"zone": "example.com", "key_tag": "one", "algorithm": 13,
                                                   "digest_type": 2, "digest": ""}},
                        "namecom_domain": {},
                    }
                }
            )
        message = str(ctx.exception)
        self.assertIn("namecom_record.bad", message)
        self.assertIn("namecom_nameservers.empty", message)
        self.assertIn("key_tag", message)
        self.assertIn("digest must be", message)
        self.assertIn("namecom_domain", message)

    def test_unknown_fields_are_rejected(self):
        for extra in [{"priorty": 10}, {"id": "7"}, {"fqdn": "mail.example.com."}]:
            with self.subTest(extra=extra):
                fields = {"zone": "example.com", "type": "MX", "answer": "mx.example.com", "priority": 10}
                fields.update(extra)
                with self.assertRaises(ConfigurationError) as ctx:
                    self.parser.parse_document({"resources": {"namecom_record": {"mx": fields}}})
                self.assertIn(f"unknown field {next(iter(extra))!r}", str(ctx.exception))

    def test_resources_must_be_a_mapping(self):
        with self.assertRaises(ConfigurationError):
            self.parser.parse_document({"resources": [{"namecom_record": {}}]})


class TestNameComManager(unittest.TestCase):
    """Integration tests for plan/apply against the mock provider."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.resources_file = os.path.join(self.temp_dir, "resources.yaml")
        self.state_file = os.path.join(self.temp_dir, "state.yaml")
        self.manager = NameComManager(MOCK_CONFIG)
        self.provider = self.manager.dns_client.provider
        self.resources = {
            "resources": {
                "namecom_record": {"www": {"zone": "example.com", "host": "www", "type": "a", "answer": "10.0.0.1"}},
                "namecom_nameservers": {
                    "example": {"zone": "example.com", "nameservers": ["ns1.custom.com", "ns2.custom.com"]}
                },
                "namecom_dnssec": {
                    "ds": {"zone": "example.com", "key_tag": 1, "algorithm": 13, "digest_type": 2, "digest": "ABCD"}
                },
            }
        }
        self._write_resources()

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def _write_resources(self):
        with open(self.resources_file, "w") as f:
            yaml.dump(self.resources, f)

    def _plan(self):
        return self.manager.plan(ResourceParser(self.resources_file).parse(), StateStore(self.state_file).load())

    def test_dry_run_changes_nothing(self):
        output_file = os.path.join(self.temp_dir, "plan.txt")
        self.assertTrue(self.manager.process(self.resources_file, self.state_file, dry_run=True, output_file=output_file))

        self.assertEqual(self.provider.records["example.com"], {})
        self.assertFalse(os.path.exists(self.state_file))
        with open(output_file) as f:
            content = f.read()
        self.assertIn("+ namecom_record.www", content)
        self.assertIn("Total Changes: 3", content)

    def test_apply_then_no_changes(self):
        self.assertTrue(self.manager.process(self.resources_file, self.state_file))

        state = StateStore(self.state_file).load()
        self.assertEqual(state["namecom_record.www"]["id"], "1")
        self.assertEqual(state["namecom_record.www"]["type"], "A")
        self.assertEqual(state["namecom_nameservers.example"]["id"], "example.com")
        self.assertEqual(state["namecom_dnssec.ds"]["id"], "example.com")
        self.assertEqual(self.provider.get_domain("example.com").nameservers, ["ns1.custom.com", "ns2.custom.com"])

        self.assertEqual(self._plan()["total_changes"], 0)

    def test_update_replace_and_delete(self):
        self.assertTrue(self.manager.process(self.resources_file, self.state_file))

        self.resources["resources"]["namecom_record"]["www"]["answer"] = "10.0.0.2"
        self.resources["resources"]["namecom_dnssec"]["ds"]["digest"] = "EF01"
        del self.resources["resources"]["namecom_nameservers"]
        self._write_resources()

        changes = self._plan()
        self.assertEqual([c["address"] for c in changes["updates"]], ["namecom_record.www"])
        self.assertEqual([c["address"] for c in changes["replaces"]], ["namecom_dnssec.ds"])
        self.assertEqual([c["address"] for c in changes["deletes"]], ["namecom_nameservers.example"])

        self.assertTrue(self.manager.process(self.resources_file, self.state_file))
        state = StateStore(self.state_file).load()
        self.assertEqual(state["namecom_record.www"]["answer"], "10.0.0.2")
        self.assertEqual(state["namecom_dnssec.ds"]["digest"], "EF01")
        self.assertNotIn("namecom_nameservers.example", state)
        self.assertEqual(self.provider.get_domain("example.com").nameservers, DEFAULT_NAMESERVERS)
        self.assertEqual(list(self.provider.dnssec["example.com"]), ["EF01"])

    def test_resource_deleted_outside_is_recreated(self):
        self.assertTrue(self.manager.process(self.resources_file, self.state_file))
        self.provider.delete_record("example.com", 1)

        changes = self._plan()
        self.assertEqual([c["address"] for c in changes["creates"]], ["namecom_record.www"])

    def test_import_and_destroy(self):
        record = self.provider.create_record(Record(domain_name="example.com", host="", type="TXT", answer="hello"))
        state = {}
        imported = self.manager.import_resource("namecom_record.txt", f"example.com/{record.id}", state)
        self.assertEqual(imported.host, "@")
        self.assertIn("namecom_record.txt", state)

        with self.assertRaises(ConfigurationError):
            self.manager.import_resource("namecom_record.txt", f"example.com/{record.id}", state)

        self.assertTrue(self.manager.destroy(state))
        self.assertEqual(state, {})
        self.assertEqual(self.provider.records["example.com"], {})

    def test_destroy_drops_resources_deleted_outside(self):
        self.assertTrue(self.manager.process(self.resources_file, self.state_file))
        self.provider.delete_record("example.com", 1)

        state = StateStore(self.state_file).load()
        self.assertTrue(self.manager.destroy(state))
        self.assertEqual(state, {})
        self.assertEqual(self.provider.dnssec["example.com"], {})
        self.assertEqual(self.provider.get_domain("example.com").nameservers, DEFAULT_NAMESERVERS)

    def test_unsupported_update_is_reported_as_failure(self):
        ds = DNSSECState("example.com", 1, 13, 2, "ABCD", id="example.com")
        change = {"address": "namecom_dnssec.ds", "current": ds, "desired": ds, "diff": None}
        self.assertFalse(self.manager._run(change, "update", {}))

    def test_resource_fields_match_config_fields(self):
        for resource_type, manager in self.manager.resources.items():
            with self.subTest(resource_type=resource_type):
                self.assertEqual(sorted(RESOURCE_FIELDS[resource_type]), sorted(manager.config_fields()))

    def test_invalid_address(self):
        with self.assertRaises(ConfigurationError):
            self.manager.resource_for("namecom_domain.example")


class TestCLI(unittest.TestCase):
    """Test the command-line entry point."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.config_file = os.path.join(self.temp_dir, "config.yaml")
        self.resources_file = os.path.join(self.temp_dir, "resources.yaml")
        self.state_file = os.path.join(self.temp_dir, "state.yaml")

        config = dict(MOCK_CONFIG, logging={"level": "INFO", "file": os.path.join(self.temp_dir, "test.log")})
        with open(self.config_file, "w") as f:
            yaml.dump(config, f)
        with open(self.resources_file, "w") as f:
            yaml.dump(
                {"resources": {"namecom_record": {"www": {"zone": "example.com", "host": "www",
                                                          "type": "A", "answer": "10.0.0.1"}}}},
                f,
            )

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def _main(self, *args):
        with self.assertRaises(SystemExit) as ctx:
            main(["-c", self.config_file, "-s", self.state_file, *args])
        return ctx.exception.code

    def test_apply(self):
        self.assertEqual(self._main("apply", "-r", self.resources_file), 0)
        self.assertIn("namecom_record.www", StateStore(self.state_file).load())

    def test_output_file_requires_dry_run(self):
        output_file = os.path.join(self.temp_dir, "plan.txt")
        self.assertEqual(self._main("apply", "-r", self.resources_file, "-o", output_file), 1)
        self.assertFalse(os.path.exists(self.state_file))

    def test_import_with_bad_identifier(self):
        self.assertEqual(self._main("import", "namecom_dnssec.ds", "example.com/"), 1)


if __name__ == "__main__":
    # Run the tests
    unittest.main(verbosity=2)
