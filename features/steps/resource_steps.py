"""
Step definitions for NameCom Manager integration tests.
"""

import yaml
from behave import given, when, then

from namecom_manager.core.manager import NameComManager
from namecom_manager.core.state import StateStore
from namecom_manager.errors import IdentifierFormatError
from namecom_manager.parsers.resources import ResourceParser


def _write_resources(context):
    with open(context.resources_file, "w") as f:
        yaml.dump(context.resources, f)


def _add_resource(context, resource_type, name, fields):
    context.resources["resources"].setdefault(resource_type, {})[name] = fields
    _write_resources(context)


@given("the NameCom Manager is configured with the mock provider")
def step_impl(context):
    """Configure the manager with the in-memory registrar."""
    context.manager = NameComManager(context.test_config)
    context.provider = context.manager.dns_client.provider
    assert context.manager.dns_client is not None


@given('a desired "{record_type}" record "{name}" with host "{host}" and answer "{answer}"')
def step_impl(context, record_type, name, host, answer):
    """Declare a DNS record."""
    _add_resource(
        context,
        "namecom_record",
        name,
        {"zone": context.test_zone, "host": host, "type": record_type, "answer": answer},
    )


@given('a desired DNSSEC entry "{name}" with digest "{digest}"')
def step_impl(context, name, digest):
    """Declare a DS record."""
    _add_resource(
        context,
        "namecom_dnssec",
        name,
        {"zone": context.test_zone, "key_tag": 1, "algorithm": 13, "digest_type": 2, "digest": digest},
    )


@given('desired nameservers "{nameservers}"')
def step_impl(context, nameservers):
    """Declare the nameserver set of the test zone."""
    _add_resource(
        context,
        "namecom_nameservers",
        "zone",
        {"zone": context.test_zone, "nameservers": nameservers.split(",")},
    )


@given("I have applied the resources")
@when("I apply the resources")
def step_impl(context):
    """Run a full plan/apply cycle."""
    context.result = context.manager.process(str(context.resources_file), str(context.state_file))


@when("I plan the resources")
def step_impl(context):
    """Compute the plan without applying it."""
    desired = ResourceParser(str(context.resources_file)).parse()
    state = StateStore(str(context.state_file)).load()
    context.changes = context.manager.plan(desired, state)


@when('I change the priority of "{name}" to {priority:d}')
def step_impl(context, name, priority):
    context.resources["resources"]["namecom_record"][name]["priority"] = priority
    _write_resources(context)


@when('I change the digest of "{name}" to "{digest}"')
def step_impl(context, name, digest):
    context.resources["resources"]["namecom_dnssec"][name]["digest"] = digest
    _write_resources(context)


@when("I remove all desired resources")
def step_impl(context):
    context.resources = {"resources": {}}
    _write_resources(context)


@when('I import "{address}" with id "{identifier}"')
def step_impl(context, address, identifier):
    """Import an existing resource into an empty state."""
    try:
        context.manager.import_resource(address, identifier, {})
    except IdentifierFormatError as e:
        context.error = e


@then("the apply should succeed")
def step_impl(context):
    assert context.result, "Apply reported failures"


@then('the state should contain "{address}" with id "{identifier}"')
def step_impl(context, address, identifier):
    state = StateStore(str(context.state_file)).load()
    assert address in state, f"{address} missing from state: {list(state)}"
    assert state[address]["id"] == identifier, f"Unexpected id {state[address]['id']}"


@then("the registrar record {record_id:d} should have an empty host")
def step_impl(context, record_id):
    record = context.provider.get_record(context.test_zone, record_id)
    assert record.host == "", f"Expected apex host to be sent as empty, got {record.host!r}"


@then("the plan should contain {count:d} changes")
def step_impl(context, count):
    assert context.changes["total_changes"] == count, (
        f"Expected {count} changes, got {context.changes['total_changes']}"
    )


@then('"{address}" should be planned for "{category}"')
def step_impl(context, address, category):
    planned = [change["address"] for change in context.changes[category]]
    assert address in planned, f"{address} not in {category}: {planned}"


@then('the zone nameservers should be "{nameservers}"')
def step_impl(context, nameservers):
    domain = context.provider.get_domain(context.test_zone)
    assert domain.nameservers == nameservers.split(","), f"Unexpected nameservers {domain.nameservers}"


@then("the import should fail with an identifier format error")
def step_impl(context):
    assert isinstance(context.error, IdentifierFormatError), f"Unexpected error {context.error!r}"
