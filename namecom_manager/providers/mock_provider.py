"""
Mock registrar provider for testing and demonstration.

This module provides a mock registrar that stores domains, records and DS
entries in memory for safe testing and demonstration purposes.
"""

import copy
import logging
from typing import Dict, List

from .base_provider import RegistrarProvider
from .models import DEFAULT_NAMESERVERS, DNSSEC, Domain, Record
from ..errors import APIError, NotFoundError
from ..utils.validators import sanitize_fqdn

logger = logging.getLogger(__name__)

DEFAULT_TTL = 300
MINIMUM_TTL = 300


class MockRegistrarProvider(RegistrarProvider):
    """Mock registrar for testing and demonstration purposes."""

    def __init__(self, config: Dict = None):
        """Initialize mock provider."""
        config = config or {}
        self.domains: Dict[str, Domain] = {}
        self.records: Dict[str, Dict[int, Record]] = {}
        self.dnssec: Dict[str, Dict[str, DNSSEC]] = {}
        self._next_id = 1

        for zone in config.get("domains", []):
            self.add_domain(zone)
        logger.info("Mock registrar provider initialized")

    def add_domain(self, zone: str, nameservers: List[str] = None) -> Domain:
        """Register a domain with the mock registrar."""
        zone = sanitize_fqdn(zone)
        domain = Domain(
            domain_name=zone,
            nameservers=list(nameservers or DEFAULT_NAMESERVERS),
        )
        self.domains[zone] = domain
        self.records.setdefault(zone, {})
        self.dnssec.setdefault(zone, {})
        return domain

    def _domain(self, zone: str) -> Domain:
        domain = self.domains.get(sanitize_fqdn(zone))
        if domain is None:
            raise NotFoundError(f"Domain {zone} not found", 404)
        return domain

    def _record(self, zone: str, record_id: int) -> Record:
        domain = self._domain(zone)
        record = self.records[domain.domain_name].get(record_id)
        if record is None:
            raise NotFoundError(f"Record {record_id} not found", 404)
        return record

    def _store_record(self, record: Record) -> Record:
        ttl = record.ttl or DEFAULT_TTL
        if ttl < MINIMUM_TTL:
            raise APIError(f"TTL must be at least {MINIMUM_TTL}", 400)
        record.ttl = ttl
        record.type = record.type.upper()
        record.fqdn = f"{record.host}.{record.domain_name}." if record.host else f"{record.domain_name}."
        self.records[record.domain_name][record.id] = record
        return copy.deepcopy(record)

    def create_record(self, record: Record) -> Record:
        """Create a new DNS record."""
        domain = self._domain(record.domain_name)
        stored = copy.deepcopy(record)
        stored.domain_name = domain.domain_name
        stored.id = self._next_id
        created = self._store_record(stored)
        self._next_id += 1
        logger.info(f"Mock: Created record {created.id} {created.fqdn} -> {created.answer}")
        return created

    def get_record(self, zone: str, record_id: int) -> Record:
        """Get a DNS record by id."""
        return copy.deepcopy(self._record(zone, record_id))

    def update_record(self, record: Record) -> Record:
        """Update an existing DNS record."""
        existing = self._record(record.domain_name, record.id)
        stored = copy.deepcopy(record)
        stored.domain_name = existing.domain_name
        updated = self._store_record(stored)
        logger.info(f"Mock: Updated record {updated.id} {updated.fqdn} -> {updated.answer}")
        return updated

    def delete_record(self, zone: str, record_id: int) -> None:
        """Delete a DNS record."""
        existing = self._record(zone, record_id)
        del self.records[existing.domain_name][record_id]
        logger.info(f"Mock: Deleted record {record_id}")

    def set_nameservers(self, zone: str, nameservers: List[str]) -> Domain:
        """Replace the nameservers of a domain."""
        domain = self._domain(zone)
        if not nameservers:
            raise APIError("At least one nameserver is required", 400)
        domain.nameservers = [sanitize_fqdn(ns) for ns in nameservers]
        logger.info(f"Mock: Set nameservers for {domain.domain_name}: {', '.join(domain.nameservers)}")
        return copy.deepcopy(domain)

    def get_domain(self, zone: str) -> Domain:
        """Get a registered domain."""
        return copy.deepcopy(self._domain(zone))

    def create_dnssec(self, dnssec: DNSSEC) -> DNSSEC:
        """Register a DS record."""
        domain = self._domain(dnssec.domain_name)
        entries = self.dnssec[domain.domain_name]
        if dnssec.digest in entries:
            raise APIError(f"DNSSEC {dnssec.digest} already exists", 409)
        stored = copy.deepcopy(dnssec)
        stored.domain_name = domain.domain_name
        entries[stored.digest] = stored
        logger.info(f"Mock: Created DNSSEC {stored.digest} for {domain.domain_name}")
        return copy.deepcopy(stored)

    def get_dnssec(self, zone: str, digest: str) -> DNSSEC:
        """Get a DS record by digest."""
        domain = self._domain(zone)
        entry = self.dnssec[domain.domain_name].get(digest)
        if entry is None:
            raise NotFoundError(f"DNSSEC {digest} not found", 404)
        return copy.deepcopy(entry)

    def delete_dnssec(self, zone: str, digest: str) -> None:
        """Remove a DS record."""
        domain = self._domain(zone)
        if digest not in self.dnssec[domain.domain_name]:
            raise NotFoundError(f"DNSSEC {digest} not found", 404)
        del self.dnssec[domain.domain_name][digest]
        logger.info(f"Mock: Deleted DNSSEC {digest} for {domain.domain_name}")
