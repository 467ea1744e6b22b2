"""
DNSSEC Manager - Lifecycle for DS records

A DS record is identified remotely by (zone, digest) and cannot be edited;
any change to its fields replaces it.
"""

import logging
from typing import List, Optional

from ..errors import FieldAssignmentError, MissingPreconditionError, RemoteCallError
from ..providers.models import DNSSEC
from ..utils.validators import split_import_id
from .models import DNSSECState
from .resource_manager import ResourceManager

logger = logging.getLogger(__name__)


def to_request(config: DNSSECState) -> DNSSEC:
    return DNSSEC(
        domain_name=config.zone,
        key_tag=config.key_tag,
        algorithm=config.algorithm,
        digest_type=config.digest_type,
        digest=config.digest,
    )


def from_response(dnssec: DNSSEC, identifier: str) -> DNSSECState:
    values = {}
    for name, value in (
        ("key_tag", dnssec.key_tag),
        ("algorithm", dnssec.algorithm),
        ("digest_type", dnssec.digest_type),
    ):
        if isinstance(value, bool):
            raise FieldAssignmentError(name, value)
        try:
            values[name] = int(value)
        except (TypeError, ValueError) as e:
            raise FieldAssignmentError(name, value) from e

    for name, value in (("zone", dnssec.domain_name), ("digest", dnssec.digest)):
        if not isinstance(value, str):
            raise FieldAssignmentError(name, value)

    return DNSSECState(zone=dnssec.domain_name, digest=dnssec.digest, id=identifier, **values)


class DNSSECManager(ResourceManager):
    """Manages the lifecycle of `namecom_dnssec` resources."""

    resource_type = "namecom_dnssec"
    state_class = DNSSECState
    supports_update = False
    force_new_fields = ("zone", "key_tag", "algorithm", "digest_type", "digest")

    def _get(self, zone: str, digest: str) -> DNSSEC:
        return self._call("GetDNSSEC", self.dns_client.get_dnssec, zone, digest)

    def create(self, config: DNSSECState) -> DNSSECState:
        """Register a DS record, then read it back."""
        self._call("CreateDNSSEC", self.dns_client.create_dnssec, to_request(config))
        logger.info(f"Created DNSSEC {config.digest} for {config.zone}")
        return from_response(self._get(config.zone, config.digest), config.zone)

    def read(self, state: DNSSECState) -> Optional[DNSSECState]:
        """Refresh a DS record; None means it no longer exists."""
        if not state.zone:
            raise MissingPreconditionError("Error getting zone")
        if not state.digest:
            raise MissingPreconditionError("Error getting digest")

        try:
            dnssec = self._get(state.zone, state.digest)
        except RemoteCallError as e:
            if e.not_found:
                logger.warning(f"DNSSEC {state.digest} for {state.zone} no longer exists, dropping it")
                return None
            raise
        return from_response(dnssec, state.id or state.zone)

    def delete(self, state: DNSSECState) -> None:
        """Remove a DS record."""
        if not state.zone or not state.digest:
            raise MissingPreconditionError("DNSSEC delete requires zone and digest")
        self._call("DeleteDNSSEC", self.dns_client.delete_dnssec, state.zone, state.digest)
        logger.info(f"Deleted DNSSEC {state.digest} for {state.zone}")
        state.id = ""

    def import_state(self, identifier: str) -> List[DNSSECState]:
        """Import a DS record from a "zone/digest" identifier."""
        zone, digest = split_import_id(identifier, "Zone/Digest")
        return [from_response(self._get(zone, digest), zone)]
