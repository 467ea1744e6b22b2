"""
Record Manager - Lifecycle and field mapping for DNS records

This module converts between `namecom_record` resource state and the API's
record representation, and normalizes states so that equivalent forms
(apex host "@" vs "", priority on types that ignore it) never register as changes.
"""

import logging
import re
from typing import List, Optional

from ..errors import FieldAssignmentError, IdentifierFormatError, RemoteCallError
from ..providers.models import Record
from ..utils.validators import PRIORITY_TYPES, split_import_id
from .models import RecordState
from .resource_manager import ResourceManager

logger = logging.getLogger(__name__)

APEX_HOST = "@"
_INT32_MIN, _INT32_MAX = -(2 ** 31), 2 ** 31 - 1


def record_id(identifier: str) -> int:
    """
    Parse a record identifier into the API's 32-bit record id.

    Raises:
        IdentifierFormatError: If the identifier is not a decimal integer
    """
    if not isinstance(identifier, str) or not re.fullmatch(r"[+-]?[0-9]+", identifier):
        raise IdentifierFormatError(f"Error parsing RecordID {identifier!r}, should be int32")
    value = int(identifier)
    if not _INT32_MIN <= value <= _INT32_MAX:
        raise IdentifierFormatError(f"Error parsing RecordID {identifier!r}, out of int32 range")
    return value


def to_request(config: RecordState) -> Record:
    """Build the API record from a resource config."""
    host = config.host if config.host != APEX_HOST else ""
    record = Record(
        domain_name=config.zone,
        host=host or "",
        type=config.type.upper(),
        answer=config.answer,
    )
    if config.ttl and config.ttl > 0:
        record.ttl = config.ttl
    if config.priority and config.priority > 0:
        record.priority = config.priority
    return record


def _as_str(name: str, value) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise FieldAssignmentError(name, value)
    return value


def _as_int(name: str, value) -> int:
    if value is None:
        return 0
    if isinstance(value, bool):
        raise FieldAssignmentError(name, value)
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise FieldAssignmentError(name, value) from e


def from_response(record: Record) -> RecordState:
    """Build resource state from an API record; the response is authoritative."""
    host = _as_str("host", record.host)
    return RecordState(
        zone=_as_str("zone", record.domain_name),
        host=host or APEX_HOST,
        type=_as_str("type", record.type),
        answer=_as_str("answer", record.answer),
        ttl=_as_int("ttl", record.ttl),
        priority=_as_int("priority", record.priority),
        fqdn=_as_str("fqdn", record.fqdn),
        id=str(_as_int("id", record.id)),
    )


def normalize_record(state: RecordState, current: Optional[RecordState] = None) -> RecordState:
    """
    Canonical form of a record used for change detection.

    The apex host is always "@", the type is upper-cased and priority is zeroed
    for types other than MX and SRV. A zero TTL in a desired config means "server
    default" and adopts the current TTL.
    """
    record_type = (state.type or "").upper()
    ttl = state.ttl or 0
    if current is not None and ttl == 0:
        ttl = current.ttl
    return RecordState(
        zone=state.zone,
        host=state.host or APEX_HOST,
        type=record_type,
        answer=state.answer,
        ttl=ttl,
        priority=(state.priority or 0) if record_type in PRIORITY_TYPES else 0,
        fqdn=state.fqdn,
        id=state.id,
    )


class RecordManager(ResourceManager):
    """Manages the lifecycle of `namecom_record` resources."""

    resource_type = "namecom_record"
    state_class = RecordState
    computed_fields = ("fqdn", "id")
    force_new_fields = ("zone",)

    def normalize(self, state: RecordState, current: Optional[RecordState] = None) -> RecordState:
        return normalize_record(state, current)

    def create(self, config: RecordState) -> RecordState:
        """Create a new DNS record."""
        record = self._call("CreateRecord", self.dns_client.create_record, to_request(config))
        state = from_response(record)
        logger.info(f"Created record {state.id}: {state.fqdn} {state.type} -> {state.answer}")
        return state

    def read(self, state: RecordState) -> Optional[RecordState]:
        """Refresh a record; None means it no longer exists."""
        rid = record_id(state.id)
        try:
            record = self._call("GetRecord", self.dns_client.get_record, state.zone, rid)
        except RemoteCallError as e:
            if e.not_found:
                logger.warning(f"Record {rid} in {state.zone} no longer exists, dropping it")
                return None
            raise
        return from_response(record)

    def update(self, state: RecordState, config: RecordState) -> RecordState:
        """Update a record in place; zone and id are taken from the current state."""
        request = to_request(config)
        request.domain_name = state.zone
        request.id = record_id(state.id)

        record = self._call("UpdateRecord", self.dns_client.update_record, request)
        updated = from_response(record)
        logger.info(f"Updated record {updated.id}: {updated.fqdn} {updated.type} -> {updated.answer}")
        return updated

    def delete(self, state: RecordState) -> None:
        """Delete a record."""
        rid = record_id(state.id)
        self._call("DeleteRecord", self.dns_client.delete_record, state.zone, rid)
        logger.info(f"Deleted record {rid} in {state.zone}")
        state.id = ""

    def import_state(self, identifier: str) -> List[RecordState]:
        """Import a record from a "zone/id" identifier."""
        zone, rid = split_import_id(identifier, "DomainName/RecordID")
        record = self._call("GetRecord", self.dns_client.get_record, zone, record_id(rid))
        return [from_response(record)]
