"""
Validators - Input validation for registrar resources

This module provides validation functions for zone names, hosts, record
answers and import identifiers to ensure data integrity and safety.
"""

import ipaddress
import logging
import re
from typing import Optional, Tuple

import dns.exception
import dns.name

from ..errors import IdentifierFormatError

logger = logging.getLogger(__name__)

RECORD_TYPES = ("A", "AAAA", "ANAME", "CNAME", "MX", "NS", "SRV", "TXT")
PRIORITY_TYPES = ("MX", "SRV")

_LABEL_RE = re.compile(r"^[a-zA-Z0-9]([a-zA-Z0-9-]*[a-zA-Z0-9])?$")
_HOST_LABEL_RE = re.compile(r"^(\*|_?[a-zA-Z0-9]([a-zA-Z0-9_-]*[a-zA-Z0-9])?)$")


def validate_fqdn(fqdn: str) -> bool:
    """
    Validate Fully Qualified Domain Name (FQDN).

    A single trailing dot is accepted; the name must have at least two labels.

    Args:
        fqdn: The FQDN to validate

    Returns:
        True if valid, False otherwise
    """
    if not fqdn or not isinstance(fqdn, str):
        return False

    try:
        name = dns.name.from_text(fqdn)
    except dns.exception.DNSException as e:
        logger.warning(f"Invalid FQDN {fqdn}: {e}")
        return False

    labels = [label.decode("ascii", errors="replace") for label in name.labels if label]
    if len(labels) < 2:
        logger.warning(f"FQDN must have at least 2 labels: {fqdn}")
        return False

    for label in labels:
        if not _LABEL_RE.match(label):
            logger.warning(f"Invalid label '{label}' in FQDN: {fqdn}")
            return False

    return True


def validate_zone_name(zone: str) -> bool:
    """
    Validate DNS zone name.

    Args:
        zone: The zone name to validate

    Returns:
        True if valid, False otherwise
    """
    if not zone or not isinstance(zone, str):
        return False

    if zone.endswith("."):
        return False

    if not validate_fqdn(zone):
        return False

    # Zone names are never IP addresses
    if validate_ipv4(zone):
        return False

    return True


def validate_host(host: str) -> bool:
    """Validate a record host relative to its zone ("@" is the zone apex)."""
    if host in ("@", ""):
        return True
    if not isinstance(host, str) or host.startswith(".") or host.endswith("."):
        return False
    return all(_HOST_LABEL_RE.match(label) and len(label) <= 63 for label in host.split("."))


def validate_record_type(record_type: str) -> bool:
    """Validate a record type, case-insensitively."""
    return isinstance(record_type, str) and record_type.upper() in RECORD_TYPES


def validate_ipv4(ipv4: str) -> bool:
    """
    Validate IPv4 address.

    Args:
        ipv4: The IPv4 address to validate

    Returns:
        True if valid, False otherwise
    """
    if not ipv4 or not isinstance(ipv4, str):
        return False

    try:
        ipaddress.IPv4Address(ipv4.strip())
        return True
    except ipaddress.AddressValueError:
        logger.debug(f"Invalid IPv4 address: {ipv4}")
        return False


def validate_ipv6(ipv6: str) -> bool:
    """Validate IPv6 address."""
    if not ipv6 or not isinstance(ipv6, str):
        return False

    try:
        ipaddress.IPv6Address(ipv6.strip())
        return True
    except ipaddress.AddressValueError:
        logger.debug(f"Invalid IPv6 address: {ipv6}")
        return False


def validate_answer(record_type: str, answer: str) -> Optional[str]:
    """
    Check that a record answer has the shape its type requires.

    Args:
        record_type: The record type (any case)
        answer: The record answer

    Returns:
        None if valid, otherwise a description of the problem
    """
    if not answer or not isinstance(answer, str):
        return "answer must be a non-empty string"

    record_type = record_type.upper()
    if record_type == "A" and not validate_ipv4(answer):
        return f"'{answer}' is not an IPv4 address"
    if record_type == "AAAA" and not validate_ipv6(answer):
        return f"'{answer}' is not an IPv6 address"
    if record_type == "SRV":
        parts = answer.split()
        if len(parts) != 3 or not parts[0].isdigit() or not parts[1].isdigit():
            return f"SRV answer '{answer}' must have the format 'weight port target'"
    return None


def split_import_id(identifier: str, expected: str) -> Tuple[str, str]:
    """
    Split a composite import identifier on its first slash.

    Args:
        identifier: The identifier to split, e.g. "example.com/42"
        expected: Human readable format used in the error message

    Returns:
        The two non-empty halves

    Raises:
        IdentifierFormatError: If either half is missing or empty
    """
    parts = (identifier or "").split("/", 1)
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise IdentifierFormatError(
            f'invalid id "{identifier}" specified, should be in format "{expected}" for import'
        )
    return parts[0], parts[1]


def sanitize_fqdn(fqdn: str) -> str:
    """
    Sanitize FQDN by normalizing case and surrounding dots.

    Args:
        fqdn: The FQDN to sanitize

    Returns:
        Sanitized FQDN
    """
    if not fqdn:
        return fqdn

    fqdn = fqdn.strip().strip(".").lower()

    # Remove consecutive dots
    fqdn = re.sub(r"\.+", ".", fqdn)

    return fqdn
