"""
Registrar provider implementations.

This package contains the name.com API provider and an in-memory
mock provider, behind the DNSClient facade.
"""

from .dns_client import DNSClient
from .base_provider import RegistrarProvider
from .mock_provider import MockRegistrarProvider
from .models import DEFAULT_NAMESERVERS, DNSSEC, Domain, Record
from .namecom_provider import NameComProvider

__all__ = [
    "DNSClient",
    "RegistrarProvider",
    "MockRegistrarProvider",
    "NameComProvider",
    "DEFAULT_NAMESERVERS",
    "DNSSEC",
    "Domain",
    "Record",
]
