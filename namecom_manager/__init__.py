"""
NameCom Manager - Declarative management of name.com registrar resources

Manages DNS records, domain nameservers and DNSSEC (DS) entries through
the name.com API with a create/read/update/delete/import lifecycle.
"""

__version__ = "1.0.0"
__author__ = "NameCom Manager Team"
__description__ = "Declarative DNS record, nameserver and DNSSEC management for name.com"

from .core.manager import NameComManager
from .core.record_manager import RecordManager
from .providers.dns_client import DNSClient

__all__ = [
    "NameComManager",
    "RecordManager",
    "DNSClient",
]
