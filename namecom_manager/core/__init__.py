"""
Core resource management functionality.

This package contains the resource lifecycle adapters, their field
mapping, and the plan/apply logic that drives them.
"""

from .dnssec_manager import DNSSECManager
from .manager import NameComManager
from .nameserver_manager import NameserverManager
from .record_manager import RecordManager
from .resource_manager import ResourceDiff, ResourceManager

__all__ = [
    "DNSSECManager",
    "NameComManager",
    "NameserverManager",
    "RecordManager",
    "ResourceDiff",
    "ResourceManager",
]
