"""
Typed resource states.

One dataclass per resource type. `id` is the identifier the resource is
tracked under and is empty until the resource exists remotely.
"""

from dataclasses import asdict, dataclass, field, fields
from typing import Dict, List


@dataclass
class ResourceState:
    def to_dict(self) -> Dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict):
        """Build a state from a mapping, ignoring keys the type does not declare."""
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})


@dataclass
class RecordState(ResourceState):
    """State of a `namecom_record` resource."""

    zone: str = ""
    type: str = ""
    answer: str = ""
    host: str = "@"
    ttl: int = 0
    priority: int = 0
    fqdn: str = ""
    id: str = ""


@dataclass
class NameserversState(ResourceState):
    """State of a `namecom_nameservers` resource."""

    zone: str = ""
    nameservers: List[str] = field(default_factory=list)
    id: str = ""


@dataclass
class DNSSECState(ResourceState):
    """State of a `namecom_dnssec` resource."""

    zone: str = ""
    key_tag: int = 0
    algorithm: int = 0
    digest_type: int = 0
    digest: str = ""
    id: str = ""
