"""
Request and response structures of the name.com v4 API.

Each structure converts to and from the camelCase JSON documents the API
exchanges.
"""

from dataclasses import dataclass, field
from typing import Dict, List

# Nameservers a domain falls back to when custom nameservers are released.
DEFAULT_NAMESERVERS = ["ns1.name.com", "ns2.name.com", "ns3.name.com", "ns4.name.com"]


@dataclass
class Record:
    """A DNS record as the registrar API represents it."""

    domain_name: str
    host: str = ""
    type: str = ""
    answer: str = ""
    ttl: int = 0
    priority: int = 0
    fqdn: str = ""
    id: int = 0

    def to_api(self) -> Dict:
        """Build the JSON body, leaving out zero-valued optional fields."""
        body = {
            "domainName": self.domain_name,
            "host": self.host,
            "type": self.type,
            "answer": self.answer,
        }
        if self.id:
            body["id"] = self.id
        if self.ttl:
            body["ttl"] = self.ttl
        if self.priority:
            body["priority"] = self.priority
        return body

    @classmethod
    def from_api(cls, data: Dict) -> "Record":
        return cls(
            domain_name=data.get("domainName", ""),
            host=data.get("host", ""),
            type=data.get("type", ""),
            answer=data.get("answer", ""),
            ttl=data.get("ttl", 0),
            priority=data.get("priority", 0),
            fqdn=data.get("fqdn", ""),
            id=data.get("id", 0),
        )


@dataclass
class Domain:
    """The subset of a registered domain this package cares about."""

    domain_name: str
    nameservers: List[str] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Dict) -> "Domain":
        return cls(
            domain_name=data.get("domainName", ""),
            nameservers=list(data.get("nameservers") or []),
        )


@dataclass
class DNSSEC:
    """A DS record registered with the parent zone's registry."""

    domain_name: str
    key_tag: int = 0
    algorithm: int = 0
    digest_type: int = 0
    digest: str = ""

    def to_api(self) -> Dict:
        return {
            "domainName": self.domain_name,
            "keyTag": self.key_tag,
            "algorithm": self.algorithm,
            "digestType": self.digest_type,
            "digest": self.digest,
        }

    @classmethod
    def from_api(cls, data: Dict) -> "DNSSEC":
        return cls(
            domain_name=data.get("domainName", ""),
            key_tag=data.get("keyTag", 0),
            algorithm=data.get("algorithm", 0),
            digest_type=data.get("digestType", 0),
            digest=data.get("digest", ""),
        )
