"""
DNS Client - Unified interface for registrar provider APIs

This module provides a common interface for the registrar providers,
currently supporting the name.com API and an in-memory mock.
"""

import logging
import os
from typing import Dict, List

from .base_provider import RegistrarProvider
from .mock_provider import MockRegistrarProvider
from .models import DNSSEC, Domain, Record
from .namecom_provider import NameComProvider

logger = logging.getLogger(__name__)

USERNAME_ENV = "NAMECOM_USER"
TOKEN_ENV = "NAMECOM_TOKEN"


class DNSClient:
    """Unified registrar client that supports multiple providers."""

    def __init__(self, config: Dict):
        """Initialize DNS client with configuration."""
        self.config = config
        self.provider = self._get_provider()

    def _get_provider(self) -> RegistrarProvider:
        """Get registrar provider based on configuration."""
        provider_name = self.config.get("default_provider", "namecom")
        provider_config = self.config.get("dns_providers", {}).get(provider_name) or {}

        if provider_name == "namecom":
            return NameComProvider(self._namecom_config(provider_config))
        elif provider_name == "mock":
            return MockRegistrarProvider(provider_config)
        else:
            logger.warning(f"Unknown provider '{provider_name}', using mock provider")
            return MockRegistrarProvider()

    @staticmethod
    def _namecom_config(provider_config: Dict) -> Dict:
        """Fill in credentials missing from the config file from the environment."""
        resolved = dict(provider_config)
        if not resolved.get("username"):
            resolved["username"] = os.environ.get(USERNAME_ENV, "")
        if not resolved.get("token"):
            resolved["token"] = os.environ.get(TOKEN_ENV, "")
        return resolved

    def create_record(self, record: Record) -> Record:
        return self.provider.create_record(record)

    def get_record(self, zone: str, record_id: int) -> Record:
        return self.provider.get_record(zone, record_id)

    def update_record(self, record: Record) -> Record:
        return self.provider.update_record(record)

    def delete_record(self, zone: str, record_id: int) -> None:
        self.provider.delete_record(zone, record_id)

    def set_nameservers(self, zone: str, nameservers: List[str]) -> Domain:
        return self.provider.set_nameservers(zone, nameservers)

    def get_domain(self, zone: str) -> Domain:
        return self.provider.get_domain(zone)

    def create_dnssec(self, dnssec: DNSSEC) -> DNSSEC:
        return self.provider.create_dnssec(dnssec)

    def get_dnssec(self, zone: str, digest: str) -> DNSSEC:
        return self.provider.get_dnssec(zone, digest)

    def delete_dnssec(self, zone: str, digest: str) -> None:
        self.provider.delete_dnssec(zone, digest)
