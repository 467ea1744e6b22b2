"""
Base registrar provider interface.

This module defines the abstract base class that all registrar providers must implement.
Implementations raise NotFoundError for missing entities and APIError for any other failure.
"""

from abc import ABC, abstractmethod
from typing import List

from .models import DNSSEC, Domain, Record


class RegistrarProvider(ABC):
    """Abstract base class for registrar providers."""

    @abstractmethod
    def create_record(self, record: Record) -> Record:
        """Create a new DNS record."""
        pass

    @abstractmethod
    def get_record(self, zone: str, record_id: int) -> Record:
        """Get a DNS record by id."""
        pass

    @abstractmethod
    def update_record(self, record: Record) -> Record:
        """Update an existing DNS record."""
        pass

    @abstractmethod
    def delete_record(self, zone: str, record_id: int) -> None:
        """Delete a DNS record."""
        pass

    @abstractmethod
    def set_nameservers(self, zone: str, nameservers: List[str]) -> Domain:
        """Replace the nameservers of a domain."""
        pass

    @abstractmethod
    def get_domain(self, zone: str) -> Domain:
        """Get a registered domain."""
        pass

    @abstractmethod
    def create_dnssec(self, dnssec: DNSSEC) -> DNSSEC:
        """Register a DS record."""
        pass

    @abstractmethod
    def get_dnssec(self, zone: str, digest: str) -> DNSSEC:
        """Get a DS record by digest."""
        pass

    @abstractmethod
    def delete_dnssec(self, zone: str, digest: str) -> None:
        """Remove a DS record."""
        pass
