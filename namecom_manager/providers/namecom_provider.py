"""
name.com registrar provider implementation.

This module talks to the name.com v4 REST API over HTTPS using the requests library.
"""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

from .base_provider import RegistrarProvider
from .models import DNSSEC, Domain, Record
from ..errors import APIError, ConfigurationError, NotFoundError

logger = logging.getLogger(__name__)

PRODUCTION_URL = "https://api.name.com/v4"
TEST_URL = "https://api.dev.name.com/v4"


class NameComProvider(RegistrarProvider):
    """name.com provider authenticating with an API username and token."""

    def __init__(self, config: Dict):
        """Initialize name.com provider."""
        self.config = config
        self.username = config.get("username", "")
        self.token = config.get("token", "")
        self.test = config.get("test", False)
        self.timeout = config.get("timeout", 30)

        if not self.username or not self.token:
            raise ConfigurationError("name.com provider requires both username and token")
        if not isinstance(self.test, bool):
            raise ConfigurationError(f"name.com provider 'test' must be true or false, got {self.test!r}")

        self.base_url = config.get("url") or (TEST_URL if self.test else PRODUCTION_URL)
        self.session = requests.Session()
        self.session.auth = (self.username, self.token)
        self.session.headers.update({"Content-Type": "application/json"})

        logger.info(f"name.com provider initialized for {self.base_url}")

    def _request(self, method: str, path: str, body: Optional[Dict] = None) -> Any:
        """Send one request and decode the JSON reply."""
        url = f"{self.base_url}{path}"
        logger.debug(f"{method} {url}")
        try:
            response = self.session.request(method, url, json=body, timeout=self.timeout)
        except requests.RequestException as e:
            raise APIError(f"{method} {path} failed: {e}") from e

        if not response.ok:
            self._handle_api_error(response)

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise APIError(f"Invalid JSON in response to {method} {path}", response.status_code) from e

    def _handle_api_error(self, response: requests.Response) -> None:
        """Raise the error matching a failed API response."""
        try:
            payload = response.json()
        except ValueError:
            payload = {}
        if not isinstance(payload, dict):
            payload = {}

        message = payload.get("message") or response.reason or "request failed"
        details = payload.get("details", "")
        logger.error(f"name.com API error {response.status_code}: {message}")

        if response.status_code == 404:
            raise NotFoundError(message, response.status_code, details)
        raise APIError(message, response.status_code, details)

    @staticmethod
    def _domain_path(zone: str) -> str:
        return f"/domains/{quote(zone, safe='')}"

    def create_record(self, record: Record) -> Record:
        """Create a new DNS record."""
        data = self._request("POST", f"{self._domain_path(record.domain_name)}/records", record.to_api())
        created = Record.from_api(data)
        logger.debug(f"Created record {created.id} {created.fqdn} {created.type} -> {created.answer}")
        return created

    def get_record(self, zone: str, record_id: int) -> Record:
        """Get a DNS record by id."""
        return Record.from_api(self._request("GET", f"{self._domain_path(zone)}/records/{record_id}"))

    def update_record(self, record: Record) -> Record:
        """Update an existing DNS record."""
        data = self._request(
            "PUT", f"{self._domain_path(record.domain_name)}/records/{record.id}", record.to_api()
        )
        updated = Record.from_api(data)
        logger.debug(f"Updated record {updated.id} {updated.fqdn} {updated.type} -> {updated.answer}")
        return updated

    def delete_record(self, zone: str, record_id: int) -> None:
        """Delete a DNS record."""
        self._request("DELETE", f"{self._domain_path(zone)}/records/{record_id}")
        logger.debug(f"Deleted record {record_id} in {zone}")

    def set_nameservers(self, zone: str, nameservers: List[str]) -> Domain:
        """Replace the nameservers of a domain."""
        data = self._request(
            "POST", f"{self._domain_path(zone)}:setNameservers", {"nameservers": list(nameservers)}
        )
        return Domain.from_api(data)

    def get_domain(self, zone: str) -> Domain:
        """Get a registered domain."""
        return Domain.from_api(self._request("GET", self._domain_path(zone)))

    def create_dnssec(self, dnssec: DNSSEC) -> DNSSEC:
        """Register a DS record."""
        data = self._request("POST", f"{self._domain_path(dnssec.domain_name)}/dnssec", dnssec.to_api())
        return DNSSEC.from_api(data)

    def get_dnssec(self, zone: str, digest: str) -> DNSSEC:
        """Get a DS record by digest."""
        path = f"{self._domain_path(zone)}/dnssec/{quote(digest, safe='')}"
        return DNSSEC.from_api(self._request("GET", path))

    def delete_dnssec(self, zone: str, digest: str) -> None:
        """Remove a DS record."""
        self._request("DELETE", f"{self._domain_path(zone)}/dnssec/{quote(digest, safe='')}")
        logger.debug(f"Deleted DNSSEC {digest} in {zone}")
