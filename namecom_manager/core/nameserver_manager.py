"""
Nameserver Manager - Lifecycle for the nameserver set of a domain

Nameservers are always sent as the complete desired list. Deleting the
resource hands the domain back to the registrar's default nameservers.
"""

import logging
from typing import List, Optional

from ..errors import FieldAssignmentError, RemoteCallError
from ..providers.models import DEFAULT_NAMESERVERS, Domain
from ..utils.validators import sanitize_fqdn
from .models import NameserversState
from .resource_manager import ResourceManager

logger = logging.getLogger(__name__)


def from_domain(domain: Domain) -> NameserversState:
    if not isinstance(domain.nameservers, list) or not all(isinstance(ns, str) for ns in domain.nameservers):
        raise FieldAssignmentError("nameservers", domain.nameservers)
    return NameserversState(zone=domain.domain_name, nameservers=list(domain.nameservers), id=domain.domain_name)


class NameserverManager(ResourceManager):
    """Manages the lifecycle of `namecom_nameservers` resources."""

    resource_type = "namecom_nameservers"
    state_class = NameserversState
    force_new_fields = ("zone",)

    def normalize(self, state: NameserversState, current: Optional[NameserversState] = None) -> NameserversState:
        """Nameservers compare case-insensitively and without trailing dots, in order."""
        return NameserversState(
            zone=state.zone, nameservers=[sanitize_fqdn(ns) for ns in state.nameservers], id=state.id
        )

    def _set(self, zone: str, nameservers: List[str]) -> Domain:
        return self._call("SetNameservers", self.dns_client.set_nameservers, zone, list(nameservers))

    def create(self, config: NameserversState) -> NameserversState:
        """Set the nameservers of a domain."""
        state = from_domain(self._set(config.zone, config.nameservers))
        logger.info(f"Set nameservers for {state.zone}: {', '.join(state.nameservers)}")
        return state

    def update(self, state: NameserversState, config: NameserversState) -> NameserversState:
        """Replace the nameservers of a domain with the desired list."""
        return self.create(config)

    def read(self, state: NameserversState) -> Optional[NameserversState]:
        """Refresh the nameserver list; all other domain fields are ignored."""
        zone = state.zone or state.id
        try:
            domain = self._call("GetDomain", self.dns_client.get_domain, zone)
        except RemoteCallError as e:
            if e.not_found:
                logger.warning(f"Domain {zone} no longer exists, dropping its nameservers")
                return None
            raise

        refreshed = from_domain(domain)
        return NameserversState(
            zone=state.zone or refreshed.zone,
            nameservers=refreshed.nameservers,
            id=state.id or refreshed.id,
        )

    def delete(self, state: NameserversState) -> None:
        """Reset the domain to the default nameservers."""
        zone = state.id or state.zone
        self._set(zone, DEFAULT_NAMESERVERS)
        logger.info(f"Reset nameservers for {zone} to defaults")
        state.id = ""

    def import_state(self, identifier: str) -> List[NameserversState]:
        """Import the nameservers of a domain given its bare zone name."""
        domain = self._call("GetDomain", self.dns_client.get_domain, identifier)
        return [from_domain(domain)]
