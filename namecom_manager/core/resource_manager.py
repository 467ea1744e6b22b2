"""
Resource Manager - Lifecycle contract shared by all resource types

Each resource type implements create/read/update/delete/import against the
DNS client, plus the normalization its change detection relies on.
"""

import copy
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, fields
from typing import Any, Callable, Dict, List, Optional, Tuple, Type

from ..errors import APIError, RemoteCallError, UnsupportedOperationError
from .models import ResourceState

logger = logging.getLogger(__name__)


@dataclass
class ResourceDiff:
    """Field changes between a current and a desired state."""

    changes: Dict[str, Tuple[Any, Any]] = field(default_factory=dict)
    requires_replace: bool = False

    @property
    def has_changes(self) -> bool:
        return bool(self.changes)

    @property
    def action(self) -> str:
        if not self.changes:
            return "no-op"
        return "replace" if self.requires_replace else "update"


class ResourceManager(ABC):
    """Base class for the resource lifecycle adapters."""

    resource_type: str = ""
    state_class: Type[ResourceState] = ResourceState
    # Fields owned by the remote side; never part of a diff.
    computed_fields: Tuple[str, ...] = ("id",)
    # Fields whose change destroys and recreates the resource.
    force_new_fields: Tuple[str, ...] = ()
    supports_update: bool = True

    def __init__(self, dns_client):
        """Initialize resource manager with DNS client."""
        self.dns_client = dns_client

    def _call(self, operation: str, func: Callable, *args):
        """Invoke the client, wrapping any failure with the operation name."""
        try:
            return func(*args)
        except APIError as e:
            logger.error(f"{self.resource_type}: {operation} failed: {e}")
            raise RemoteCallError(operation, e) from e

    @abstractmethod
    def create(self, config: ResourceState) -> ResourceState:
        """Create the resource and return its state."""
        pass

    @abstractmethod
    def read(self, state: ResourceState) -> Optional[ResourceState]:
        """Refresh the state, or return None if the resource no longer exists."""
        pass

    def update(self, state: ResourceState, config: ResourceState) -> ResourceState:
        """Apply the desired config to an existing resource."""
        raise UnsupportedOperationError(f"{self.resource_type} does not support in-place updates")

    @abstractmethod
    def delete(self, state: ResourceState) -> None:
        """Delete the resource and clear the state's identifier."""
        pass

    @abstractmethod
    def import_state(self, identifier: str) -> List[ResourceState]:
        """Adopt an existing remote resource by its import identifier."""
        pass

    def normalize(self, state: ResourceState, current: Optional[ResourceState] = None) -> ResourceState:
        """Return the canonical form of a state used for comparison."""
        return copy.deepcopy(state)

    def config_fields(self) -> List[str]:
        return [f.name for f in fields(self.state_class) if f.name not in self.computed_fields]

    def diff(self, current: ResourceState, desired: ResourceState) -> ResourceDiff:
        """
        Compare a current state with a desired config.

        Args:
            current: State as last read from the remote side
            desired: Desired configuration

        Returns:
            The field changes, and whether they require replacement
        """
        old = self.normalize(current)
        new = self.normalize(desired, current)

        changes = {}
        for name in self.config_fields():
            old_value, new_value = getattr(old, name), getattr(new, name)
            if old_value != new_value:
                changes[name] = (old_value, new_value)

        requires_replace = bool(changes) and (
            not self.supports_update or any(name in self.force_new_fields for name in changes)
        )
        return ResourceDiff(changes=changes, requires_replace=requires_replace)

    def from_config(self, data: Dict) -> ResourceState:
        return self.state_class.from_dict(data)
