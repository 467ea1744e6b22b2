"""
State Store - Persists resource states between runs

The state file is a YAML mapping of resource address ("type.name") to the
fields of its last known state.
"""

import logging
import os
from typing import Dict

import yaml

from ..errors import ConfigurationError

logger = logging.getLogger(__name__)


class StateStore:
    """Loads and saves resource state to a YAML file."""

    def __init__(self, path: str):
        self.path = path

    def load(self) -> Dict[str, Dict]:
        """Load the state file; a missing file is an empty state."""
        if not os.path.exists(self.path):
            logger.info(f"State file {self.path} not found, starting from empty state")
            return {}

        try:
            with open(self.path, "r") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Error parsing state file {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"State file {self.path} must contain a mapping")
        logger.info(f"Loaded {len(data)} resources from state file {self.path}")
        return data

    def save(self, state: Dict[str, Dict]) -> None:
        """Write the state file atomically."""
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w") as f:
            yaml.safe_dump(state, f, default_flow_style=False, sort_keys=True)
        os.replace(tmp_path, self.path)
        logger.info(f"Saved {len(state)} resources to state file {self.path}")
