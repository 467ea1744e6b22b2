"""
Utility functions and helpers.

This package contains utility functions for validation
and identifier parsing.
"""

from .validators import (
    split_import_id,
    validate_answer,
    validate_fqdn,
    validate_host,
    validate_record_type,
    validate_zone_name,
)

__all__ = [
    "split_import_id",
    "validate_answer",
    "validate_fqdn",
    "validate_host",
    "validate_record_type",
    "validate_zone_name",
]
