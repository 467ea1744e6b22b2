import logging
from typing import Dict, List

import yaml

from ..errors import ConfigurationError
from ..utils.validators import (
    validate_answer,
    validate_fqdn,
    validate_host,
    validate_record_type,
    validate_zone_name,
)

logger = logging.getLogger(__name__)

RESOURCE_FIELDS = {
    "namecom_record": ("zone", "host", "type", "answer", "ttl", "priority"),
    "namecom_nameservers": ("zone", "nameservers"),
    "namecom_dnssec": ("zone", "key_tag", "algorithm", "digest_type", "digest"),
}
RESOURCE_TYPES = tuple(RESOURCE_FIELDS)


class ResourceParser:
    """Parses and validates a YAML file of desired resources."""

    def __init__(self, path: str):
        self.path = path

    def parse(self) -> Dict[str, Dict]:
        """Parse the resources file into {"type.name": fields}."""
        try:
            with open(self.path, "r") as f:
                document = yaml.safe_load(f) or {}
        except FileNotFoundError:
            raise FileNotFoundError(f"Resources file not found: {self.path}")
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Error parsing resources file {self.path}: {e}") from e

        resources = self.parse_document(document)
        logger.info(f"Successfully parsed {len(resources)} resources from {self.path}")
        return resources

    def parse_document(self, document: Dict) -> Dict[str, Dict]:
        if not isinstance(document, dict):
            raise ConfigurationError("Resources file must contain a mapping")

        declared = document.get("resources") or {}
        if not isinstance(declared, dict):
            raise ConfigurationError("'resources' must be a mapping of resource types to definitions")

        resources = {}
        errors = []
        for resource_type, entries in declared.items():
            if resource_type not in RESOURCE_TYPES:
                errors.append(f"Unknown resource type '{resource_type}'")
                continue
            if not isinstance(entries, dict):
                errors.append(f"{resource_type}: expected a mapping of names to definitions")
                continue

            for name, fields in entries.items():
                address = f"{resource_type}.{name}"
                if not isinstance(fields, dict):
                    errors.append(f"{address}: definition must be a mapping")
                    continue
                problems = self.validate(resource_type, fields)
                errors.extend(f"{address}: {problem}" for problem in problems)
                if not problems:
                    resources[address] = dict(fields)

        if errors:
            for error in errors:
                logger.error(error)
            raise ConfigurationError("Invalid resource definitions:\n  " + "\n  ".join(errors))

        return resources

    def validate(self, resource_type: str, fields: Dict) -> List[str]:
        """Validate one resource definition and return any problems."""
        errors = [
            f"unknown field {key!r}" for key in fields if key not in RESOURCE_FIELDS[resource_type]
        ]

        zone = fields.get("zone")
        if not validate_zone_name(zone):
            errors.append(f"invalid zone {zone!r}")

        if resource_type == "namecom_record":
            errors.extend(self._validate_record(fields))
        elif resource_type == "namecom_nameservers":
            nameservers = fields.get("nameservers")
            if not isinstance(nameservers, list) or not nameservers:
                errors.append("nameservers must be a non-empty list")
            else:
                errors.extend(
                    f"invalid nameserver {ns!r}" for ns in nameservers if not validate_fqdn(ns)
                )
        elif resource_type == "namecom_dnssec":
            for name in ("key_tag", "algorithm", "digest_type"):
                if not self._is_non_negative_int(fields.get(name)):
                    errors.append(f"{name} must be a non-negative integer")
            digest = fields.get("digest")
            if not isinstance(digest, str) or not digest:
                errors.append("digest must be a non-empty string")

        return errors

    def _validate_record(self, fields: Dict) -> List[str]:
        errors = []

        record_type = fields.get("type")
        if not validate_record_type(record_type):
            errors.append(f"type {record_type!r} must be one of A, AAAA, ANAME, CNAME, MX, NS, SRV, TXT")
        else:
            problem = validate_answer(record_type, fields.get("answer"))
            if problem:
                errors.append(problem)

        host = fields.get("host", "@")
        if not validate_host(host):
            errors.append(f"invalid host {host!r}")

        for name in ("ttl", "priority"):
            if name in fields and not self._is_non_negative_int(fields[name]):
                errors.append(f"{name} must be a non-negative integer")

        return errors

    @staticmethod
    def _is_non_negative_int(value) -> bool:
        return isinstance(value, int) and not isinstance(value, bool) and value >= 0
