"""
Errors raised by the name.com resource manager.

Providers raise APIError/NotFoundError; the resource managers wrap those in
RemoteCallError tagged with the outbound operation name.
"""

from typing import Optional


class NameComError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(NameComError):
    """Invalid provider configuration or resource definitions."""


class APIError(NameComError):
    """A failed call to the registrar API."""

    def __init__(self, message: str, status_code: Optional[int] = None, details: str = ""):
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self._format())

    def _format(self) -> str:
        text = self.message
        if self.status_code is not None:
            text = f"{self.status_code}: {text}"
        if self.details:
            text = f"{text} ({self.details})"
        return text


class NotFoundError(APIError):
    """The requested entity does not exist on the remote side."""


class RemoteCallError(NameComError):
    """Wraps any outbound client failure with the operation that issued it."""

    def __init__(self, operation: str, cause: Exception):
        self.operation = operation
        self.cause = cause
        super().__init__(f"Error {operation}: {cause}")

    @property
    def not_found(self) -> bool:
        return isinstance(self.cause, NotFoundError)


class IdentifierFormatError(NameComError, ValueError):
    """Malformed import identifier or non-numeric record id."""


class UnsupportedOperationError(NameComError):
    """The resource type does not support the requested lifecycle operation."""


class MissingPreconditionError(NameComError):
    """An operation was attempted without the state it needs."""


class FieldAssignmentError(NameComError):
    """A response field could not be written into resource state."""

    def __init__(self, field: str, value=None):
        self.field = field
        self.value = value
        super().__init__(f"Error setting {field}: {value!r}")
