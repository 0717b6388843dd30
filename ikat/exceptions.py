"""Custom exception hierarchy for ikat.

All library-specific exceptions inherit from ``IkatError`` so consumers
can catch ``except IkatError`` to handle any ikat failure.
"""

from __future__ import annotations

from enum import Enum


class Operation(str, Enum):
    """Remote operations that can fail with an ``IkatOperationError``."""

    UPLOAD = "upload"
    LIST = "list"
    REMOVE = "remove"
    DELETE_BUCKET = "deleteBucket"


class IkatError(Exception):
    """Base exception for all ikat errors."""


class TransportError(IkatError):
    """Raised by an HTTP transport when the request never got a response."""


class IkatOperationError(IkatError):
    """A single remote operation failed.

    Carries the failed *operation*, the human-readable *detail* (the
    remote ``message`` field or the transport error text), the HTTP
    *status_code* when the service answered, and the underlying *cause*.
    ``str(err)`` is ``"[<operation>] <detail>"``.
    """

    def __init__(
        self,
        operation: Operation,
        detail: str,
        *,
        status_code: int | None = None,
        cause: BaseException | None = None,
    ) -> None:
        """Store the tag, detail, status and cause."""
        self.operation = operation
        self.detail = detail
        self.status_code = status_code
        self.cause = cause
        super().__init__(f"[{operation.value}] {detail}")


class UnsupportedOperationError(IkatError):
    """Raised when the configured API revision lacks an operation."""


class ConfigurationError(IkatError):
    """Raised when client settings are missing or invalid."""


class InteractiveModeRequiredError(IkatError):
    """Raised when interactive input is needed but disabled."""
