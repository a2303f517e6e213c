"""Domain exceptions.

Errors that abort a feed request. Entity-level problems (unpublished
products, missing terms, unpriced variations) are never raised; they are
skipped or degraded where they occur.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain exceptions.

    All domain errors should inherit from this class to allow
    catching domain-specific errors at the application layer.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Authorization Errors
# ============================================================================


class AuthorizationError(DomainError):
    """Base class for access gate failures."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        response_body: str = "",
        error: Any = None,
    ) -> None:
        """Initialize authorization error.

        Args:
            message: Human-readable error message.
            response_body: Raw body returned by the oracle, if any.
            error: Error value reported to the caller.
        """
        super().__init__(
            message,
            details={"response": response_body, "error": error},
        )
        self.response_body = response_body
        self.error = error


class AuthTransportError(AuthorizationError):
    """Raised when the oracle cannot be reached or answers with garbage."""

    status_code = 500

    def __init__(self, reason: str) -> None:
        """Initialize transport error.

        Args:
            reason: Description of the transport failure.
        """
        super().__init__(
            f"Token validation request failed: {reason}",
            response_body="",
            error=reason,
        )


class AuthRejectedError(AuthorizationError):
    """Raised when the oracle explicitly denies the token."""

    status_code = 401

    def __init__(self, response_body: str, error: Any = None) -> None:
        """Initialize rejection error.

        Args:
            response_body: Raw body returned by the oracle.
            error: The oracle's embedded error field.
        """
        super().__init__(
            f"Token rejected: {error}",
            response_body=response_body,
            error=error,
        )
