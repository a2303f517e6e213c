"""Domain layer.

Exceptions shared by the feed pipeline and the API layer.
"""

from catalogfeed.domain.exceptions import (
    AuthorizationError,
    AuthRejectedError,
    AuthTransportError,
    DomainError,
)

__all__ = [
    "AuthorizationError",
    "AuthRejectedError",
    "AuthTransportError",
    "DomainError",
]
