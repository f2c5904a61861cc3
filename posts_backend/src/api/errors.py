from __future__ import annotations

from typing import Any, Dict, List, Optional

ErrorRecord = Dict[str, Any]


# PUBLIC_INTERFACE
class ApiError(Exception):
    """
    Base class for errors that map onto an HTTP error response.

    The response body is always ``{"errors": [...]}`` where each record may
    carry ``field``, ``rule``, ``args`` and ``message`` keys.
    """

    status_code: int = 500

    def __init__(self, errors: List[ErrorRecord], headers: Optional[Dict[str, str]] = None) -> None:
        super().__init__(errors[0].get("message") if errors else self.__class__.__name__)
        self.errors = errors
        self.headers = headers

    def to_body(self) -> Dict[str, List[ErrorRecord]]:
        return {"errors": self.errors}


# PUBLIC_INTERFACE
class UnauthorizedError(ApiError):
    """Missing or rejected credential on a protected operation."""

    status_code = 401

    def __init__(self, message: str = "Not authenticated") -> None:
        super().__init__([{"message": message}], headers={"WWW-Authenticate": "Bearer"})


# PUBLIC_INTERFACE
class NotFoundError(ApiError):
    """Referenced resource does not exist in storage."""

    status_code = 404

    def __init__(self, message: str = "Post not found") -> None:
        super().__init__([{"message": message}])


# PUBLIC_INTERFACE
class PostValidationError(ApiError):
    """One or more field rule violations, all reported together."""

    status_code = 422
