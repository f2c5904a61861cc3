from __future__ import annotations

import hmac
import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .errors import UnauthorizedError
from .settings import get_settings

logger = logging.getLogger(__name__)

_security = HTTPBearer(auto_error=False)


# PUBLIC_INTERFACE
class Authenticator(ABC):
    """Decides whether a bearer token identifies an authenticated caller."""

    @abstractmethod
    def authenticate(self, token: str) -> Optional[str]:
        """Return the principal name for a valid token, or None."""


class StaticTokenAuthenticator(Authenticator):
    """
    Accepts a fixed set of tokens, typically from the API_TOKENS env var.
    An empty set rejects every token.
    """

    def __init__(self, tokens: List[str]) -> None:
        self._tokens = list(tokens)

    def authenticate(self, token: str) -> Optional[str]:
        for index, candidate in enumerate(self._tokens):
            if hmac.compare_digest(candidate.encode(), token.encode()):
                return f"token-{index}"
        return None


# PUBLIC_INTERFACE
def get_authenticator() -> Authenticator:
    """
    Return the configured Authenticator.

    Tests and alternative deployments swap it via
    ``app.dependency_overrides[get_authenticator]``.
    """
    return StaticTokenAuthenticator(get_settings().api_tokens)


# PUBLIC_INTERFACE
async def require_auth(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(_security),
    authenticator: Authenticator = Depends(get_authenticator),
) -> str:
    """
    Enforce bearer authentication on protected routes.

    Usage:
        @router.post("/", dependencies=[Depends(require_auth)])

    Raises:
        UnauthorizedError if the credential is missing or rejected.
    """
    if creds is None or not creds.credentials:
        raise UnauthorizedError("Not authenticated")

    principal = authenticator.authenticate(creds.credentials)
    if principal is None:
        logger.info("Rejected bearer credential")
        raise UnauthorizedError("Invalid authentication credentials")
    return principal


def is_protected(request: Request) -> bool:
    """Return True when the matched route depends on require_auth."""
    route = request.scope.get("route")
    return any(dep.dependency is require_auth for dep in getattr(route, "dependencies", []))


# PUBLIC_INTERFACE
async def authorize_request(request: Request) -> None:
    """
    Run the require_auth check outside of dependency resolution.

    FastAPI decodes the JSON body before it resolves dependencies, so a
    malformed body on a protected route fails before require_auth runs.
    Exception handlers call this to keep the 401 ahead of body errors.
    Honors ``app.dependency_overrides[get_authenticator]``.

    Raises:
        UnauthorizedError if the route is protected and the credential is
        missing or rejected.
    """
    if not is_protected(request):
        return
    factory = request.app.dependency_overrides.get(get_authenticator, get_authenticator)
    await require_auth(await _security(request), factory())
