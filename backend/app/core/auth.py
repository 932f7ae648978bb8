"""Authentication module exposing FastAPI dependencies.

Public interface:
    ``require_auth`` - returns AuthContext or raises 401.

When ``settings.auth_enabled`` is False the dependency returns an anonymous
context so the development workflow is unbroken. Read endpoints never
require a token.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import settings
from .token_factory import TokenPayload, decode_token
from ..exceptions import AuthenticationError

logger = logging.getLogger(__name__)

_bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthContext:
    """Identity of the caller, resolved from a bearer token."""

    subject: str
    role: str
    expires_at: Optional[datetime] = None


_ANONYMOUS = AuthContext(subject="anonymous", role="admin")


def get_bearer_scheme() -> HTTPBearer:
    """Expose the security scheme so OpenAPI picks it up."""
    return _bearer_scheme


def resolve_token(token: str) -> TokenPayload:
    """Decode *token* with the configured secret. Raises 401 when invalid or expired."""
    payload = decode_token(token, settings.jwt_secret_key, settings.jwt_algorithm)
    if payload is None:
        raise AuthenticationError("Invalid or expired token")
    return payload


def require_auth(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
) -> AuthContext:
    """Require a valid JWT and return the caller's AuthContext.

    When ``AUTH_ENABLED=false`` returns the anonymous context.
    """
    if not settings.auth_enabled:
        return _ANONYMOUS

    if credentials is None:
        raise AuthenticationError("Missing authentication token")

    payload = resolve_token(credentials.credentials)
    return AuthContext(subject=payload.sub, role=payload.role, expires_at=payload.exp)
