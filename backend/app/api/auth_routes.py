"""Authentication API endpoints.

Public endpoints:
    POST /api/auth/token     - exchange the configured API key for a JWT
    GET  /api/auth/validate  - check a bearer token and return its claims
"""

import hmac
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials
from pydantic import BaseModel, Field

from ..core.auth import get_bearer_scheme, resolve_token
from ..core.config import settings
from ..core.token_factory import create_token
from ..exceptions import AuthenticationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


# --- Request/Response schemas ---


class TokenRequest(BaseModel):
    api_key: str = Field("", description="Must equal API_KEY when one is configured")
    subject: str = Field("api-client", min_length=1, max_length=100)

    model_config = {
        "json_schema_extra": {
            "examples": [{"api_key": "my-api-key", "subject": "uploader"}]
        }
    }


class TokenResponse(BaseModel):
    success: bool = True
    token: str
    expires_at: datetime


class ValidateResponse(BaseModel):
    valid: bool
    subject: str
    role: str
    expires_at: datetime


# --- Endpoints ---


@router.post(
    "/token",
    response_model=TokenResponse,
    summary="Issue a bearer token",
    description="When API_KEY is configured the request must present it.",
)
def issue_token(body: TokenRequest):
    if settings.api_key and not hmac.compare_digest(body.api_key.encode(), settings.api_key.encode()):
        logger.warning("Token request with invalid API key", extra={"subject": body.subject})
        raise AuthenticationError("Invalid API key")

    token = create_token(
        subject=body.subject,
        role="service",
        secret=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        expires_hours=settings.jwt_expires_hours,
    )
    expires_at = datetime.now(timezone.utc) + timedelta(hours=settings.jwt_expires_hours)
    logger.info("Token issued", extra={"subject": body.subject})
    return TokenResponse(token=token, expires_at=expires_at.replace(microsecond=0))


@router.get(
    "/validate",
    response_model=ValidateResponse,
    summary="Validate a bearer token",
)
def validate_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(get_bearer_scheme()),
):
    if credentials is None:
        raise AuthenticationError("Missing authentication token")
    payload = resolve_token(credentials.credentials)
    return ValidateResponse(
        valid=True,
        subject=payload.sub,
        role=payload.role,
        expires_at=payload.exp,
    )
