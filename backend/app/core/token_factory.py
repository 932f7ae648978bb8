"""Signed bearer tokens for FolderHub write access.

Compact HS256 JWTs built on stdlib ``hmac``. ``create_token`` is used by
``POST /api/auth/token``; ``decode_token`` by the ``require_auth`` dependency
and ``GET /api/auth/validate``.
"""

import base64
import hashlib
import hmac
import json
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

ISSUER = "folderhub"
SUPPORTED_ALGORITHMS = {"HS256": hashlib.sha256}


@dataclass(frozen=True)
class TokenPayload:
    """Claims carried by a verified token."""
    sub: str
    role: str
    exp: datetime


def _urlsafe_encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _urlsafe_decode(segment: str) -> bytes:
    return base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4))


def _sign(secret: str, signing_input: str, algorithm: str) -> str:
    digest = SUPPORTED_ALGORITHMS[algorithm]
    mac = hmac.new(secret.encode("utf-8"), signing_input.encode("ascii"), digest)
    return _urlsafe_encode(mac.digest())


def create_token(
    subject: str,
    role: str,
    secret: str,
    algorithm: str = "HS256",
    expires_hours: int = 24,
    now: Optional[float] = None,
) -> str:
    """Issue a token for *subject* valid for *expires_hours*.

    Raises ValueError for algorithms other than HS256.
    """
    if algorithm not in SUPPORTED_ALGORITHMS:
        raise ValueError(f"Unsupported algorithm: {algorithm}")

    issued_at = int(time.time() if now is None else now)
    header = {"alg": algorithm, "typ": "JWT"}
    claims = {
        "iss": ISSUER,
        "sub": subject,
        "role": role,
        "iat": issued_at,
        "exp": issued_at + int(expires_hours * 3600),
    }
    signing_input = ".".join(
        _urlsafe_encode(json.dumps(part, separators=(",", ":")).encode("utf-8"))
        for part in (header, claims)
    )
    return f"{signing_input}.{_sign(secret, signing_input, algorithm)}"


def decode_token(
    token: str,
    secret: str,
    algorithm: str = "HS256",
    now: Optional[float] = None,
) -> Optional[TokenPayload]:
    """Verify *token* and return its claims, or None when it is not acceptable.

    Rejects malformed tokens, a header algorithm that differs from
    *algorithm*, bad signatures, foreign issuers and expired tokens.
    """
    if algorithm not in SUPPORTED_ALGORITHMS:
        return None
    try:
        header_segment, claims_segment, signature = token.split(".")
        header = json.loads(_urlsafe_decode(header_segment))
        if header.get("alg") != algorithm:
            return None

        expected = _sign(secret, f"{header_segment}.{claims_segment}", algorithm)
        if not hmac.compare_digest(expected.encode("ascii"), signature.encode("ascii")):
            return None

        claims = json.loads(_urlsafe_decode(claims_segment))
        if claims.get("iss") != ISSUER:
            return None
        exp = int(claims["exp"])
        if (time.time() if now is None else now) >= exp:
            return None

        return TokenPayload(
            sub=str(claims.get("sub", "")),
            role=str(claims.get("role", "")),
            exp=datetime.fromtimestamp(exp, tz=timezone.utc),
        )
    except (ValueError, KeyError, TypeError, AttributeError, UnicodeError):
        # json.JSONDecodeError and binascii.Error are ValueErrors
        return None
