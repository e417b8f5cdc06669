"""
Access tokens: short-lived JWTs signed with HS256 via PyJWT.

Claims:
- iss: service name (JWT_ISSUER, "chirpy" by default)
- sub: user id (UUID string)
- iat / exp: issued-at and expiry, in whole seconds

Validation never touches the database. The secret is always passed in by
the caller; nothing here reads configuration.

Also parses the two Authorization schemes the API accepts: "Bearer <token>"
for users and "ApiKey <key>" for the payment provider webhook.
"""
from __future__ import annotations

import hmac
import uuid
from datetime import datetime, timedelta, timezone
from typing import Mapping

import jwt

from auth.errors import TokenError, TokenErrorKind, Unauthorized

ALGORITHM = "HS256"
DEFAULT_ISSUER = "chirpy"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def make_jwt(subject_id, secret: str, expires_in: timedelta, issuer: str = DEFAULT_ISSUER) -> str:
    """Issue a signed access token for subject_id, valid for expires_in."""
    now = _now()
    payload = {
        "iss": issuer,
        "sub": str(subject_id),
        "iat": int(now.timestamp()),
        "exp": int((now + expires_in).timestamp()),
    }
    return jwt.encode(payload, secret, algorithm=ALGORITHM)


def validate_jwt(token: str, secret: str, issuer: str = DEFAULT_ISSUER) -> str:
    """
    Validate an access token and return its subject (user id string).
    Raises TokenError with kind MALFORMED, INVALID_SIGNATURE or EXPIRED.
    """
    try:
        header = jwt.get_unverified_header(token)
    except jwt.InvalidTokenError as exc:
        raise TokenError(TokenErrorKind.MALFORMED, str(exc)) from None

    # Reject alg substitution ("none", RS256 with the secret as a public key, ...)
    # before the signature is looked at.
    if header.get("alg") != ALGORITHM:
        raise TokenError(TokenErrorKind.MALFORMED, f"unexpected alg {header.get('alg')!r}")

    try:
        claims = jwt.decode(
            token,
            secret,
            algorithms=[ALGORITHM],
            issuer=issuer,
            options={"require": ["iss", "sub", "iat", "exp"]},
        )
    except jwt.InvalidSignatureError:
        raise TokenError(TokenErrorKind.INVALID_SIGNATURE) from None
    except jwt.ExpiredSignatureError:
        raise TokenError(TokenErrorKind.EXPIRED) from None
    except jwt.InvalidTokenError as exc:
        raise TokenError(TokenErrorKind.MALFORMED, str(exc)) from None

    subject = claims["sub"]
    try:
        return str(uuid.UUID(subject))
    except (TypeError, ValueError, AttributeError):
        raise TokenError(TokenErrorKind.MALFORMED, "subject is not a user id") from None


def get_bearer_token(headers: Mapping[str, str]) -> str:
    """Extract <token> from an "Authorization: Bearer <token>" header."""
    auth = headers.get("Authorization", "") or ""
    scheme, _, token = auth.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise Unauthorized()
    return token


def get_api_key(headers: Mapping[str, str]) -> str:
    """Extract <key> from an "Authorization: ApiKey <key>" header."""
    auth = headers.get("Authorization", "") or ""
    scheme, _, key = auth.partition(" ")
    key = key.strip()
    if scheme.lower() != "apikey" or not key:
        raise Unauthorized()
    return key


def api_key_matches(provided: str, expected: str) -> bool:
    """Constant-time comparison; an unconfigured key never matches."""
    if not expected:
        return False
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))
