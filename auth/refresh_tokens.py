"""
Refresh tokens: long-lived opaque values persisted server side.

A token is Active until it expires or is revoked; both are terminal. Tokens
are never deleted, and using one to mint an access token leaves it untouched
(no rotation), so it stays usable until expiry or explicit revocation.
"""
from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta, timezone

logger = logging.getLogger(__name__)

REFRESH_TOKEN_TTL = timedelta(days=60)


def make_refresh_token() -> str:
    """256 random bits, hex encoded (64 chars)."""
    return secrets.token_hex(32)


class RefreshTokenManager:
    """Create, look up and revoke refresh tokens through a storage backend.

    The backend must provide create_refresh_token, get_active_refresh_token_owner
    and revoke_refresh_token (see models.db_storage.DBStorage). Lookup and revoke
    raise auth.errors.RefreshTokenError.
    """

    def __init__(self, store, ttl: timedelta = REFRESH_TOKEN_TTL):
        self.store = store
        self.ttl = ttl

    def create(self, user_id: str, now: datetime | None = None) -> str:
        now = now or datetime.now(timezone.utc)
        token = make_refresh_token()
        self.store.create_refresh_token(token, user_id, now + self.ttl)
        logger.debug("refresh token issued for user %s", user_id)
        return token

    def lookup(self, token: str, now: datetime | None = None) -> str:
        """Return the owning user id of an active token."""
        return self.store.get_active_refresh_token_owner(token, now=now)

    def revoke(self, token: str, now: datetime | None = None) -> None:
        """Mark a token revoked. Revoking an already revoked token is a no-op."""
        self.store.revoke_refresh_token(token, now=now)
