"""
AuthService: login, token refresh, revocation and request authentication.

This is the boundary between the internal failure kinds (PasswordError,
TokenError, RefreshTokenError) and what a client may see. Every login failure
becomes InvalidCredentials and every token failure becomes Unauthorized, so
a caller can never tell an unknown email from a wrong password or an expired
token from a forged one. The internal kind is logged and kept as __cause__.

Argon2 is CPU and memory heavy, so hashing and verification run on a small
worker pool owned by the service. The pool size caps how many of them run at
once regardless of how many request threads are active.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import timedelta

from argon2.exceptions import HashingError

from auth.errors import (
    InternalError,
    InvalidCredentials,
    NotFound,
    PasswordError,
    RefreshTokenError,
    TokenError,
    Unauthorized,
    ValidationFailed,
)
from auth.passwords import dummy_verify, hash_password, verify_password
from auth.refresh_tokens import REFRESH_TOKEN_TTL, RefreshTokenManager
from auth.tokens import DEFAULT_ISSUER, make_jwt, validate_jwt

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TTL = timedelta(hours=1)


@dataclass
class LoginResult:
    user: object
    access_token: str
    refresh_token: str

    @property
    def user_id(self) -> str:
        return str(self.user.id)


class AuthService:
    def __init__(
        self,
        store,
        secret: str,
        issuer: str = DEFAULT_ISSUER,
        access_ttl: timedelta = ACCESS_TOKEN_TTL,
        refresh_ttl: timedelta = REFRESH_TOKEN_TTL,
        hash_workers: int = 4,
    ):
        if not secret:
            raise ValueError("a signing secret is required")
        self.store = store
        self._secret = secret
        self.issuer = issuer
        self.access_ttl = access_ttl
        self.refresh_tokens = RefreshTokenManager(store, ttl=refresh_ttl)
        self._hash_pool = ThreadPoolExecutor(max_workers=hash_workers, thread_name_prefix="pwhash")

    def _offload(self, fn, *args):
        return self._hash_pool.submit(fn, *args).result()

    def _hash(self, password: str) -> str:
        try:
            return self._offload(hash_password, password)
        except PasswordError as exc:
            raise ValidationFailed("password cannot be empty") from exc
        except HashingError as exc:
            logger.exception("password hashing failed")
            raise InternalError() from exc

    def issue_access_token(self, user_id) -> str:
        return make_jwt(user_id, self._secret, self.access_ttl, issuer=self.issuer)

    # -- registration / profile -------------------------------------------

    def register(self, email: str, password: str):
        """Create a user with a hashed password. Returns the new user."""
        if not email:
            raise ValidationFailed("email cannot be empty")
        pw_hash = self._hash(password)
        return self.store.create_user_with_credential(email, pw_hash)

    def update_credentials(self, user_id: str, email: str, password: str):
        """Replace the email and password of user_id (the authenticated subject)."""
        if not email:
            raise ValidationFailed("email cannot be empty")
        pw_hash = self._hash(password)
        user = self.store.update_user_credential(user_id, email, pw_hash)
        if user is None:
            raise NotFound("User not found")
        return user

    # -- sessions -----------------------------------------------------------

    def login(self, email: str, password: str) -> LoginResult:
        if not email or not password:
            raise ValidationFailed("email and password are required")

        user = self.store.get_user_by_email(email)
        if user is None:
            self._offload(dummy_verify, password)
            logger.info("login failed: unknown email")
            raise InvalidCredentials()

        try:
            self._offload(verify_password, password, user.password_hash)
        except PasswordError as exc:
            logger.info("login failed for user %s: %s", user.id, exc.kind.value)
            raise InvalidCredentials() from exc

        access_token = self.issue_access_token(user.id)
        refresh_token = self.refresh_tokens.create(str(user.id))
        logger.info("user %s logged in", user.id)
        return LoginResult(user=user, access_token=access_token, refresh_token=refresh_token)

    def refresh(self, refresh_token: str) -> str:
        """Mint a new access token. The refresh token itself is not rotated."""
        try:
            user_id = self.refresh_tokens.lookup(refresh_token)
        except RefreshTokenError as exc:
            logger.info("refresh rejected: %s", exc.kind.value)
            raise Unauthorized() from exc
        return self.issue_access_token(user_id)

    def revoke(self, refresh_token: str) -> None:
        try:
            self.refresh_tokens.revoke(refresh_token)
        except RefreshTokenError as exc:
            logger.info("revoke rejected: %s", exc.kind.value)
            raise Unauthorized() from exc

    def authenticate(self, access_token: str) -> str:
        """Return the user id asserted by a valid access token."""
        try:
            return validate_jwt(access_token, self._secret, issuer=self.issuer)
        except TokenError as exc:
            logger.info("access token rejected: %s", exc.kind.value)
            raise Unauthorized() from exc

    def close(self) -> None:
        self._hash_pool.shutdown(wait=True)
