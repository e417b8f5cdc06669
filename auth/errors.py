"""
Error taxonomy for the authentication core.

Two layers:
- internal failure kinds (PasswordError, TokenError, RefreshTokenError) that
  say exactly *why* something failed. They are logged and asserted on in
  tests but never rendered to a client.
- external errors (ServiceError subclasses) that carry an HTTP status, a
  stable code and a generic message. The orchestrator collapses internal
  kinds into these.
"""
from __future__ import annotations

import enum


class PasswordErrorKind(enum.Enum):
    EMPTY_PASSWORD = "empty_password"
    CREDENTIAL_NOT_SET = "credential_not_set"
    MISMATCH = "mismatch"
    MALFORMED_HASH = "malformed_hash"


class TokenErrorKind(enum.Enum):
    MALFORMED = "malformed"
    INVALID_SIGNATURE = "invalid_signature"
    EXPIRED = "expired"


class RefreshTokenErrorKind(enum.Enum):
    NOT_FOUND = "not_found"
    EXPIRED = "expired"
    REVOKED = "revoked"


class _KindError(Exception):
    """Base for internal errors tagged with a kind enum."""

    def __init__(self, kind: enum.Enum, detail: str | None = None):
        self.kind = kind
        self.detail = detail
        super().__init__(detail or kind.value)


class PasswordError(_KindError):
    kind: PasswordErrorKind


class TokenError(_KindError):
    kind: TokenErrorKind


class RefreshTokenError(_KindError):
    kind: RefreshTokenErrorKind


class ServiceError(Exception):
    """An error that is safe to show to a client."""

    status = 500
    code = "INTERNAL_ERROR"
    message = "An unexpected error occurred"

    def __init__(self, message: str | None = None, details: dict | None = None):
        if message is not None:
            self.message = message
        self.details = details
        super().__init__(self.message)


class ValidationFailed(ServiceError):
    status = 400
    code = "VALIDATION_ERROR"
    message = "Invalid input"


class AuthenticationError(ServiceError):
    status = 401
    code = "UNAUTHORIZED"
    message = "Unauthorized"


class InvalidCredentials(AuthenticationError):
    code = "INVALID_CREDENTIALS"
    message = "invalid email or password"


class Unauthorized(AuthenticationError):
    message = "invalid or expired token"


class Forbidden(ServiceError):
    status = 403
    code = "FORBIDDEN"
    message = "Forbidden"


class NotFound(ServiceError):
    status = 404
    code = "NOT_FOUND"
    message = "Resource not found"


class InternalError(ServiceError):
    pass
