"""
Password hashing via argon2-cffi (Argon2id, library default parameters).

The encoded hash is self-contained: "$argon2id$v=19$m=...,t=...,p=...$<salt>$<digest>".
A fresh random salt is drawn on every call to hash_password, so hashing the
same password twice yields two different strings that both verify.

A user without a configured password stores None in place of a hash.
"""
from __future__ import annotations

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

from auth.errors import PasswordError, PasswordErrorKind

ph = PasswordHasher()

# Verified against on every failure path that would otherwise return early,
# so "malformed hash" and "no credential" take as long as "wrong password".
_DUMMY_HASH = ph.hash("chirpy-timing-equalizer")


def _equalize(password: str) -> None:
    try:
        ph.verify(_DUMMY_HASH, password or "x")
    except VerifyMismatchError:
        pass


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2id."""
    if not password:
        raise PasswordError(PasswordErrorKind.EMPTY_PASSWORD)
    return ph.hash(password)


def verify_password(password: str, password_hash: str | None) -> bool:
    """Verify a plaintext password against a stored hash.

    Returns True on success and raises PasswordError otherwise:
    EMPTY_PASSWORD, CREDENTIAL_NOT_SET (password_hash is None),
    MISMATCH or MALFORMED_HASH.
    """
    if not password:
        raise PasswordError(PasswordErrorKind.EMPTY_PASSWORD)
    if password_hash is None:
        _equalize(password)
        raise PasswordError(PasswordErrorKind.CREDENTIAL_NOT_SET)
    try:
        return ph.verify(password_hash, password)
    except VerifyMismatchError:
        raise PasswordError(PasswordErrorKind.MISMATCH) from None
    except (InvalidHashError, ValueError) as exc:
        # argon2 rejects an unparseable header before doing any work
        _equalize(password)
        raise PasswordError(PasswordErrorKind.MALFORMED_HASH, str(exc)) from None
    except VerificationError as exc:
        # header parsed, argon2 itself rejected the encoded body
        raise PasswordError(PasswordErrorKind.MALFORMED_HASH, str(exc)) from None


def dummy_verify(password: str) -> None:
    """Spend one Argon2 verification without a real hash (unknown accounts)."""
    _equalize(password)
