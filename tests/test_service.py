"""AuthService: login, refresh, revoke, authenticate and error collapsing."""
from __future__ import annotations

import threading
from datetime import timedelta

import pytest

import auth.service

from auth import AuthService
from auth.errors import (
    InvalidCredentials,
    NotFound,
    PasswordErrorKind,
    RefreshTokenErrorKind,
    TokenErrorKind,
    Unauthorized,
    ValidationFailed,
)
from auth.tokens import make_jwt
from tests.helpers import PASSWORD


def _login_error(auth_service, email, password) -> InvalidCredentials:
    with pytest.raises(InvalidCredentials) as excinfo:
        auth_service.login(email, password)
    return excinfo.value


class TestConstruction:
    def test_secret_required(self, storage) -> None:
        with pytest.raises(ValueError):
            AuthService(storage, secret="")


class TestRegister:
    def test_register_stores_hash_not_password(self, auth_service) -> None:
        user = auth_service.register("new@b.com", PASSWORD)
        assert user.email == "new@b.com"
        assert user.password_hash.startswith("$argon2id$")
        assert PASSWORD not in user.password_hash

    def test_register_rejects_empty_password(self, auth_service) -> None:
        with pytest.raises(ValidationFailed):
            auth_service.register("new@b.com", "")

    def test_register_rejects_empty_email(self, auth_service) -> None:
        with pytest.raises(ValidationFailed):
            auth_service.register("", PASSWORD)


class TestLogin:
    def test_success_returns_both_tokens(self, auth_service, user) -> None:
        result = auth_service.login("a@b.com", PASSWORD)
        assert result.user_id == user.id
        assert auth_service.authenticate(result.access_token) == user.id
        assert auth_service.refresh_tokens.lookup(result.refresh_token) == user.id

    def test_each_login_is_a_new_session(self, auth_service, user) -> None:
        first = auth_service.login("a@b.com", PASSWORD)
        second = auth_service.login("a@b.com", PASSWORD)
        assert first.refresh_token != second.refresh_token

    def test_unknown_email_and_wrong_password_look_identical(self, auth_service, user) -> None:
        unknown = _login_error(auth_service, "nobody@b.com", PASSWORD)
        wrong = _login_error(auth_service, "a@b.com", "wrong-password")
        assert type(unknown) is type(wrong)
        assert unknown.message == wrong.message
        assert (unknown.status, unknown.code) == (wrong.status, wrong.code) == (401, "INVALID_CREDENTIALS")

    def test_wrong_password_keeps_internal_kind(self, auth_service, user) -> None:
        err = _login_error(auth_service, "a@b.com", "wrong-password")
        assert err.__cause__.kind is PasswordErrorKind.MISMATCH

    def test_account_without_password(self, auth_service, storage) -> None:
        storage.create_user_with_credential("nopass@b.com", None)
        err = _login_error(auth_service, "nopass@b.com", PASSWORD)
        assert err.__cause__.kind is PasswordErrorKind.CREDENTIAL_NOT_SET
        assert err.message == InvalidCredentials.message

    def test_account_with_corrupt_hash(self, auth_service, storage) -> None:
        storage.create_user_with_credential("corrupt@b.com", "not-a-hash")
        err = _login_error(auth_service, "corrupt@b.com", PASSWORD)
        assert err.__cause__.kind is PasswordErrorKind.MALFORMED_HASH

    @pytest.mark.parametrize("email, password", [("", PASSWORD), ("a@b.com", ""), (None, None)])
    def test_missing_fields(self, auth_service, user, email, password) -> None:
        with pytest.raises(ValidationFailed):
            auth_service.login(email, password)


class TestRefresh:
    def test_refresh_issues_access_token_without_rotation(self, auth_service, user) -> None:
        session = auth_service.login("a@b.com", PASSWORD)
        access = auth_service.refresh(session.refresh_token)
        assert auth_service.authenticate(access) == user.id
        # the same refresh token keeps working
        again = auth_service.refresh(session.refresh_token)
        assert auth_service.authenticate(again) == user.id

    def test_unknown_refresh_token(self, auth_service, user) -> None:
        with pytest.raises(Unauthorized) as excinfo:
            auth_service.refresh("0" * 64)
        assert excinfo.value.__cause__.kind is RefreshTokenErrorKind.NOT_FOUND

    def test_refresh_after_revoke(self, auth_service, user) -> None:
        session = auth_service.login("a@b.com", PASSWORD)
        auth_service.revoke(session.refresh_token)
        with pytest.raises(Unauthorized) as excinfo:
            auth_service.refresh(session.refresh_token)
        assert excinfo.value.__cause__.kind is RefreshTokenErrorKind.REVOKED

    def test_refresh_with_expired_token(self, storage, secret, user) -> None:
        service = AuthService(storage, secret=secret, refresh_ttl=timedelta(seconds=-1), hash_workers=1)
        try:
            session = service.login("a@b.com", PASSWORD)
            with pytest.raises(Unauthorized) as excinfo:
                service.refresh(session.refresh_token)
            assert excinfo.value.__cause__.kind is RefreshTokenErrorKind.EXPIRED
        finally:
            service.close()

    def test_access_token_is_not_a_refresh_token(self, auth_service, user) -> None:
        session = auth_service.login("a@b.com", PASSWORD)
        with pytest.raises(Unauthorized):
            auth_service.refresh(session.access_token)


class TestRevoke:
    def test_revoke_twice_succeeds(self, auth_service, user) -> None:
        session = auth_service.login("a@b.com", PASSWORD)
        auth_service.revoke(session.refresh_token)
        auth_service.revoke(session.refresh_token)

    def test_revoke_unknown(self, auth_service, user) -> None:
        with pytest.raises(Unauthorized):
            auth_service.revoke("nope")


class TestAuthenticate:
    def test_failures_collapse_to_unauthorized(self, auth_service, secret, user) -> None:
        cases = {
            "garbage": TokenErrorKind.MALFORMED,
            make_jwt(user.id, "x" * 40, timedelta(hours=1)): TokenErrorKind.INVALID_SIGNATURE,
            make_jwt(user.id, secret, timedelta(seconds=-1)): TokenErrorKind.EXPIRED,
        }
        messages = set()
        for token, kind in cases.items():
            with pytest.raises(Unauthorized) as excinfo:
                auth_service.authenticate(token)
            assert excinfo.value.__cause__.kind is kind
            messages.add(excinfo.value.message)
        assert len(messages) == 1

    def test_issuer_is_configurable(self, storage, secret, user) -> None:
        service = AuthService(storage, secret=secret, issuer="elsewhere", hash_workers=1)
        try:
            token = make_jwt(user.id, secret, timedelta(hours=1))
            with pytest.raises(Unauthorized):
                service.authenticate(token)
        finally:
            service.close()


class TestUpdateCredentials:
    def test_new_password_replaces_old(self, auth_service, user) -> None:
        updated = auth_service.update_credentials(user.id, "renamed@b.com", "new-secret")
        assert updated.email == "renamed@b.com"
        assert auth_service.login("renamed@b.com", "new-secret").user_id == user.id
        with pytest.raises(InvalidCredentials):
            auth_service.login("renamed@b.com", PASSWORD)

    def test_unknown_user(self, auth_service) -> None:
        with pytest.raises(NotFound):
            auth_service.update_credentials("00000000-0000-0000-0000-000000000000", "x@b.com", "pw")


class TestHashingWorkers:
    """Argon2 work runs on the service's pwhash pool, never the caller's thread."""

    def _record_threads(self, monkeypatch, name: str) -> list[str]:
        seen: list[str] = []
        original = getattr(auth.service, name)

        def recording(*args):
            seen.append(threading.current_thread().name)
            return original(*args)

        monkeypatch.setattr(auth.service, name, recording)
        return seen

    def _assert_off_caller_thread(self, seen: list[str]) -> None:
        caller = threading.current_thread().name
        assert seen
        for name in seen:
            assert name.startswith("pwhash")
            assert name != caller

    def test_hash_runs_on_worker(self, auth_service, monkeypatch) -> None:
        seen = self._record_threads(monkeypatch, "hash_password")
        auth_service.register("worker@b.com", PASSWORD)
        self._assert_off_caller_thread(seen)

    def test_verify_runs_on_worker(self, auth_service, user, monkeypatch) -> None:
        seen = self._record_threads(monkeypatch, "verify_password")
        auth_service.login("a@b.com", PASSWORD)
        self._assert_off_caller_thread(seen)

    def test_unknown_email_runs_on_worker(self, auth_service, monkeypatch) -> None:
        seen = self._record_threads(monkeypatch, "dummy_verify")
        with pytest.raises(InvalidCredentials):
            auth_service.login("nobody@b.com", PASSWORD)
        self._assert_off_caller_thread(seen)
