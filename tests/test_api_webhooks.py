"""
HTTP tests for the Polka payment webhook.

TestingConfig sets POLKA_KEY to "test-polka-key"; the webhook authenticates
with "Authorization: ApiKey <key>" rather than a bearer token.
"""
from __future__ import annotations

import uuid

import pytest

from api import create_app
from tests.helpers import bearer, login

URL = "/api/v1/polka/webhooks"
POLKA_KEY = "test-polka-key"


def _api_key(key: str = POLKA_KEY) -> dict:
    return {"Authorization": f"ApiKey {key}"}


def _upgrade(user_id) -> dict:
    return {"event": "user.upgraded", "data": {"user_id": str(user_id)}}


def _is_red(client) -> bool:
    return login(client)["is_chirpy_red"]


class TestWebhookAuth:
    def test_missing_key(self, client, user) -> None:
        resp = client.post(URL, json=_upgrade(user.id))
        assert resp.status_code == 401
        assert resp.get_json()["error"] == "UNAUTHORIZED"

    def test_wrong_key(self, client, user) -> None:
        resp = client.post(URL, json=_upgrade(user.id), headers=_api_key("not-the-key"))
        assert resp.status_code == 401
        assert _is_red(client) is False

    def test_bearer_scheme_rejected(self, client, user) -> None:
        resp = client.post(URL, json=_upgrade(user.id), headers=bearer(POLKA_KEY))
        assert resp.status_code == 401

    def test_unconfigured_key_rejects_everything(self) -> None:
        app = create_app("testing", overrides={"POLKA_KEY": ""})
        try:
            resp = app.test_client().post(URL, json=_upgrade(uuid.uuid4()), headers=_api_key("anything"))
            assert resp.status_code == 401
        finally:
            app.extensions["auth_service"].close()


class TestWebhookEvents:
    def test_upgrade_marks_user(self, client, user) -> None:
        assert _is_red(client) is False
        resp = client.post(URL, json=_upgrade(user.id), headers=_api_key())
        assert resp.status_code == 204
        assert resp.data == b""
        assert _is_red(client) is True

    def test_upgrade_is_idempotent(self, client, user) -> None:
        for _ in range(2):
            resp = client.post(URL, json=_upgrade(user.id), headers=_api_key())
            assert resp.status_code == 204
        assert _is_red(client) is True

    def test_upgrade_shows_on_profile(self, client, user) -> None:
        client.post(URL, json=_upgrade(user.id), headers=_api_key())
        token = login(client)["token"]
        resp = client.get("/api/v1/users/me", headers=bearer(token))
        assert resp.get_json()["is_chirpy_red"] is True

    @pytest.mark.parametrize("event", ["user.payment_failed", "user.downgraded"])
    def test_other_events_are_ignored(self, client, user, event: str) -> None:
        resp = client.post(
            URL, json={"event": event, "data": {"user_id": str(user.id)}}, headers=_api_key()
        )
        assert resp.status_code == 204
        assert _is_red(client) is False

    def test_ignored_event_needs_no_user(self, client) -> None:
        resp = client.post(URL, json={"event": "user.payment_failed"}, headers=_api_key())
        assert resp.status_code == 204

    def test_unknown_user(self, client) -> None:
        resp = client.post(URL, json=_upgrade(uuid.uuid4()), headers=_api_key())
        assert resp.status_code == 404
        assert resp.get_json()["error"] == "NOT_FOUND"

    def test_upgrades_only_the_named_user(self, client, user, other_user) -> None:
        client.post(URL, json=_upgrade(other_user.id), headers=_api_key())
        assert _is_red(client) is False
        assert login(client, "other@b.com")["is_chirpy_red"] is True

    @pytest.mark.parametrize(
        "payload",
        [
            {"event": "user.upgraded", "data": {"user_id": "not-a-uuid"}},
            {"event": "user.upgraded", "data": {}},
            {"data": {"user_id": str(uuid.uuid4())}},
        ],
    )
    def test_malformed_payload(self, client, payload: dict) -> None:
        resp = client.post(URL, json=payload, headers=_api_key())
        assert resp.status_code == 400
