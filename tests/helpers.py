"""Small helpers shared by the HTTP tests."""
from __future__ import annotations

PASSWORD = "secret123"


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def login(client, email: str = "a@b.com", password: str = PASSWORD) -> dict:
    resp = client.post("/api/v1/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.get_json()
    return resp.get_json()
