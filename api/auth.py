"""
Session blueprint:
- POST /login   -> user fields + access token + refresh token
- POST /refresh -> new access token (refresh token in the Bearer header)
- POST /revoke  -> revoke a refresh token (refresh token in the Bearer header)

Refresh tokens are not rotated: /refresh leaves the presented token active
until it expires or is revoked.
"""
from __future__ import annotations

from flask import Blueprint, request, jsonify

from auth.tokens import get_bearer_token
from models.schemas.user import UserLoginSchema, UserOutSchema
from utils.decorators import get_auth_service

bp = Blueprint("auth", __name__)

user_login_schema = UserLoginSchema()
user_out_schema = UserOutSchema()


@bp.post("/login")
def login():
    """
    Login: return access token and refresh token
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             email: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK (returns tokens)
      400:
        description: Validation error
      401:
        description: Invalid email or password
    """
    payload = request.get_json(silent=True) or {}
    data = user_login_schema.load(payload)

    service = get_auth_service()
    result = service.login(data["email"], data["password"])

    body = user_out_schema.dump(result.user)
    body.update(
        {
            "token": result.access_token,
            "refresh_token": result.refresh_token,
            "token_type": "bearer",
            "expires_in": int(service.access_ttl.total_seconds()),
        }
    )
    return jsonify(body), 200


@bp.post("/refresh")
def refresh():
    """
    Use a refresh token to obtain a new access token
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: OK (returns a new access token)
      401:
        description: Unauthorized
    """
    refresh_token = get_bearer_token(request.headers)
    service = get_auth_service()
    access_token = service.refresh(refresh_token)
    return jsonify(
        {
            "token": access_token,
            "token_type": "bearer",
            "expires_in": int(service.access_ttl.total_seconds()),
        }
    ), 200


@bp.post("/revoke")
def revoke():
    """
    Revoke a refresh token
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      204:
        description: ""
      401:
        description: Unauthorized
    """
    refresh_token = get_bearer_token(request.headers)
    get_auth_service().revoke(refresh_token)
    return ("", 204)
