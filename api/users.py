from __future__ import annotations

from flask import Blueprint, request, jsonify, g, abort

from models import storage
from models.schemas.user import UserCreateSchema, UserUpdateSchema, UserOutSchema
from utils.decorators import get_auth_service, jwt_required

bp = Blueprint("users", __name__)

user_create_schema = UserCreateSchema()
user_update_schema = UserUpdateSchema()
user_out_schema = UserOutSchema()


@bp.post("/users")
def register():
    """
    Register a new user.
    ---
    tags:
      - Users
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            email: { type: string }
            password: { type: string }
    responses:
      201:
        description: Created
      400:
        description: Validation error
      409:
        description: Email already registered
    """
    payload = request.get_json(silent=True) or {}
    data = user_create_schema.load(payload)

    if storage.get_user_by_email(data["email"]):
        abort(409, description="Email already registered")

    user = get_auth_service().register(data["email"], data["password"])
    return jsonify(user_out_schema.dump(user)), 201


@bp.put("/users")
@jwt_required()
def update_me():
    """
    Update the authenticated user's email and password.
    ---
    tags:
      - Users
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            email: { type: string }
            password: { type: string }
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
      409:
        description: Email already registered
    """
    payload = request.get_json(silent=True) or {}
    data = user_update_schema.load(payload)

    existing = storage.get_user_by_email(data["email"])
    if existing and existing.id != g.current_user_id:
        abort(409, description="Email already registered")

    user = get_auth_service().update_credentials(g.current_user_id, data["email"], data["password"])
    return jsonify(user_out_schema.dump(user)), 200


@bp.get("/users/me")
@jwt_required()
def me():
    """
    Get current user info.
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
    """
    user = storage.get_user(g.current_user_id)
    if user is None:
        abort(404)
    return jsonify(user_out_schema.dump(user)), 200
