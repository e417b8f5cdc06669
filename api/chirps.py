from __future__ import annotations

import uuid

from flask import Blueprint, request, jsonify, g, abort

from auth.authorization import authorize
from models import storage
from models.schemas.chirp import ChirpCreateSchema, ChirpOutSchema
from utils.decorators import jwt_required

bp = Blueprint("chirps", __name__)

chirp_create_schema = ChirpCreateSchema()
chirp_out_schema = ChirpOutSchema()
chirps_out_schema = ChirpOutSchema(many=True)


def _parse_uuid(value: str, name: str) -> str:
    try:
        return str(uuid.UUID(value))
    except ValueError:
        abort(400, description=f"Invalid {name} format")


def _get_chirp_or_404(chirp_id: str):
    chirp = storage.get_chirp(_parse_uuid(chirp_id, "chirp ID"))
    if chirp is None:
        abort(404)
    return chirp


@bp.post("/chirps")
@jwt_required()
def create_chirp():
    """
    Create a chirp owned by the authenticated user
    ---
    tags:
      - Chirps
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            body: { type: string, maxLength: 140 }
    responses:
      201:
        description: Created
      400:
        description: Validation error
      401:
        description: Unauthorized
    """
    payload = request.get_json(silent=True) or {}
    # unknown fields (including any user_id) are rejected by the schema
    data = chirp_create_schema.load(payload)
    chirp = storage.create_chirp(data["body"], g.current_user_id)
    return jsonify(chirp_out_schema.dump(chirp)), 201


@bp.get("/chirps")
def list_chirps():
    """
    List chirps, optionally for one author
    ---
    tags:
      - Chirps
    parameters:
      - in: query
        name: author_id
        type: string
      - in: query
        name: sort
        type: string
        enum: [asc, desc]
    responses:
      200: { description: OK }
      400: { description: Invalid query parameter }
    """
    sort = request.args.get("sort", "asc")
    if sort not in ("asc", "desc"):
        abort(400, description="Invalid sort parameter. Must be 'asc' or 'desc'")
    author_id = request.args.get("author_id")
    if author_id:
        author_id = _parse_uuid(author_id, "author_id")

    rows = storage.list_chirps(author_id=author_id, descending=(sort == "desc"))
    return jsonify(chirps_out_schema.dump(rows)), 200


@bp.get("/chirps/<chirp_id>")
def get_chirp(chirp_id: str):
    """
    Get a chirp by id
    ---
    tags:
      - Chirps
    parameters:
      - in: path
        name: chirp_id
        type: string
        required: true
    responses:
      200: { description: OK }
      404: { description: Not found }
    """
    chirp = _get_chirp_or_404(chirp_id)
    return jsonify(chirp_out_schema.dump(chirp)), 200


@bp.delete("/chirps/<chirp_id>")
@jwt_required()
def delete_chirp(chirp_id: str):
    """
    Delete a chirp - owner only
    ---
    tags:
      - Chirps
    security:
      - Bearer: []
    parameters:
      - in: path
        name: chirp_id
        type: string
        required: true
    responses:
      204: { description: Deleted }
      401: { description: Unauthorized }
      403: { description: Not the owner }
      404: { description: Not found }
    """
    chirp = _get_chirp_or_404(chirp_id)
    authorize(g.current_user_id, chirp.user_id)
    storage.delete_chirp(chirp)
    return ("", 204)
