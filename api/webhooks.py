"""
Payment provider (Polka) webhooks.

Polka authenticates with "Authorization: ApiKey <POLKA_KEY>". Only the
"user.upgraded" event does anything; every other event is acknowledged with
204 so the provider stops retrying.
"""
from __future__ import annotations

import logging

from flask import Blueprint, request, current_app, abort

from auth.errors import Unauthorized
from auth.tokens import api_key_matches, get_api_key
from models import storage
from models.schemas.webhook import WebhookSchema

bp = Blueprint("webhooks", __name__)
logger = logging.getLogger(__name__)

webhook_schema = WebhookSchema()

UPGRADE_EVENT = "user.upgraded"


@bp.post("/polka/webhooks")
def polka_webhook():
    """
    Receive a Polka payment event
    ---
    tags:
      - Webhooks
    consumes:
      - application/json
    parameters:
      - in: header
        name: Authorization
        type: string
        required: true
        description: "ApiKey <key>"
      - in: body
        name: body
        schema:
          type: object
          properties:
            event: { type: string, example: user.upgraded }
            data:
              type: object
              properties:
                user_id: { type: string }
    responses:
      204: { description: Processed or ignored }
      400: { description: Validation error }
      401: { description: Missing or wrong API key }
      404: { description: Unknown user }
    """
    key = get_api_key(request.headers)
    if not api_key_matches(key, current_app.config.get("POLKA_KEY", "")):
        logger.info("polka webhook rejected: wrong api key")
        raise Unauthorized()

    payload = request.get_json(silent=True) or {}
    data = webhook_schema.load(payload)
    if data["event"] != UPGRADE_EVENT:
        return ("", 204)

    user_id = data["data"].get("user_id")
    if user_id is None:
        abort(400, description="data.user_id is required")

    if storage.upgrade_user_to_chirpy_red(str(user_id)) is None:
        abort(404, description="User not found")
    logger.info("user %s upgraded to chirpy red", user_id)
    return ("", 204)
