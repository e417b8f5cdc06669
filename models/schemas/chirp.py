from marshmallow import Schema, fields, validates, ValidationError

from models.chirp import MAX_CHIRP_LENGTH


class ChirpCreateSchema(Schema):
    body = fields.String(required=True)

    @validates("body")
    def validate_body(self, value, **kwargs):
        if not value.strip():
            raise ValidationError("Chirp cannot be empty")
        if len(value) > MAX_CHIRP_LENGTH:
            raise ValidationError("Chirp is too long")


class ChirpOutSchema(Schema):
    id = fields.String()
    body = fields.String()
    user_id = fields.String()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
