from marshmallow import Schema, fields, pre_load, validate

def _norm_email(v):
    return v.strip().lower() if isinstance(v, str) else v


class _EmailNormalizing(Schema):
    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data["email"] = _norm_email(data["email"])
        return data


class UserCreateSchema(_EmailNormalizing):
    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True, validate=validate.Length(min=1))


class UserLoginSchema(_EmailNormalizing):
    email = fields.String(required=True, validate=validate.Length(min=1))
    password = fields.String(required=True, load_only=True, validate=validate.Length(min=1))


class UserUpdateSchema(_EmailNormalizing):
    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True, validate=validate.Length(min=1))


class UserOutSchema(Schema):
    id = fields.String(allow_none=False)
    email = fields.String(allow_none=False)
    is_chirpy_red = fields.Boolean()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
