from __future__ import annotations
from functools import wraps
from flask import request, g, current_app

from auth.service import AuthService
from auth.tokens import get_bearer_token


def get_auth_service() -> AuthService:
    return current_app.extensions["auth_service"]


def jwt_required():
    """
    Require a valid access token in "Authorization: Bearer <token>".
    Sets g.current_user_id to the token subject. Any failure is a uniform 401.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            token = get_bearer_token(request.headers)
            g.current_user_id = get_auth_service().authenticate(token)
            return fn(*args, **kwargs)

        return wrapper

    return decorator
