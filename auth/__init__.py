"""
auth/ -- authentication and session lifecycle.

Layer rule: auth/ imports only stdlib and third-party libraries.
models/ and api/ import from auth/, never the other way around; storage is
handed to AuthService by the application factory.
"""
from auth.authorization import authorize
from auth.service import AuthService, LoginResult

__all__ = ["AuthService", "LoginResult", "authorize"]
