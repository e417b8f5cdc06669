"""
Environment-aware configuration.
Values come from the process environment, with .env loaded first if present.
The JWT signing secret is read here once and handed to AuthService by
create_app(); nothing else reads it.
"""
import os
from dotenv import load_dotenv
from datetime import timedelta

load_dotenv()  # Read .env if present

DEV_JWT_SECRET = "dev-secret-change-me-please-0123456789"


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")  # Set a strong key in production
    DEBUG = False
    TESTING = False
    # CORS: in dev we usually allow '*', in prod supply a comma-separated list in env
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
    APP_ENV = os.getenv("APP_ENV", "dev")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///chirpy.db")
    # jwt configurations
    JWT_SECRET = os.getenv("JWT_SECRET", DEV_JWT_SECRET)
    JWT_ISSUER = os.getenv("JWT_ISSUER", "chirpy")
    ACCESS_TOKEN_EXPIRES = timedelta(seconds=int(os.getenv("ACCESS_TOKEN_EXPIRES_SECONDS", "3600")))
    REFRESH_TOKEN_EXPIRES = timedelta(days=int(os.getenv("REFRESH_TOKEN_EXPIRES_DAYS", "60")))
    # concurrent argon2 computations
    PASSWORD_HASH_WORKERS = int(os.getenv("PASSWORD_HASH_WORKERS", "4"))
    # shared key the Polka payment provider sends as "Authorization: ApiKey <key>"
    POLKA_KEY = os.getenv("POLKA_KEY", "")


class DevelopmentConfig(BaseConfig):
    DEBUG = True


class TestingConfig(BaseConfig):
    TESTING = True
    APP_ENV = "test"
    DATABASE_URL = "sqlite:///:memory:"
    JWT_SECRET = "test-secret-for-the-test-suite-0123456789"
    PASSWORD_HASH_WORKERS = 2
    POLKA_KEY = "test-polka-key"


class ProductionConfig(BaseConfig):
    DEBUG = False


def get_config(name: str | None):
    """
    Select config class.
    - If name is provided, choose by name.
    - Else choose based on APP_ENV (dev/test/prod).
    """
    env = (name or os.getenv("APP_ENV", "dev")).lower()
    if env in ["prod", "production"]:
        return ProductionConfig
    if env in ["test", "testing"]:
        return TestingConfig
    return DevelopmentConfig


def check_config(config) -> None:
    """Refuse to run production with development secrets."""
    if not (config.get("DEBUG") or config.get("TESTING")):
        if config.get("JWT_SECRET") in (None, "", DEV_JWT_SECRET):
            raise RuntimeError("JWT_SECRET must be set in production")
