import os
from datetime import timedelta


# Settings the application cannot start without.
REQUIRED_SETTINGS = ("SECRET_KEY", "DATABASE_URL")


class Config:
    # Secret key for sessions / JWT - REQUIRED
    SECRET_KEY = os.environ.get("SECRET_KEY")

    # Database connection - REQUIRED
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}

    # JWT Configuration
    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", SECRET_KEY)
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=1)
    JWT_REFRESH_TOKEN_EXPIRES = timedelta(days=30)
    # Access token lifetime when the user ticks "remember me"
    JWT_REMEMBER_ME_EXPIRES = timedelta(days=7)

    # Flask Configuration
    FLASK_ENV = os.environ.get("FLASK_ENV", "production")
    FLASK_DEBUG = os.environ.get("FLASK_DEBUG", "False").lower() == "true"
    JSON_SORT_KEYS = False

    # Business defaults
    DEFAULT_CURRENCY = os.environ.get("DEFAULT_CURRENCY", "KES")
    EXPIRING_LEASE_DAYS = int(os.environ.get("EXPIRING_LEASE_DAYS", 60))
    UPCOMING_PAYMENTS_LIMIT = int(os.environ.get("UPCOMING_PAYMENTS_LIMIT", 5))

    # Browser clients: the Vite dev server and the API's own host, plus CORS_ALLOWED_ORIGINS
    FRONTEND_DEV_PORTS = (5173, 5000)
    CORS_ALLOWED_ORIGINS = os.environ.get("CORS_ALLOWED_ORIGINS", "")
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret-key"
    JWT_SECRET_KEY = "test-jwt-secret-key-with-enough-length"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    DEFAULT_CURRENCY = "KES"
    EXPIRING_LEASE_DAYS = 60
    UPCOMING_PAYMENTS_LIMIT = 5


def missing_settings(config) -> list:
    """Required settings absent from a loaded Flask config mapping."""
    values = {
        "SECRET_KEY": config.get("SECRET_KEY"),
        "DATABASE_URL": config.get("SQLALCHEMY_DATABASE_URI"),
    }
    return [name for name in REQUIRED_SETTINGS if not values.get(name)]
