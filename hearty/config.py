# Import the standard library module used for environment variables and filesystem paths
import os

# Import timedelta to compute durations in seconds for token expiry
from datetime import timedelta

# Import helper to load environment variables from a .env file
from dotenv import load_dotenv


# Load variables from a .env file into process environment if present
load_dotenv()


# Define a configuration holder class for the Flask application
class Config:
    # Secret key used by Flask and extensions; falls back to a dev value
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-change-me")

    APP_NAME = os.getenv("APP_NAME", "Hearty")

    # JWT signing secret shared by REST auth and the socket handshake; defaults to SECRET_KEY
    JWT_SECRET = os.getenv("JWT_SECRET", SECRET_KEY)
    # Signing algorithm for access tokens
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    # Access token expiry in seconds; defaults to 7 days if not overridden
    ACCESS_TOKEN_EXPIRES = int(
        os.getenv(
            "ACCESS_TOKEN_EXPIRES_SECONDS", str(int(timedelta(days=7).total_seconds()))
        )
    )

    # Prefer absolute DB path under instance/ directory at repo root for SQLite
    _ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
    _DB_DEFAULT = f"sqlite:///{os.path.join(_ROOT, 'instance', f'{APP_NAME}.db')}"

    # Database URL taken from env when present, otherwise fallback to default
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", _DB_DEFAULT)
    # When true, echo SQL statements to logs for debugging
    SQLALCHEMY_ECHO = os.getenv("SQLALCHEMY_ECHO", "false").lower() == "true"

    # Comma-separated list of CORS origins; '*' means allow all
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")

    # Socket.IO async mode override (e.g., 'gevent', 'threading')
    SOCKETIO_ASYNC_MODE = os.getenv("SOCKETIO_ASYNC_MODE", "gevent")
    # Transport heartbeat: how often the server pings and how long it waits for the pong
    SOCKETIO_PING_INTERVAL = int(os.getenv("SOCKETIO_PING_INTERVAL_SECONDS", "25"))
    SOCKETIO_PING_TIMEOUT = int(os.getenv("SOCKETIO_PING_TIMEOUT_SECONDS", "60"))

    # Presence store backend: memory | redis
    PRESENCE_BACKEND = os.getenv("PRESENCE_BACKEND", "memory").lower()
    # Redis DSN used by the redis presence backend
    REDIS_URL = os.getenv("REDIS_URL", "")
    # Offline presence records older than this are pruned; 0 keeps them forever
    PRESENCE_TTL_SECONDS = int(os.getenv("PRESENCE_TTL_SECONDS", "0"))

    # Port for the development server started from wsgi.py
    PORT = int(os.getenv("PORT", "3001"))

    DEBUG = os.getenv("DEBUG", "false").lower() == "true"

    # Global logging level
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    JWT_SECRET = "test-jwt-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SOCKETIO_ASYNC_MODE = "threading"
    PRESENCE_BACKEND = "memory"
    PRESENCE_TTL_SECONDS = 0
