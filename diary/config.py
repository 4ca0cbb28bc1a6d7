import logging
import os

from dotenv import load_dotenv

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DEFAULT_SQLITE_PATH = os.path.join(BASE_DIR, "data", "diary.db")


def _env_bool(name, default=False):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def load_config(overrides=None):
    """Build the Flask config dict from the environment (and .env)."""
    load_dotenv()
    config = {
        "SECRET_KEY": os.getenv("SECRET_KEY", "dev-secret-key"),
        "DATABASE_URL": os.getenv("DATABASE_URL"),
        "SQLITE_PATH": os.getenv("SQLITE_PATH", DEFAULT_SQLITE_PATH),
        "AUTH_JWT_SECRET": os.getenv("AUTH_JWT_SECRET", "dev-jwt-secret"),
        "AUTH_SESSION_COOKIE_NAME": os.getenv("AUTH_SESSION_COOKIE_NAME", "diary_session"),
        # 60 days
        "AUTH_SESSION_TTL_MINUTES": int(os.getenv("AUTH_SESSION_TTL_MINUTES", str(60 * 24 * 60))),
        "AUTH_COOKIE_SECURE": _env_bool("AUTH_COOKIE_SECURE", True),
        "AUTH_COOKIE_SAMESITE": os.getenv("AUTH_COOKIE_SAMESITE", "Lax"),
        "AUTH_COOKIE_DOMAIN": os.getenv("AUTH_COOKIE_DOMAIN"),
        "SKIP_AUTH": _env_bool("SKIP_AUTH"),
        "AUTH_DEV_LOGIN_ENABLED": _env_bool("AUTH_DEV_LOGIN_ENABLED"),
        "GOOGLE_CLIENT_ID": os.getenv("GOOGLE_CLIENT_ID"),
        "GOOGLE_CLIENT_SECRET": os.getenv("GOOGLE_CLIENT_SECRET"),
        "GOOGLE_METADATA_URL": os.getenv("GOOGLE_METADATA_URL"),
        "CORS_ALLOW_ORIGIN": os.getenv("CORS_ALLOW_ORIGIN"),
        "LOG_LEVEL": os.getenv("LOG_LEVEL", "INFO"),
    }
    if overrides:
        config.update(overrides)
    return config


def configure_logging(level="INFO"):
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(
            level=level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    else:
        root.setLevel(level)
