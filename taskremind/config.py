import os

from dotenv import load_dotenv

# Load .env from the working directory so local overrides are picked up
load_dotenv(override=False)


def _env_bool(name, default):
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    ENV = os.environ.get("FLASK_ENV", "development")
    DEBUG = _env_bool("FLASK_DEBUG", False)
    TESTING = False

    HOST = os.environ.get("HOST", "127.0.0.1")
    PORT = int(os.environ.get("PORT", "5000"))

    # Comma separated list, "*" allows every origin
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


class TestingConfig(Config):
    TESTING = True
    DEBUG = False


class ClientConfig:
    API_URL = os.environ.get("TASKREMIND_API_URL", "http://127.0.0.1:5000")
    REFRESH_SECONDS = float(os.environ.get("TASKREMIND_REFRESH_SECONDS", "30"))
    REQUEST_TIMEOUT = float(os.environ.get("TASKREMIND_REQUEST_TIMEOUT", "10"))
    LOG_LEVEL = os.environ.get("TASKREMIND_LOG_LEVEL", "WARNING")
