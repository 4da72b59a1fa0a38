"""
config.py — Flask configuration classes for the JSON Oracle integration service.
"""
import os
import secrets


class BaseConfig:
    """Base configuration shared by all environments."""
    SECRET_KEY = os.environ.get("SECRET_KEY") or secrets.token_hex(32)

    # Inference backend (Ollama-compatible /api/generate)
    OLLAMA_BASE_URL = os.environ.get("OLLAMA_BASE_URL", "http://localhost:11434")
    OLLAMA_TIMEOUT = int(os.environ.get("OLLAMA_TIMEOUT", 120))  # seconds

    DEFAULT_MODEL = os.environ.get("DEFAULT_MODEL", "llama2")
    DEFAULT_DOMAIN = os.environ.get("DEFAULT_DOMAIN", "generic")

    API_KEY_PREFIX = "json_oracle_"

    # Webhook / callback delivery
    NOTIFICATIONS_ENABLED = os.environ.get("NOTIFICATIONS_ENABLED", "true").lower() == "true"
    NOTIFICATION_TIMEOUT = int(os.environ.get("NOTIFICATION_TIMEOUT", 10))
    NOTIFICATION_WORKERS = int(os.environ.get("NOTIFICATION_WORKERS", 4))

    RECENT_WINDOW_HOURS = int(os.environ.get("RECENT_WINDOW_HOURS", 24))
    RESULTS_MAX_LIMIT = int(os.environ.get("RESULTS_MAX_LIMIT", 200))

    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "same-origin")

    VERSION = "1.0.0"


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    TESTING = False


class ProductionConfig(BaseConfig):
    DEBUG = False
    TESTING = False


class TestingConfig(BaseConfig):
    DEBUG = True
    TESTING = True
    NOTIFICATIONS_ENABLED = False
    OLLAMA_BASE_URL = "http://ollama.test"
    OLLAMA_TIMEOUT = 5


config_map = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
    "default": DevelopmentConfig,
}
