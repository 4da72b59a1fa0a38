"""
app.py — Flask Application Factory for the JSON Oracle integration service.
"""
import os
import logging
from flask import Flask
from flask_cors import CORS
from pythonjsonlogger import jsonlogger

from config import config_map
import extensions

# ── Logging ────────────────────────────────────────────────────────────────────
handler = logging.StreamHandler()
handler.setFormatter(jsonlogger.JsonFormatter(
    "%(asctime)s %(levelname)s %(name)s %(message)s"
))
logging.basicConfig(level=logging.INFO, handlers=[handler])

logger = logging.getLogger(__name__)


def create_app(env: str = None) -> Flask:
    """Application factory."""
    env = env or os.environ.get("FLASK_ENV", "development")
    cfg = config_map.get(env, config_map["default"])

    app = Flask(__name__)
    app.config.from_object(cfg)

    # ── Extensions ────────────────────────────────────────────────────────────
    CORS(app, origins=app.config["CORS_ORIGINS"])
    extensions.init_app(app)

    # ── Blueprints ────────────────────────────────────────────────────────────
    from blueprints.api import api_bp
    from blueprints.user import user_bp
    app.register_blueprint(api_bp, url_prefix="/api/v1")
    app.register_blueprint(user_bp, url_prefix="/api/v1/user")

    logger.info("JSON Oracle app created [env=%s]", env)
    return app


app = create_app()

if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.environ.get("PORT", 3000)), debug=True)
