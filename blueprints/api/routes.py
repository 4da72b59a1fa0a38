"""
blueprints/api/routes.py — REST API endpoints for the integration service.

Routes:
    GET    /api/v1/health
    POST   /api/v1/integrations
    GET    /api/v1/integrations
    GET    /api/v1/integrations/stats
    GET    /api/v1/integrations/<id>
    DELETE /api/v1/integrations/<id>
    PATCH  /api/v1/integrations/<id>/status
    GET    /api/v1/integrations/<id>/results
    GET    /api/v1/integrations/<id>/results/<result_id>
    POST   /api/v1/analyze
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from flask import current_app, request, jsonify

from blueprints.api import api_bp
from errors import InvalidRequest, NotFound, OracleError
from extensions import get_services
from models.integration import IntegrationConfig, IntegrationStatus, SystemType

logger = logging.getLogger(__name__)


# ── Helpers ─────────────────────────────────────────────────────────────────────

def _json_body() -> dict:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise InvalidRequest("Request body must be a JSON object")
    return body


def _parse_enum(enum_cls, raw, field: str):
    try:
        return enum_cls(raw)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise InvalidRequest(f"{field} must be one of: {allowed}")


def _optional_str(body: dict, field: str) -> Optional[str]:
    value = body.get(field)
    if value is not None and not isinstance(value, str):
        raise InvalidRequest(f"{field} must be a string")
    return value or None


def _validate_configuration(configuration) -> None:
    if configuration is None:
        return
    if not isinstance(configuration, dict):
        raise InvalidRequest("configuration must be an object")
    if not isinstance(configuration.get("auto_analyze", False), bool):
        raise InvalidRequest("configuration.auto_analyze must be a boolean")
    for field in ("analysis_domain", "ai_model"):
        _optional_str(configuration, field)
    filters = configuration.get("data_filters")
    if filters is not None and (
            not isinstance(filters, list) or not all(isinstance(f, str) for f in filters)):
        raise InvalidRequest("configuration.data_filters must be a list of strings")

    settings = configuration.get("notification_settings")
    if settings is None:
        return
    if not isinstance(settings, dict):
        raise InvalidRequest("configuration.notification_settings must be an object")
    for key, value in settings.items():
        if not isinstance(value, bool):
            raise InvalidRequest(f"configuration.notification_settings.{key} must be a boolean")


def create_integration_from_request(owner_id: Optional[str] = None):
    """Validate a create-integration body and register it."""
    body = _json_body()
    name = body.get("name")
    if not isinstance(name, str) or not name.strip():
        raise InvalidRequest("name field required")
    system_type = _parse_enum(SystemType, body.get("system_type"), "system_type")
    configuration = body.get("configuration")
    _validate_configuration(configuration)

    return get_services().integrations.create(
        name=name.strip(),
        system_type=system_type,
        webhook_url=_optional_str(body, "webhook_url"),
        configuration=IntegrationConfig.from_dict(configuration),
        owner_id=owner_id,
    )


def parse_limit() -> Optional[int]:
    raw = request.args.get("limit")
    if raw is None:
        return None
    try:
        limit = int(raw)
    except ValueError:
        raise InvalidRequest("limit must be an integer")
    if limit < 0:
        raise InvalidRequest("limit must be non-negative")
    return min(limit, current_app.config["RESULTS_MAX_LIMIT"])


# ── Error handling ──────────────────────────────────────────────────────────────

@api_bp.app_errorhandler(OracleError)
def handle_oracle_error(exc: OracleError):
    return jsonify(exc.to_dict()), exc.status_code


# ── Routes ──────────────────────────────────────────────────────────────────────

@api_bp.route("/health", methods=["GET"])
def health():
    return jsonify({
        "status": "ok",
        "version": current_app.config.get("VERSION", "1.0.0"),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }), 200


@api_bp.route("/integrations", methods=["POST"])
def create_integration():
    integration = create_integration_from_request()
    return jsonify(integration.to_dict()), 201


@api_bp.route("/integrations", methods=["GET"])
def list_integrations():
    integrations = get_services().integrations.list()
    return jsonify([i.to_dict() for i in integrations]), 200


@api_bp.route("/integrations/stats", methods=["GET"])
def dashboard_stats():
    return jsonify(get_services().dashboard.snapshot().to_dict()), 200


@api_bp.route("/integrations/<integration_id>", methods=["GET"])
def get_integration(integration_id: str):
    integration = get_services().integrations.get_by_id(integration_id)
    return jsonify(integration.to_dict()), 200


@api_bp.route("/integrations/<integration_id>", methods=["DELETE"])
def delete_integration(integration_id: str):
    if not get_services().integrations.delete(integration_id):
        raise NotFound(f"Integration {integration_id} not found")
    return "", 204


@api_bp.route("/integrations/<integration_id>/status", methods=["PATCH"])
def set_integration_status(integration_id: str):
    status = _parse_enum(IntegrationStatus, _json_body().get("status"), "status")
    integration = get_services().integrations.set_status(integration_id, status)
    logger.info("Integration %s status set to %s", integration_id, status.value)
    return jsonify(integration.to_dict()), 200


@api_bp.route("/integrations/<integration_id>/results", methods=["GET"])
def get_results(integration_id: str):
    results = get_services().results.query(integration_id, parse_limit())
    return jsonify([r.to_dict() for r in results]), 200


@api_bp.route("/integrations/<integration_id>/results/<result_id>", methods=["GET"])
def get_result(integration_id: str, result_id: str):
    result = get_services().results.get(integration_id, result_id)
    return jsonify(result.to_dict()), 200


@api_bp.route("/analyze", methods=["POST"])
def analyze():
    """POST /api/v1/analyze — run one analysis under the integration owning api_key."""
    body = _json_body()
    api_key = body.get("api_key")
    if not isinstance(api_key, str) or not api_key:
        raise InvalidRequest("api_key field required")

    result = get_services().pipeline.submit(
        api_key=api_key,
        data=body.get("data"),
        domain=_optional_str(body, "domain"),
        model=_optional_str(body, "model"),
        callback_url=_optional_str(body, "callback_url"),
    )
    return jsonify(result.to_dict()), 200
