"""
blueprints/user/routes.py — Owner-scoped views for authenticated callers.

The caller identity arrives already verified in the ``X-User-Id`` header;
ownership is an explicit filter here, not a security boundary.

Routes:
    GET    /api/v1/user/integrations
    POST   /api/v1/user/integrations
    DELETE /api/v1/user/integrations/<id>
    GET    /api/v1/user/integrations/<id>/results
    GET    /api/v1/user/stats
"""
import logging

from flask import request, jsonify

from blueprints.api.routes import create_integration_from_request, parse_limit
from blueprints.user import user_bp
from errors import Forbidden, NotFound, Unauthenticated
from extensions import get_services

logger = logging.getLogger(__name__)

USER_HEADER = "X-User-Id"


def _current_user_id() -> str:
    user_id = request.headers.get(USER_HEADER, "").strip()
    if not user_id:
        raise Unauthenticated(f"{USER_HEADER} header required")
    return user_id


def _owned_integration(integration_id: str, user_id: str):
    integration = get_services().integrations.get_by_id(integration_id)
    if integration.owner_id != user_id:
        logger.warning("User %s denied access to integration %s", user_id, integration_id)
        raise Forbidden("Integration belongs to another user")
    return integration


@user_bp.route("/integrations", methods=["GET"])
def list_user_integrations():
    integrations = get_services().integrations.list(_current_user_id())
    return jsonify([i.to_dict() for i in integrations]), 200


@user_bp.route("/integrations", methods=["POST"])
def create_user_integration():
    integration = create_integration_from_request(owner_id=_current_user_id())
    return jsonify(integration.to_dict()), 201


@user_bp.route("/integrations/<integration_id>", methods=["DELETE"])
def delete_user_integration(integration_id: str):
    _owned_integration(integration_id, _current_user_id())
    if not get_services().integrations.delete(integration_id):
        raise NotFound(f"Integration {integration_id} not found")
    return "", 204


@user_bp.route("/integrations/<integration_id>/results", methods=["GET"])
def get_user_integration_results(integration_id: str):
    _owned_integration(integration_id, _current_user_id())
    results = get_services().results.query(integration_id, parse_limit())
    return jsonify([r.to_dict() for r in results]), 200


@user_bp.route("/stats", methods=["GET"])
def get_user_stats():
    snapshot = get_services().dashboard.snapshot(_current_user_id())
    return jsonify(snapshot.to_dict()), 200
