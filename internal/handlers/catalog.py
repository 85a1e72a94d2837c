"""HTTP handlers for the broker catalog.

Endpoints:
  GET /health                                          — Health check
  GET /v2/catalog                                      — Service catalog
  GET /v2/catalog/resolve?service_id=<id>&plan_id=<id> — Resolve IDs to provider/instance size

The Broker instance is read from ``current_app.config["BROKER"]``.
"""

import logging

from flask import Blueprint, current_app, jsonify, request

from internal.atlas.client import DirectoryUnavailableError
from internal.broker.context import RequestCancelledError, RequestContext
from internal.broker.errors import FailureResponse

logger = logging.getLogger(__name__)

catalog_bp = Blueprint("catalog", __name__)


def _broker():
    return current_app.config["BROKER"]


def _request_context() -> RequestContext:
    return RequestContext(timeout=current_app.config.get("REQUEST_TIMEOUT"))


@catalog_bp.errorhandler(FailureResponse)
def handle_failure(e: FailureResponse):
    return jsonify(e.to_dict()), int(e.status_code)


@catalog_bp.errorhandler(DirectoryUnavailableError)
def handle_directory_unavailable(e: DirectoryUnavailableError):
    logger.error("Provider directory unavailable: %s", e)
    return jsonify({"error": "DirectoryUnavailable", "description": str(e)}), 502


@catalog_bp.errorhandler(RequestCancelledError)
def handle_request_cancelled(e: RequestCancelledError):
    logger.warning("Catalog request cancelled: %s", e)
    return jsonify({"error": "RequestTimeout", "description": str(e)}), 504


@catalog_bp.route("/health", methods=["GET"])
def health():
    """Health check endpoint."""
    return jsonify({"status": "ok"}), 200


@catalog_bp.route("/v2/catalog", methods=["GET"])
def get_catalog():
    """Return the service catalog. Fails as a whole if any provider fetch fails."""
    return jsonify(_broker().catalog_dict(_request_context())), 200


@catalog_bp.route("/v2/catalog/resolve", methods=["GET"])
def resolve_plan():
    """Resolve a service ID and plan ID to the provider and instance size they denote."""
    service_id = request.args.get("service_id", "")
    plan_id = request.args.get("plan_id", "")
    missing = [k for k, v in (("service_id", service_id), ("plan_id", plan_id)) if not v]
    if missing:
        return jsonify({
            "error": "BadRequest",
            "description": f"Missing required query parameters: {', '.join(missing)}",
        }), 400

    provider, instance_size = _broker().resolve(service_id, plan_id, _request_context())
    return jsonify({
        "service_id": service_id,
        "plan_id": plan_id,
        "provider": provider.name,
        "instance_size": instance_size.name,
    }), 200
