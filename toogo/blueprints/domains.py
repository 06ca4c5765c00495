"""Domains blueprint: /api/domains/*

JSON API used by the admin dashboard and the scheduler to drive custom
domain activation. Bearer-token auth (SETUP_API_KEY), CORS enabled.

Route Map:
  POST    /api/domains/complete-setup            Run the activation workflow
  GET     /api/domains/purchases/<id>            Purchase status + metadata
  OPTIONS /api/domains/*                         CORS preflight
"""

import logging

from flask import Blueprint, jsonify, make_response, request

from toogo.decorators import api_key_required
from toogo.extensions import db, limiter
from toogo.models.domain_purchase import DomainPurchase
from toogo.services.domain_setup import DomainPurchaseNotFound, run_domain_setup

logger = logging.getLogger(__name__)

domains_bp = Blueprint("domains", __name__, url_prefix="/api/domains")


def _cors_response(response):
    """Add CORS headers so the dashboard can call the API cross-origin."""
    response.headers["Access-Control-Allow-Origin"] = "*"
    response.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
    response.headers["Access-Control-Allow-Headers"] = (
        "authorization, x-client-info, apikey, content-type"
    )
    return response


@domains_bp.route("/complete-setup", methods=["OPTIONS"])
@domains_bp.route("/purchases/<purchase_id>", methods=["OPTIONS"])
def preflight(purchase_id=None):
    """Handle CORS preflight requests."""
    return _cors_response(make_response("", 204))


@domains_bp.route("/complete-setup", methods=["POST"])
@limiter.limit("30 per minute")
@api_key_required
def complete_setup():
    """Run the domain activation workflow for one purchase.

    Body: {"domainPurchaseId": str, "forceAll": bool (optional)}

    200 with the step log, including the expected dns_not_active_yet case;
    500 only when the purchase or its tenant cannot be loaded.
    """
    data = request.get_json(silent=True) or {}
    domain_purchase_id = data.get("domainPurchaseId")
    if not domain_purchase_id or not isinstance(domain_purchase_id, str):
        return _cors_response(
            jsonify({"error": "domainPurchaseId is required"})
        ), 400

    force_all = data.get("forceAll") is True

    try:
        payload = run_domain_setup(domain_purchase_id, force_all=force_all)
    except DomainPurchaseNotFound as e:
        logger.error(f"[Complete Setup] Fatal error: {e}")
        return _cors_response(
            jsonify({"error": str(e), "details": repr(e)})
        ), 500

    return _cors_response(jsonify(payload)), 200


@domains_bp.route("/purchases/<purchase_id>", methods=["GET"])
@api_key_required
def purchase_status(purchase_id):
    """Current status, retry counters and setup metadata for a purchase."""
    purchase = db.session.get(DomainPurchase, purchase_id)
    if purchase is None:
        return _cors_response(jsonify({"error": "Domain purchase not found"})), 404

    return _cors_response(jsonify({
        "id": purchase.id,
        "tenant_id": purchase.tenant_id,
        "domain": purchase.domain,
        "status": purchase.status,
        "dns_verified": purchase.dns_verified,
        "dns_verified_at": (
            purchase.dns_verified_at.isoformat() if purchase.dns_verified_at else None
        ),
        "dns_check_attempts": purchase.dns_check_attempts,
        "metadata": purchase.metadata_ or {},
    })), 200
