"""
Custom route decorators for access control.

- api_key_required: ensures the request carries a Bearer token matching
  SETUP_API_KEY (admin dashboard and scheduler access to /api/domains/*).
"""

import hmac
from functools import wraps

from flask import current_app, jsonify, request


def api_key_required(f):
    """Require `Authorization: Bearer <SETUP_API_KEY>`."""

    @wraps(f)
    def decorated(*args, **kwargs):
        auth_header = request.headers.get("Authorization", "")
        if not auth_header.startswith("Bearer "):
            return jsonify({"error": "Unauthorized"}), 401

        token = auth_header[7:]
        expected = current_app.config.get("SETUP_API_KEY") or ""
        if not expected or not hmac.compare_digest(token, expected):
            return jsonify({"error": "Invalid API key"}), 401

        return f(*args, **kwargs)

    return decorated
