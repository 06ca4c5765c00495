"""Auth directory: resolve a user id to an email and display name.

Uses the Supabase GoTrue admin API when SUPABASE_URL and
SUPABASE_SERVICE_KEY are configured, otherwise the local users table.
"""

import logging

import requests
from flask import current_app

from toogo.extensions import db
from toogo.models.user import User

logger = logging.getLogger(__name__)


def _get_supabase_config():
    """Return Supabase admin config if available, else None."""
    url = current_app.config.get("SUPABASE_URL")
    key = current_app.config.get("SUPABASE_SERVICE_KEY")

    if url and key:
        return {"url": url.rstrip("/"), "key": key}
    return None


def get_user_profile(user_id):
    """Return {"email", "first_name"} for a user id, or None if unknown."""
    if not user_id:
        return None

    supabase = _get_supabase_config()
    if supabase:
        return _fetch_supabase_user(supabase, user_id)

    user = db.session.get(User, user_id)
    if not user:
        return None
    return {"email": user.email, "first_name": user.first_name}


def _fetch_supabase_user(config, user_id):
    url = f"{config['url']}/auth/v1/admin/users/{user_id}"
    headers = {
        "apikey": config["key"],
        "Authorization": f"Bearer {config['key']}",
    }

    try:
        resp = requests.get(url, headers=headers, timeout=10)
    except requests.exceptions.RequestException as e:
        logger.warning(f"Supabase user lookup failed for {user_id}: {e}")
        return None

    if resp.status_code == 404:
        return None
    if not resp.ok:
        logger.warning(
            f"Supabase user lookup for {user_id} returned {resp.status_code}"
        )
        return None

    data = resp.json()
    # GoTrue returns the user object directly; older versions wrap it.
    user = data.get("user", data)
    meta = user.get("user_metadata") or {}
    return {"email": user.get("email"), "first_name": meta.get("first_name")}
