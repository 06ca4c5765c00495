"""DNS verification service: scheduled jobs for domain purchases.

- retry_pending_dns: re-runs the setup workflow for dns_pending purchases
  (capped by dns_check_attempts).
- check_dns_status: resolves each unverified domain via Google
  DNS-over-HTTPS and, once it points at Vercel, marks the purchase
  verified and emails the owner that the store is live (once).

Designed to be called from Flask CLI commands (`flask retry-pending-dns`,
`flask check-dns-status`) on a 15-minute cron schedule.
"""

import logging
from datetime import datetime, timezone

import requests

from toogo.extensions import db
from toogo.models.audit import AuditEvent
from toogo.models.domain_purchase import DomainPurchase
from toogo.models.tenant import Tenant
from toogo.services import auth_service
from toogo.services.domain_setup import DomainPurchaseNotFound, run_domain_setup
from toogo.services.email_service import send_email_sync

logger = logging.getLogger(__name__)

GOOGLE_DOH_URL = "https://dns.google/resolve"
DNS_TYPE_A = 1

# Apex IPs Vercel serves from: legacy, current recommended, newer ranges.
VALID_VERCEL_IPS = {
    "76.76.21.21",
    "76.76.21.98",
    "76.76.21.142",
    "76.76.21.164",
    "216.198.79.1",
    "216.198.79.65",
    "64.29.17.1",
    "64.29.17.65",
}


# ──────────────────────────────────────────────
# Retry job
# ──────────────────────────────────────────────

def retry_pending_dns(max_attempts=10, client=None):
    """Re-run domain setup for every dns_pending purchase under the attempt cap.

    Returns a list of per-domain result dicts.
    """
    pending = (
        DomainPurchase.query
        .filter(DomainPurchase.status == "dns_pending")
        .filter(DomainPurchase.dns_check_attempts < max_attempts)
        .order_by(DomainPurchase.created_at.asc())
        .all()
    )
    logger.info(f"[Retry] Found {len(pending)} pending domains")

    # Plain ids: the setup run commits and may roll back, expiring instances.
    targets = [(p.id, p.domain, p.dns_check_attempts or 0) for p in pending]

    results = []
    for purchase_id, domain, attempts in targets:
        attempt = attempts + 1
        logger.info(f"[Retry] Attempting {domain} (attempt {attempt})")

        result = {"domain": domain, "attempt": attempt}
        try:
            payload = run_domain_setup(purchase_id, client=client)
            result["success"] = payload["success"]
            result["status"] = payload.get("status", "dns_pending")
        except DomainPurchaseNotFound as e:
            # Still counts as an attempt so the cap retires it.
            logger.error(f"[Retry] {e}")
            result.update(success=False, error=str(e))
        except Exception as e:
            db.session.rollback()
            logger.exception(f"[Retry] Failed for {domain}")
            result.update(success=False, error=str(e))

        purchase = db.session.get(DomainPurchase, purchase_id)
        if purchase is not None:
            metadata = dict(purchase.metadata_ or {})
            metadata["last_retry_at"] = datetime.now(timezone.utc).isoformat()
            purchase.metadata_ = metadata
            purchase.dns_check_attempts = attempt
            db.session.commit()

        results.append(result)

    return results


# ──────────────────────────────────────────────
# DNS propagation check
# ──────────────────────────────────────────────

def resolves_to_vercel(domain):
    """True if the domain's public A record points at a Vercel IP."""
    try:
        resp = requests.get(
            GOOGLE_DOH_URL,
            params={"name": domain, "type": "A"},
            headers={"Accept": "application/dns-json"},
            timeout=10,
        )
    except requests.exceptions.RequestException as e:
        logger.warning(f"DNS lookup failed for {domain}: {e}")
        return False

    if not resp.ok:
        logger.warning(f"DNS lookup failed for {domain}: HTTP {resp.status_code}")
        return False

    try:
        answers = resp.json().get("Answer") or []
    except ValueError:
        logger.warning(f"DNS lookup for {domain} returned a non-JSON body")
        return False

    matched = [
        a.get("data") for a in answers
        if a.get("type") == DNS_TYPE_A and a.get("data") in VALID_VERCEL_IPS
    ]
    if matched:
        logger.info(f"DNS correctly configured for {domain} -> {matched[0]}")
        return True

    if answers:
        logger.info(f"DNS points elsewhere for {domain}: {answers}")
    else:
        logger.info(f"No A records found for {domain}")
    return False


def check_dns_status():
    """Verify DNS for all unverified active/dns_pending purchases.

    Returns a summary dict: {total_checked, verified, results}.
    """
    pending = (
        DomainPurchase.query
        .filter(DomainPurchase.dns_verified.is_(False))
        .filter(DomainPurchase.status.in_(["active", "dns_pending"]))
        .all()
    )
    logger.info(f"Found {len(pending)} pending domains to verify")

    # Plain ids: a rollback for one domain expires every loaded instance.
    targets = [(p.id, p.domain) for p in pending]

    results = []
    verified_count = 0
    for purchase_id, domain in targets:
        try:
            if not resolves_to_vercel(domain):
                results.append({"domain": domain, "success": False, "reason": "DNS not propagated"})
                continue

            purchase = db.session.get(DomainPurchase, purchase_id)
            _mark_verified(purchase)
            verified_count += 1
            results.append({"domain": domain, "success": True, "email_sent": _notify_store_ready(purchase)})
        except Exception as e:
            db.session.rollback()
            logger.exception(f"DNS verification failed for {domain}")
            results.append({"domain": domain, "success": False, "error": str(e)})

    logger.info(f"DNS verification complete. Verified: {verified_count}/{len(pending)}")
    return {"total_checked": len(pending), "verified": verified_count, "results": results}


def _mark_verified(purchase):
    now = datetime.now(timezone.utc)
    metadata = dict(purchase.metadata_ or {})
    metadata.update({
        "dns_verified_at": now.isoformat(),
        "verification_method": "dns_check_cron",
    })
    purchase.dns_verified = True
    purchase.dns_verified_at = now
    purchase.status = "active"
    purchase.metadata_ = metadata

    tenant = db.session.get(Tenant, purchase.tenant_id)
    if tenant and not tenant.primary_host:
        logger.info(f"Assigning primary_host {purchase.domain} to tenant {tenant.id}")
        tenant.primary_host = purchase.domain

    db.session.add(AuditEvent(
        tenant_id=purchase.tenant_id,
        action="domain.dns_verified",
        metadata_={"domain_purchase_id": purchase.id, "domain": purchase.domain},
    ))
    db.session.commit()


def _notify_store_ready(purchase):
    """Send the store-ready email once per purchase. Returns True if sent."""
    metadata = purchase.metadata_ or {}
    if metadata.get("email_sent"):
        logger.info(f"Skipping email for {purchase.domain}: already sent")
        return False

    tenant = db.session.get(Tenant, purchase.tenant_id)
    profile = auth_service.get_user_profile(tenant.owner_user_id) if tenant else None
    if not profile or not profile.get("email"):
        logger.info(f"Skipping email for {purchase.domain}: no owner email")
        return False

    try:
        sent = send_email_sync(
            to=profile["email"],
            subject=f"Tu tienda ya está en línea: {purchase.domain}",
            template="emails/store_ready.html",
            context={
                "domain": purchase.domain,
                "store_url": f"https://{purchase.domain}",
                "store_name": tenant.name,
                "first_name": profile.get("first_name") or "",
            },
        )
    except Exception as e:
        logger.error(f"Failed to send store-ready email for {purchase.domain}: {e}")
        return False

    if not sent:
        return False

    metadata = dict(metadata)
    metadata.update({
        "email_sent": True,
        "email_sent_at": datetime.now(timezone.utc).isoformat(),
    })
    purchase.metadata_ = metadata
    db.session.commit()
    return True
