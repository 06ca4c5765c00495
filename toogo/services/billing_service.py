"""Billing service: the one-time order recording a domain setup fee.

Exactly one paid order per domain purchase. Duplicate protection is an
existence check on the tenant's orders plus a deterministic payment_ref
(domain_setup_<purchase id>); there is no unique constraint.
"""

import logging

from toogo.models.order import Order
from toogo.services import auth_service
from toogo.services.setup_status import COMPLETED, SKIPPED, STEP_ORDER, StepResult

logger = logging.getLogger(__name__)

DOMAIN_SETUP_PRICE_MXN = 95.95
DOMAIN_SETUP_PRICE_USD = 4.80
DOMAIN_SETUP_PROVIDER = "mercadopago"

FALLBACK_EMAIL = "unknown@email.com"
FALLBACK_NAME = "Usuario"


def setup_payment_ref(domain_purchase_id):
    return f"domain_setup_{domain_purchase_id}"


def ensure_setup_order(session, tenant, domain_purchase_id, force_all=False):
    """Insert the paid setup order unless one already exists.

    force_all bypasses the "tenant already has an order" skip, but never
    the payment_ref check, so retries cannot double-bill.
    """
    payment_ref = setup_payment_ref(domain_purchase_id)

    if not force_all:
        existing = session.query(Order).filter_by(tenant_id=tenant.id).first()
        if existing:
            return StepResult(STEP_ORDER, SKIPPED, "Order already exists")

    duplicate = session.query(Order).filter_by(payment_ref=payment_ref).first()
    if duplicate:
        return StepResult(
            STEP_ORDER,
            SKIPPED,
            "Setup order already recorded",
            {"order_id": duplicate.id},
        )

    profile = auth_service.get_user_profile(tenant.owner_user_id) or {}

    order = Order(
        tenant_id=tenant.id,
        user_id=tenant.owner_user_id,
        status="paid",
        total_mxn=DOMAIN_SETUP_PRICE_MXN,
        total_usd=DOMAIN_SETUP_PRICE_USD,
        payment_provider=DOMAIN_SETUP_PROVIDER,
        payment_ref=payment_ref,
        customer_email=profile.get("email") or FALLBACK_EMAIL,
        customer_name=profile.get("first_name") or FALLBACK_NAME,
    )
    session.add(order)
    session.commit()

    logger.info(f"Setup order {order.id} created for tenant {tenant.id}")
    return StepResult(
        STEP_ORDER,
        COMPLETED,
        "Payment order created",
        {"order_id": order.id, "payment_ref": payment_ref},
    )
