"""Bootstrap service: seed the minimum storefront for a new tenant.

Four independent seeds, each guarded by its own "does a row exist" check.
A partially bootstrapped tenant is completed on the next run instead of
being treated as an error.
"""

import logging

from toogo.models.catalog import Category, Product
from toogo.models.tenant import OnboardingProgress, TenantSettings
from toogo.services.setup_status import (
    COMPLETED,
    SKIPPED,
    STEP_CATEGORY,
    STEP_ONBOARDING,
    STEP_PRODUCT,
    STEP_SETTINGS,
    StepResult,
)

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS = {
    "primary_color": "#000000",
    "secondary_color": "#ffffff",
    "exchange_rate_mode": "manual",
    "exchange_rate_value": 20.0,
    "shipping_enabled": False,
    "shipping_type": "free_minimum",
}

DEFAULT_CATEGORY = {
    "name": "General",
    "slug": "general",
    "show_on_home": True,
    "sort": 0,
}

SAMPLE_PRODUCT = {
    "title": "Producto de Ejemplo",
    "description": (
        "Este es un producto de ejemplo. "
        "Edítalo o elimínalo desde tu dashboard."
    ),
    "price_mxn": 200,
    "sale_price_mxn": 0,
    "stock": 100,
    "status": "active",
    "product_type": "simple",
}


def _exists(session, model, tenant_id):
    return session.query(model.id).filter_by(tenant_id=tenant_id).first() is not None


def ensure_settings(session, tenant_id):
    if _exists(session, TenantSettings, tenant_id):
        return StepResult(STEP_SETTINGS, SKIPPED, "Store settings already exist")

    session.add(TenantSettings(tenant_id=tenant_id, **DEFAULT_SETTINGS))
    session.commit()
    logger.info(f"[Bootstrap] Created tenant_settings for {tenant_id}")
    return StepResult(STEP_SETTINGS, COMPLETED, "Store settings created")


def ensure_default_category(session, tenant_id):
    if _exists(session, Category, tenant_id):
        return StepResult(STEP_CATEGORY, SKIPPED, "Tenant already has categories")

    category = Category(tenant_id=tenant_id, **DEFAULT_CATEGORY)
    session.add(category)
    session.commit()
    logger.info(f"[Bootstrap] Created default category for {tenant_id}")
    return StepResult(
        STEP_CATEGORY,
        COMPLETED,
        "Default category created",
        {"category_id": category.id},
    )


def ensure_sample_product(session, tenant_id):
    if _exists(session, Product, tenant_id):
        return StepResult(STEP_PRODUCT, SKIPPED, "Tenant already has products")

    product = Product(tenant_id=tenant_id, **SAMPLE_PRODUCT)
    session.add(product)
    session.commit()
    logger.info(f"[Bootstrap] Created sample product for {tenant_id}")
    return StepResult(
        STEP_PRODUCT,
        COMPLETED,
        "Sample product created",
        {"product_id": product.id},
    )


def ensure_onboarding_progress(session, tenant_id):
    if _exists(session, OnboardingProgress, tenant_id):
        return StepResult(STEP_ONBOARDING, SKIPPED, "Onboarding progress already exists")

    session.add(OnboardingProgress(tenant_id=tenant_id, total_progress=0))
    session.commit()
    logger.info(f"[Bootstrap] Created onboarding progress for {tenant_id}")
    return StepResult(STEP_ONBOARDING, COMPLETED, "Onboarding progress created")


# Execution order used by the domain setup workflow.
BOOTSTRAP_STEPS = [
    (STEP_SETTINGS, ensure_settings),
    (STEP_CATEGORY, ensure_default_category),
    (STEP_PRODUCT, ensure_sample_product),
    (STEP_ONBOARDING, ensure_onboarding_progress),
]
