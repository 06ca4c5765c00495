# Models package: import all models here so Alembic can discover them.

from toogo.models.user import User  # noqa: F401
from toogo.models.tenant import (  # noqa: F401
    OnboardingProgress,
    Tenant,
    TenantSettings,
)
from toogo.models.domain_purchase import DomainPurchase  # noqa: F401
from toogo.models.catalog import Category, Product  # noqa: F401
from toogo.models.order import Order  # noqa: F401
from toogo.models.audit import AuditEvent  # noqa: F401
