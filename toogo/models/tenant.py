"""Tenant models.

- Tenant: a store owner's account (one storefront per tenant).
- TenantSettings: per-tenant storefront config (colors, exchange rate, shipping).
- OnboardingProgress: dashboard checklist state for a new store.
"""

import uuid

from toogo.extensions import db


class Tenant(db.Model):
    __tablename__ = "tenants"

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    name = db.Column(db.String(255), nullable=False)
    # Auth-provider user id. No FK: users may live only in the auth provider.
    owner_user_id = db.Column(db.String(36), nullable=True)
    plan = db.Column(db.String(50), default="free")  # free | basic | pro
    status = db.Column(db.String(50), default="active")
    primary_host = db.Column(
        db.String(255), unique=True, nullable=True
    )  # subdomain or custom domain serving the store
    created_at = db.Column(
        db.DateTime(timezone=True), server_default=db.func.now()
    )
    updated_at = db.Column(
        db.DateTime(timezone=True),
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    # --- Relationships ---
    settings = db.relationship(
        "TenantSettings",
        back_populates="tenant",
        uselist=False,
        cascade="all, delete-orphan",
    )
    domain_purchases = db.relationship(
        "DomainPurchase", back_populates="tenant", lazy="dynamic"
    )

    def __repr__(self):
        return f"<Tenant {self.name}>"


class TenantSettings(db.Model):
    __tablename__ = "tenant_settings"

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    tenant_id = db.Column(
        db.String(36),
        db.ForeignKey("tenants.id"),
        unique=True,
        nullable=False,
    )
    primary_color = db.Column(db.String(7), nullable=True)  # hex color
    secondary_color = db.Column(db.String(7), nullable=True)
    exchange_rate_mode = db.Column(
        db.String(20), default="manual"
    )  # manual | automatic
    exchange_rate_value = db.Column(db.Float, nullable=True)  # MXN per USD
    shipping_enabled = db.Column(db.Boolean, default=False)
    shipping_type = db.Column(
        db.String(30), nullable=True
    )  # free_minimum | flat | tiered
    created_at = db.Column(
        db.DateTime(timezone=True), server_default=db.func.now()
    )
    updated_at = db.Column(
        db.DateTime(timezone=True),
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    # --- Relationships ---
    tenant = db.relationship("Tenant", back_populates="settings")

    def __repr__(self):
        return f"<TenantSettings tenant={self.tenant_id}>"


class OnboardingProgress(db.Model):
    __tablename__ = "user_onboarding_progress"

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    tenant_id = db.Column(
        db.String(36), db.ForeignKey("tenants.id"), nullable=False
    )
    step_1_logo = db.Column(db.Boolean, default=False)
    step_2_products = db.Column(db.Boolean, default=False)
    step_3_branding = db.Column(db.Boolean, default=False)
    step_4_payments = db.Column(db.Boolean, default=False)
    step_5_publish = db.Column(db.Boolean, default=False)
    total_progress = db.Column(db.Integer, default=0)  # percent
    created_at = db.Column(
        db.DateTime(timezone=True), server_default=db.func.now()
    )

    def __repr__(self):
        return f"<OnboardingProgress tenant={self.tenant_id} {self.total_progress}%>"
