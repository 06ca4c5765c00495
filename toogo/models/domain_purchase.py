"""Domain purchase model.

One row per custom domain bought for a tenant's storefront. The activation
workflow (services/domain_setup.py) mutates status and metadata on every
invocation; metadata carries the latest setup_steps and an error_history
ordered most-recent-first.
"""

import uuid

from toogo.extensions import db


class DomainPurchase(db.Model):
    __tablename__ = "domain_purchases"

    STATUSES = ["pending", "dns_pending", "active", "failed", "cancelled"]

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    tenant_id = db.Column(
        db.String(36), db.ForeignKey("tenants.id"), nullable=False
    )
    domain = db.Column(db.String(255), nullable=False)  # e.g. "example.com"
    status = db.Column(
        db.String(30), default="pending", nullable=False, index=True
    )  # pending | dns_pending | active | failed | cancelled
    dns_verified = db.Column(db.Boolean, default=False, nullable=False)
    dns_verified_at = db.Column(db.DateTime(timezone=True), nullable=True)
    dns_check_attempts = db.Column(db.Integer, default=0, nullable=False)
    metadata_ = db.Column(
        "metadata", db.JSON, default=dict
    )  # setup_steps, error_history, retry_count, last_error, dns_status, ...
    created_at = db.Column(
        db.DateTime(timezone=True), server_default=db.func.now()
    )
    updated_at = db.Column(
        db.DateTime(timezone=True),
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    # --- Relationships ---
    tenant = db.relationship("Tenant", back_populates="domain_purchases")

    def __repr__(self):
        return f"<DomainPurchase {self.domain} ({self.status})>"
