"""Order model.

Storefront and platform orders. The domain activation workflow inserts a
single paid order recording the domain setup fee, keyed by a deterministic
payment_ref (domain_setup_<purchase id>).
"""

import uuid

from toogo.extensions import db


class Order(db.Model):
    __tablename__ = "orders"

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    tenant_id = db.Column(
        db.String(36), db.ForeignKey("tenants.id"), nullable=False
    )
    user_id = db.Column(db.String(36), nullable=True)
    status = db.Column(
        db.String(30), default="pending", nullable=False
    )  # pending | paid | cancelled
    total_mxn = db.Column(db.Float, nullable=True)
    total_usd = db.Column(db.Float, nullable=True)
    payment_provider = db.Column(
        db.String(30), nullable=True
    )  # whatsapp | mercadopago | paypal
    payment_ref = db.Column(db.String(255), nullable=True, index=True)
    customer_email = db.Column(db.String(255), nullable=True)
    customer_name = db.Column(db.String(255), nullable=True)
    created_at = db.Column(
        db.DateTime(timezone=True), server_default=db.func.now()
    )

    def __repr__(self):
        return f"<Order {self.payment_ref} ({self.status})>"
