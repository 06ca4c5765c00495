"""Catalog models.

Plain storefront rows. The activation workflow only seeds a default
category and a sample product; everything else is managed from the
dashboard.
"""

import uuid

from toogo.extensions import db


class Category(db.Model):
    __tablename__ = "categories"

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    tenant_id = db.Column(
        db.String(36), db.ForeignKey("tenants.id"), nullable=False
    )
    name = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(255), nullable=False)
    show_on_home = db.Column(db.Boolean, default=False)
    sort = db.Column(db.Integer, default=0)
    created_at = db.Column(
        db.DateTime(timezone=True), server_default=db.func.now()
    )

    __table_args__ = (
        db.UniqueConstraint("tenant_id", "slug", name="uq_category_tenant_slug"),
    )

    def __repr__(self):
        return f"<Category {self.slug}>"


class Product(db.Model):
    __tablename__ = "products"

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    tenant_id = db.Column(
        db.String(36), db.ForeignKey("tenants.id"), nullable=False
    )
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    price_mxn = db.Column(db.Float, nullable=False, default=0)
    sale_price_mxn = db.Column(db.Float, nullable=True)
    stock = db.Column(db.Integer, default=0)
    status = db.Column(db.String(20), default="active")  # active | draft
    product_type = db.Column(
        db.String(20), default="simple"
    )  # simple | variable
    created_at = db.Column(
        db.DateTime(timezone=True), server_default=db.func.now()
    )
    updated_at = db.Column(
        db.DateTime(timezone=True),
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    def __repr__(self):
        return f"<Product {self.title}>"
