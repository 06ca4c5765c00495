"""Audit event model.

Logs significant system actions (domain setup runs, DNS verification) for
the admin activity feed and debugging.
"""

import uuid

from toogo.extensions import db


class AuditEvent(db.Model):
    __tablename__ = "audit_events"

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    tenant_id = db.Column(
        db.String(36), db.ForeignKey("tenants.id"), nullable=True
    )
    action = db.Column(db.String(255), nullable=False)  # e.g. "domain_setup.finished"
    metadata_ = db.Column(
        "metadata", db.JSON, default=dict
    )  # extra context, named metadata_ to avoid the declarative attribute clash
    created_at = db.Column(
        db.DateTime(timezone=True), server_default=db.func.now()
    )

    def __repr__(self):
        return f"<AuditEvent {self.action}>"
