"""User model.

Local mirror of auth-provider profiles. Used to resolve a tenant owner's
email when the Supabase admin API is not configured.
"""

import uuid

from toogo.extensions import db


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    email = db.Column(db.String(255), unique=True, nullable=False)
    full_name = db.Column(db.String(255))
    created_at = db.Column(
        db.DateTime(timezone=True), server_default=db.func.now()
    )

    @property
    def first_name(self):
        if not self.full_name:
            return None
        return self.full_name.split()[0]

    def __repr__(self):
        return f"<User {self.email}>"
