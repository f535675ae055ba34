"""User model."""
from __future__ import annotations

import enum

from flask_login import UserMixin

from claimflow import db


class UserRole(enum.Enum):
    EMPLOYEE = "employee"
    MANAGER = "manager"
    FINANCE = "finance"
    ADMIN = "admin"

    @classmethod
    def parse(cls, value: str) -> "UserRole":
        """Resolve a role from its wire value or member name."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls[str(value).strip().upper()]


class User(UserMixin, db.Model):
    __tablename__ = "users"

    id = db.Column(db.String(255), primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=True, index=True)
    first_name = db.Column(db.String(100), nullable=True)
    last_name = db.Column(db.String(100), nullable=True)
    profile_image_url = db.Column(db.String(1024), nullable=True)
    role = db.Column(db.Enum(UserRole, name="user_role"), nullable=False, default=UserRole.EMPLOYEE)
    created_at = db.Column(db.DateTime, server_default=db.func.now(), nullable=False)
    updated_at = db.Column(
        db.DateTime, server_default=db.func.now(), onupdate=db.func.now(), nullable=False
    )

    submitted_expenses = db.relationship(
        "Expense",
        foreign_keys="Expense.user_id",
        back_populates="user",
        lazy="select",
    )
    decided_expenses = db.relationship(
        "Expense",
        foreign_keys="Expense.approved_by",
        back_populates="approver",
        lazy="select",
    )

    def get_id(self) -> str:
        return str(self.id)

    @property
    def full_name(self) -> str:
        """Get user's display name."""
        name = " ".join(part for part in (self.first_name, self.last_name) if part)
        return name or self.email or self.id

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "full_name": self.full_name,
            "profile_image_url": self.profile_image_url,
            "role": self.role.value if self.role else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self) -> str:
        return f"<User {self.id} role={self.role.value if self.role else None}>"
