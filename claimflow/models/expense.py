"""Expense claim model definitions."""
from __future__ import annotations

import enum

from claimflow import db


class ExpenseStatus(enum.Enum):
    PENDING = "pending"
    APPROVED_MANAGER = "approved_manager"
    APPROVED_FINANCE = "approved_finance"
    REJECTED = "rejected"
    # Reserved; no transition produces or consumes it.
    PROCESSED = "processed"

    @classmethod
    def parse(cls, value: str) -> "ExpenseStatus":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls[str(value).strip().upper()]


class Expense(db.Model):
    __tablename__ = "expenses"

    id = db.Column(db.Integer, primary_key=True)
    description = db.Column(db.Text, nullable=False)
    amount = db.Column(db.Numeric(10, 2), nullable=False)
    date = db.Column(db.Date, nullable=False, index=True)
    user_id = db.Column(db.String(255), db.ForeignKey("users.id"), nullable=False, index=True)
    company_id = db.Column(db.Integer, db.ForeignKey("companies.id"), nullable=False, index=True)
    status = db.Column(
        db.Enum(ExpenseStatus, name="expense_status"),
        nullable=False,
        default=ExpenseStatus.PENDING,
        index=True,
    )
    billable = db.Column(db.Boolean, default=False, nullable=False)
    receipt_url = db.Column(db.String(1024), nullable=True)
    rejection_reason = db.Column(db.Text, nullable=True)
    approved_by = db.Column(db.String(255), db.ForeignKey("users.id"), nullable=True)
    approval_comment = db.Column(db.Text, nullable=True)
    decided_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, server_default=db.func.now(), nullable=False)
    updated_at = db.Column(
        db.DateTime, server_default=db.func.now(), onupdate=db.func.now(), nullable=False
    )

    company = db.relationship("Company", back_populates="expenses", lazy="joined")
    user = db.relationship(
        "User", foreign_keys=[user_id], back_populates="submitted_expenses", lazy="joined"
    )
    approver = db.relationship(
        "User", foreign_keys=[approved_by], back_populates="decided_expenses", lazy="joined"
    )

    def to_dict(self, expand: bool = False) -> dict:
        payload = {
            "id": self.id,
            "description": self.description,
            "amount": f"{self.amount:.2f}" if self.amount is not None else None,
            "date": self.date.isoformat() if self.date else None,
            "user_id": self.user_id,
            "company_id": self.company_id,
            "status": self.status.value if self.status else None,
            "billable": self.billable,
            "receipt_url": self.receipt_url,
            "rejection_reason": self.rejection_reason,
            "approved_by": self.approved_by,
            "approval_comment": self.approval_comment,
            "decided_at": self.decided_at.isoformat() if self.decided_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
        if expand:
            payload["user"] = self.user.to_dict() if self.user else None
            payload["company"] = self.company.to_dict() if self.company else None
            payload["approver"] = self.approver.to_dict() if self.approver else None
        return payload

    def __repr__(self) -> str:
        return f"<Expense id={self.id} status={self.status.value if self.status else None}>"
