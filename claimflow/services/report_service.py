"""Dashboard and report figures over the claims a user can see."""
from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict

from sqlalchemy import case, func

from claimflow import db
from claimflow.models import Company, ExpenseStatus, User
from claimflow.services.expense_service import visible_claims_query
from claimflow.services.policy import Action, authorize

IN_PROGRESS = (ExpenseStatus.PENDING, ExpenseStatus.APPROVED_MANAGER)


def _money(value: Any) -> str:
    return f"{Decimal(value or 0):.2f}"


def summary(viewer: User) -> Dict[str, Any]:
    authorize(viewer, Action.VIEW_REPORTS)
    claims = visible_claims_query(viewer).subquery()

    by_status = {status.value: 0 for status in ExpenseStatus if status is not ExpenseStatus.PROCESSED}
    for status, count in db.session.query(claims.c.status, func.count()).group_by(claims.c.status):
        by_status[status.value] = count

    total, billable = db.session.query(
        func.coalesce(func.sum(claims.c.amount), 0),
        func.coalesce(func.sum(case((claims.c.billable.is_(True), claims.c.amount), else_=0)), 0),
    ).one()
    total = Decimal(total or 0)
    billable = Decimal(billable or 0)

    company_rows = (
        db.session.query(
            Company.id,
            Company.name,
            Company.is_external,
            func.coalesce(func.sum(claims.c.amount), 0),
            func.count(claims.c.id),
        )
        .join(claims, claims.c.company_id == Company.id)
        .group_by(Company.id, Company.name, Company.is_external)
        .order_by(Company.name.asc())
        .all()
    )

    return {
        "claim_count": sum(by_status.values()),
        "in_progress": sum(by_status[status.value] for status in IN_PROGRESS),
        "approved": by_status[ExpenseStatus.APPROVED_FINANCE.value],
        "rejected": by_status[ExpenseStatus.REJECTED.value],
        "total_amount": _money(total),
        "billable_amount": _money(billable),
        "internal_amount": _money(total - billable),
        "by_status": by_status,
        "by_company": [
            {
                "company_id": company_id,
                "name": name,
                "is_external": is_external,
                "total_amount": _money(amount),
                "claim_count": count,
            }
            for company_id, name, is_external, amount, count in company_rows
        ],
    }
