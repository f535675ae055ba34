"""Company and user administration."""
from __future__ import annotations

import logging
from typing import Any, List, Mapping

from claimflow import db
from claimflow.errors import Conflict, NotFound, ValidationError
from claimflow.forms import CompanyForm, RoleForm, validated_form
from claimflow.models import Company, Expense, User, UserRole
from claimflow.services.policy import Action, authorize

logger = logging.getLogger(__name__)


def list_companies(viewer: User) -> List[Company]:
    authorize(viewer, Action.LIST_COMPANIES)
    return Company.query.order_by(Company.name.asc(), Company.id.asc()).all()


def create_company(actor: User, payload: Mapping[str, Any]) -> Company:
    authorize(actor, Action.MANAGE_COMPANIES)
    form = validated_form(CompanyForm, payload)

    company = Company(name=form.name.data.strip(), is_external=bool(form.is_external.data))
    db.session.add(company)
    db.session.commit()
    logger.info("Company %s (%s) created by %s", company.id, company.name, actor.id)
    return company


def delete_company(actor: User, company_id: int) -> None:
    """Hard-delete a company that no claim references."""
    authorize(actor, Action.MANAGE_COMPANIES)
    company = db.session.get(Company, company_id)
    if company is None:
        raise NotFound("Company not found.")

    claim_count = Expense.query.filter(Expense.company_id == company.id).count()
    if claim_count:
        raise Conflict(
            f"Company '{company.name}' is referenced by {claim_count} expense(s) and cannot be deleted."
        )

    db.session.delete(company)
    db.session.commit()
    logger.info("Company %s deleted by %s", company_id, actor.id)


def list_users(actor: User) -> List[User]:
    authorize(actor, Action.MANAGE_USERS)
    return User.query.order_by(User.created_at.asc(), User.id.asc()).all()


def update_user_role(actor: User, user_id: str, payload: Mapping[str, Any]) -> User:
    authorize(actor, Action.MANAGE_USERS)
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFound("User not found.")

    form = validated_form(RoleForm, payload)
    try:
        role = UserRole.parse(form.role.data)
    except (KeyError, ValueError):
        raise ValidationError.for_field("role", "Unsupported role.") from None

    previous = user.role
    user.role = role
    db.session.commit()
    logger.info(
        "User %s role changed %s -> %s by %s", user.id, previous.value, role.value, actor.id
    )
    return user
