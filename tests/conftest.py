"""Pytest fixtures for the ClaimFlow test suite.

Every test gets a fresh application bound to an in-memory SQLite database.
Callers authenticate the way the upstream identity provider does, through
the trusted identity headers (see ``headers_for``).
"""
from datetime import date

import pytest
from flask import g, request_started

from claimflow import create_app, db
from claimflow.models import Company, Expense, ExpenseStatus, User, UserRole
from claimflow.services import expense_service


def _forget_loaded_user(sender, **extra):
    # Test-client requests share the fixture's app context, and with it the
    # user Flask-Login cached on g.
    g.pop("_login_user", None)


@pytest.fixture
def app():
    app = create_app("testing")
    request_started.connect(_forget_loaded_user, app)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()
    request_started.disconnect(_forget_loaded_user, app)


@pytest.fixture
def client(app):
    return app.test_client()


def _make_user(user_id: str, role: UserRole) -> User:
    user = User(
        id=user_id,
        email=f"{user_id}@example.com",
        first_name=user_id.capitalize(),
        last_name="Tester",
        role=role,
    )
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def employee(app):
    return _make_user("emma", UserRole.EMPLOYEE)


@pytest.fixture
def other_employee(app):
    return _make_user("oscar", UserRole.EMPLOYEE)


@pytest.fixture
def manager(app):
    return _make_user("maria", UserRole.MANAGER)


@pytest.fixture
def finance(app):
    return _make_user("fiona", UserRole.FINANCE)


@pytest.fixture
def admin(app):
    return _make_user("adam", UserRole.ADMIN)


@pytest.fixture
def users(employee, other_employee, manager, finance, admin):
    return {
        UserRole.EMPLOYEE: employee,
        UserRole.MANAGER: manager,
        UserRole.FINANCE: finance,
        UserRole.ADMIN: admin,
    }


@pytest.fixture
def internal_company(app):
    company = Company(name="Internal Operations", is_external=False)
    db.session.add(company)
    db.session.commit()
    return company


@pytest.fixture
def client_company(app):
    company = Company(name="Acme Corp (Client)", is_external=True)
    db.session.add(company)
    db.session.commit()
    return company


def headers_for(user: User) -> dict:
    return {"X-Auth-User-Id": user.id}


@pytest.fixture
def make_claim(internal_company):
    """Create a claim through the service, optionally forcing its status."""

    def _make_claim(owner, status=ExpenseStatus.PENDING, approver=None, **fields) -> Expense:
        payload = {
            "description": "Taxi to client site",
            "amount": "50.00",
            "date": date(2026, 3, 14).isoformat(),
            "company_id": internal_company.id,
            "billable": False,
        }
        payload.update(fields)
        claim = expense_service.create_claim(owner, payload)
        if status is not ExpenseStatus.PENDING:
            claim.status = status
            claim.approved_by = approver.id if approver else None
            if status is ExpenseStatus.REJECTED:
                claim.rejection_reason = "missing receipt"
            db.session.commit()
        return claim

    return _make_claim
