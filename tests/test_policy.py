"""Authorization policy, exercised without any HTTP handler."""
import logging

import pytest

from claimflow.errors import Forbidden
from claimflow.models import ExpenseStatus, User, UserRole
from claimflow.services import policy
from claimflow.services.policy import Action

EMPLOYEE, MANAGER, FINANCE, ADMIN = (
    UserRole.EMPLOYEE,
    UserRole.MANAGER,
    UserRole.FINANCE,
    UserRole.ADMIN,
)


@pytest.mark.parametrize(
    "action, allowed",
    [
        (Action.LIST_CLAIMS, {EMPLOYEE, MANAGER, FINANCE, ADMIN}),
        (Action.CREATE_CLAIM, {EMPLOYEE, MANAGER, FINANCE, ADMIN}),
        (Action.VIEW_CLAIM, {MANAGER, FINANCE, ADMIN}),
        (Action.EDIT_CLAIM, set()),
        (Action.TRANSITION_CLAIM, {MANAGER, FINANCE, ADMIN}),
        (Action.VIEW_APPROVAL_QUEUE, {MANAGER, FINANCE, ADMIN}),
        (Action.LIST_COMPANIES, {EMPLOYEE, MANAGER, FINANCE, ADMIN}),
        (Action.MANAGE_COMPANIES, {ADMIN}),
        (Action.MANAGE_USERS, {ADMIN}),
        (Action.REQUEST_UPLOAD, {EMPLOYEE, MANAGER, FINANCE, ADMIN}),
        (Action.VIEW_REPORTS, {EMPLOYEE, MANAGER, FINANCE, ADMIN}),
    ],
)
def test_role_rules_for_non_owners(action, allowed):
    granted = {role for role in UserRole if policy.is_allowed(role, action)}
    assert granted == allowed


@pytest.mark.parametrize("role", list(UserRole))
def test_owner_can_view_and_edit_own_claim(role):
    assert policy.is_allowed(role, Action.VIEW_CLAIM, is_owner=True)
    assert policy.is_allowed(role, Action.EDIT_CLAIM, is_owner=True)


def test_ownership_does_not_grant_admin_actions():
    assert not policy.is_allowed(EMPLOYEE, Action.MANAGE_USERS, is_owner=True)
    assert not policy.is_allowed(EMPLOYEE, Action.TRANSITION_CLAIM, is_owner=True)


def test_only_employees_are_scoped_to_their_own_claims():
    assert not policy.sees_all_claims(EMPLOYEE)
    assert all(policy.sees_all_claims(role) for role in (MANAGER, FINANCE, ADMIN))


def test_queue_statuses_follow_the_gates():
    assert policy.queue_statuses(MANAGER) == (ExpenseStatus.PENDING,)
    assert policy.queue_statuses(FINANCE) == (ExpenseStatus.APPROVED_MANAGER,)
    assert set(policy.queue_statuses(ADMIN)) == {
        ExpenseStatus.PENDING,
        ExpenseStatus.APPROVED_MANAGER,
    }
    with pytest.raises(Forbidden):
        policy.queue_statuses(EMPLOYEE)


def test_authorize_compares_owner_id(caplog):
    user = User(id="u1", role=EMPLOYEE)
    policy.authorize(user, Action.EDIT_CLAIM, owner_id="u1")

    with caplog.at_level(logging.WARNING, logger="claimflow.services.policy"):
        with pytest.raises(Forbidden, match="Only the owner"):
            policy.authorize(user, Action.EDIT_CLAIM, owner_id="u2")
    assert "Denied edit_claim for user u1" in caplog.text


def test_authorize_denies_employee_from_admin_actions():
    user = User(id="u1", role=EMPLOYEE)
    with pytest.raises(Forbidden) as excinfo:
        policy.authorize(user, Action.MANAGE_COMPANIES)
    assert excinfo.value.status == 403
    assert excinfo.value.code == "forbidden"
