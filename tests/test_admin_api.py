"""User administration and caller identity."""
from claimflow import db
from claimflow.models import User, UserRole

from conftest import headers_for


def test_admin_lists_users(client, admin, employee, manager):
    response = client.get("/api/users", headers=headers_for(admin))
    assert response.status_code == 200
    assert {user["id"] for user in response.get_json()} == {admin.id, employee.id, manager.id}


def test_non_admin_cannot_list_users(client, manager):
    response = client.get("/api/users", headers=headers_for(manager))
    assert response.status_code == 403


def test_admin_changes_role(client, admin, employee):
    response = client.patch(
        f"/api/users/{employee.id}/role", json={"role": "finance"}, headers=headers_for(admin)
    )
    assert response.status_code == 200
    assert response.get_json()["role"] == "finance"
    db.session.expire_all()
    assert db.session.get(User, employee.id).role is UserRole.FINANCE


def test_role_change_rejects_unknown_role(client, admin, employee):
    response = client.patch(
        f"/api/users/{employee.id}/role", json={"role": "ceo"}, headers=headers_for(admin)
    )
    assert response.status_code == 400
    assert "role" in response.get_json()["error"]["fields"]


def test_role_change_for_missing_user(client, admin):
    response = client.patch(
        "/api/users/ghost/role", json={"role": "manager"}, headers=headers_for(admin)
    )
    assert response.status_code == 404


def test_only_admin_changes_roles(client, manager, employee):
    response = client.patch(
        f"/api/users/{employee.id}/role", json={"role": "admin"}, headers=headers_for(manager)
    )
    assert response.status_code == 403
    db.session.expire_all()
    assert db.session.get(User, employee.id).role is UserRole.EMPLOYEE


def test_first_request_registers_employee(client, app):
    response = client.get(
        "/api/auth/user",
        headers={
            "X-Auth-User-Id": "newbie",
            "X-Auth-User-Email": "newbie@example.com",
            "X-Auth-User-First-Name": "New",
            "X-Auth-User-Last-Name": "Hire",
        },
    )
    assert response.status_code == 200
    body = response.get_json()
    assert body["id"] == "newbie"
    assert body["role"] == "employee"
    assert body["full_name"] == "New Hire"
    assert db.session.get(User, "newbie") is not None


def test_profile_headers_refresh_but_never_set_role(client, manager):
    response = client.get(
        "/api/auth/user",
        headers={
            "X-Auth-User-Id": manager.id,
            "X-Auth-User-Email": "maria.new@example.com",
            "X-Auth-User-Image": "https://img.example.com/maria.png",
        },
    )
    body = response.get_json()
    assert body["email"] == "maria.new@example.com"
    assert body["profile_image_url"] == "https://img.example.com/maria.png"
    assert body["role"] == "manager"


def test_me_requires_identity(client):
    response = client.get("/api/auth/user")
    assert response.status_code == 401


def test_logout(client, employee):
    response = client.post("/api/logout", headers=headers_for(employee))
    assert response.status_code == 200
