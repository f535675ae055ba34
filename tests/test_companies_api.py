"""Company administration over HTTP."""
from claimflow import db
from claimflow.models import Company

from conftest import headers_for


def test_any_user_lists_companies_by_name(client, employee, app):
    for name, external in (("Zeta Labs", True), ("Alpha Ops", False), ("Midway", True)):
        db.session.add(Company(name=name, is_external=external))
    db.session.commit()

    response = client.get("/api/companies", headers=headers_for(employee))
    assert response.status_code == 200
    assert [company["name"] for company in response.get_json()] == ["Alpha Ops", "Midway", "Zeta Labs"]


def test_admin_creates_company(client, admin):
    response = client.post(
        "/api/companies",
        json={"name": "  Initech (Client) ", "isExternal": True},
        headers=headers_for(admin),
    )
    assert response.status_code == 201
    body = response.get_json()
    assert body["name"] == "Initech (Client)"
    assert body["is_external"] is True


def test_company_defaults_to_internal(client, admin):
    body = client.post(
        "/api/companies", json={"name": "Back Office"}, headers=headers_for(admin)
    ).get_json()
    assert body["is_external"] is False


def test_company_name_is_required(client, admin):
    response = client.post("/api/companies", json={"name": " "}, headers=headers_for(admin))
    assert response.status_code == 400
    assert "name" in response.get_json()["error"]["fields"]


def test_non_admin_cannot_manage_companies(client, manager, internal_company):
    response = client.post("/api/companies", json={"name": "Nope"}, headers=headers_for(manager))
    assert response.status_code == 403

    response = client.delete(f"/api/companies/{internal_company.id}", headers=headers_for(manager))
    assert response.status_code == 403
    assert db.session.get(Company, internal_company.id) is not None


def test_admin_deletes_unreferenced_company(client, admin, client_company):
    company_id = client_company.id
    response = client.delete(f"/api/companies/{company_id}", headers=headers_for(admin))
    assert response.status_code == 204
    assert response.data == b""
    db.session.expire_all()
    assert db.session.get(Company, company_id) is None


def test_company_with_claims_cannot_be_deleted(client, admin, employee, internal_company, make_claim):
    make_claim(employee)
    response = client.delete(f"/api/companies/{internal_company.id}", headers=headers_for(admin))
    assert response.status_code == 409
    error = response.get_json()["error"]
    assert error["code"] == "conflict"
    assert "referenced by 1 expense" in error["message"]
    assert db.session.get(Company, internal_company.id) is not None


def test_delete_missing_company(client, admin):
    response = client.delete("/api/companies/999", headers=headers_for(admin))
    assert response.status_code == 404
