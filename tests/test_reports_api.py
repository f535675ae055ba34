"""Dashboard summary figures."""
from claimflow.models import ExpenseStatus

from conftest import headers_for


def _seed(make_claim, employee, other_employee, manager, client_company):
    make_claim(employee, amount="50.00")
    make_claim(employee, amount="20.25", billable=True, company_id=client_company.id,
               status=ExpenseStatus.APPROVED_FINANCE, approver=manager)
    make_claim(employee, amount="10.00", status=ExpenseStatus.REJECTED, approver=manager)
    make_claim(other_employee, amount="100.00", status=ExpenseStatus.APPROVED_MANAGER, approver=manager)


def test_employee_summary_covers_own_claims(
    client, employee, other_employee, manager, make_claim, client_company
):
    _seed(make_claim, employee, other_employee, manager, client_company)

    response = client.get("/api/reports/summary", headers=headers_for(employee))
    assert response.status_code == 200
    body = response.get_json()
    assert body["claim_count"] == 3
    assert body["in_progress"] == 1
    assert body["approved"] == 1
    assert body["rejected"] == 1
    assert body["total_amount"] == "80.25"
    assert body["billable_amount"] == "20.25"
    assert body["internal_amount"] == "60.00"
    assert body["by_status"] == {
        "pending": 1,
        "approved_manager": 0,
        "approved_finance": 1,
        "rejected": 1,
    }


def test_manager_summary_covers_everything(
    client, employee, other_employee, manager, make_claim, client_company
):
    _seed(make_claim, employee, other_employee, manager, client_company)

    body = client.get("/api/reports/summary", headers=headers_for(manager)).get_json()
    assert body["claim_count"] == 4
    assert body["in_progress"] == 2
    assert body["total_amount"] == "180.25"
    assert body["by_company"] == [
        {
            "company_id": client_company.id,
            "name": "Acme Corp (Client)",
            "is_external": True,
            "total_amount": "20.25",
            "claim_count": 1,
        },
        {
            "company_id": body["by_company"][1]["company_id"],
            "name": "Internal Operations",
            "is_external": False,
            "total_amount": "160.00",
            "claim_count": 3,
        },
    ]


def test_empty_summary(client, finance):
    body = client.get("/api/reports/summary", headers=headers_for(finance)).get_json()
    assert body["claim_count"] == 0
    assert body["total_amount"] == "0.00"
    assert body["by_company"] == []
