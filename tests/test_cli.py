"""Bootstrap commands."""
from claimflow import db
from claimflow.models import Company, User, UserRole


def test_seed_companies_once(app):
    runner = app.test_cli_runner()

    result = runner.invoke(args=["seed-companies"])
    assert "Seeded 3 companies." in result.output
    assert {(c.name, c.is_external) for c in Company.query.all()} == {
        ("Internal Operations", False),
        ("Acme Corp (Client)", True),
        ("Globex Inc (Client)", True),
    }

    result = runner.invoke(args=["seed-companies"])
    assert "nothing to seed" in result.output
    assert Company.query.count() == 3


def test_promote_admin(app, employee):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["promote-admin", employee.id])
    assert result.exit_code == 0
    assert db.session.get(User, employee.id).role is UserRole.ADMIN


def test_promote_unknown_user(app):
    result = app.test_cli_runner().invoke(args=["promote-admin", "nobody"])
    assert result.exit_code != 0
    assert "not found" in result.output
