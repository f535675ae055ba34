"""Flask CLI commands for bootstrapping a deployment."""
from __future__ import annotations

import click
from flask import Flask

from claimflow import db
from claimflow.models import Company, User, UserRole

DEFAULT_COMPANIES = (
    ("Internal Operations", False),
    ("Acme Corp (Client)", True),
    ("Globex Inc (Client)", True),
)


def seed_companies() -> int:
    """Create the default companies when none exist. Returns how many were added."""
    if Company.query.count():
        return 0
    for name, is_external in DEFAULT_COMPANIES:
        db.session.add(Company(name=name, is_external=is_external))
    db.session.commit()
    return len(DEFAULT_COMPANIES)


def register_commands(app: Flask) -> None:
    @app.cli.command("seed-companies")
    def seed_companies_command() -> None:
        """Seed the default internal and client companies."""
        created = seed_companies()
        if created:
            click.echo(f"Seeded {created} companies.")
        else:
            click.echo("Companies already present; nothing to seed.")

    @app.cli.command("promote-admin")
    @click.argument("user_id")
    def promote_admin_command(user_id: str) -> None:
        """Grant the admin role to USER_ID (first administrator bootstrap)."""
        user = db.session.get(User, user_id)
        if user is None:
            raise click.ClickException(f"User '{user_id}' not found; sign in once first.")
        user.role = UserRole.ADMIN
        db.session.commit()
        click.echo(f"User {user_id} is now an admin.")
