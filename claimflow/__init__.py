"""Application factory and extension initialization for ClaimFlow."""
from __future__ import annotations

import logging
import os
from typing import Optional

from dotenv import load_dotenv
from flask import Flask
from flask.logging import default_handler
from flask_login import LoginManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

from config import config_by_name

# Global extension instances -------------------------------------------------

db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()


def _configure_logging(app: Flask) -> None:
    level = logging.getLevelName(str(app.config.get("LOG_LEVEL", "INFO")).upper())
    if not isinstance(level, int):
        level = logging.INFO

    package_logger = logging.getLogger("claimflow")
    package_logger.setLevel(level)
    if default_handler not in package_logger.handlers:
        package_logger.addHandler(default_handler)
    app.logger.setLevel(level)


def create_app(config_name: Optional[str] = None) -> Flask:
    """Flask application factory."""
    load_dotenv()

    app = Flask(__name__, instance_relative_config=True)

    config_name = config_name or os.getenv("FLASK_CONFIG", "development")
    config_class = config_by_name.get(config_name.lower())
    if config_class is None:
        raise ValueError(f"Unknown Flask configuration '{config_name}'")

    app.config.from_object(config_class)
    _configure_logging(app)

    # Ensure instance folder exists for SQLite DBs
    os.makedirs(app.instance_path, exist_ok=True)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)

    from claimflow.auth.identity import init_identity
    init_identity(login_manager)

    from claimflow.errors import register_error_handlers
    register_error_handlers(app)

    # Register blueprints
    from claimflow.auth import auth_bp
    from claimflow.expenses import expenses_bp
    from claimflow.approvals import approvals_bp
    from claimflow.companies import companies_bp
    from claimflow.admin import admin_bp
    from claimflow.uploads import uploads_bp
    from claimflow.reports import reports_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(expenses_bp)
    app.register_blueprint(approvals_bp)
    app.register_blueprint(companies_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(uploads_bp)
    app.register_blueprint(reports_bp)

    from claimflow.cli import register_commands
    register_commands(app)

    # Import all models to ensure they are registered with SQLAlchemy
    from claimflow.models import Company, Expense, User

    @app.shell_context_processor
    def shell_context():
        return {"db": db, "User": User, "Company": Company, "Expense": Expense}

    app.logger.debug("ClaimFlow app created with '%s' configuration", config_name)
    return app
