"""Companies blueprint."""
from flask import Blueprint

companies_bp = Blueprint("companies", __name__, url_prefix="/api/companies")

from . import routes  # noqa: E402,F401
