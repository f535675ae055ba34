from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Mapping, Type, TypeVar

from flask_wtf import FlaskForm
from werkzeug.datastructures import MultiDict
from wtforms import BooleanField, DecimalField, IntegerField, SelectField, StringField, TextAreaField
from wtforms.fields import DateField
from wtforms.validators import DataRequired, InputRequired, Length, NumberRange, Optional, ValidationError

from claimflow.errors import ValidationError as PayloadValidationError
from claimflow.models import UserRole

MAX_AMOUNT = Decimal("99999999.99")

# camelCase keys sent by the original web client.
FIELD_ALIASES = {
    "companyId": "company_id",
    "receiptUrl": "receipt_url",
    "rejectionReason": "rejection_reason",
    "isExternal": "is_external",
    "contentType": "content_type",
    "userId": "user_id",
}

FormT = TypeVar("FormT", bound=FlaskForm)


class ApiForm(FlaskForm):
    """Form bound to a JSON payload rather than the request body."""

    class Meta:
        csrf = False


class ExpenseForm(ApiForm):
    description = TextAreaField("Description", validators=[DataRequired(), Length(max=2000)])
    amount = DecimalField("Amount", places=2, rounding=None, validators=[InputRequired()])
    date = DateField("Date of expense", validators=[InputRequired()])
    company_id = IntegerField("Company", validators=[InputRequired()])
    billable = BooleanField("Billable", default=False)
    receipt_url = StringField("Receipt", validators=[Optional(), Length(max=1024)])

    def validate_amount(self, field):  # pylint: disable=missing-docstring
        amount = field.data
        if field.process_errors:
            return
        if amount is None or not amount.is_finite():
            raise ValidationError("Not a valid decimal value.")
        if amount < Decimal("0.01"):
            raise ValidationError("Amount must be at least 0.01.")
        if amount > MAX_AMOUNT:
            raise ValidationError(f"Amount must not exceed {MAX_AMOUNT}.")
        if amount != amount.quantize(Decimal("0.01")):
            raise ValidationError("Amount can have at most two decimal places.")


class CompanyForm(ApiForm):
    name = StringField("Company name", validators=[DataRequired(), Length(max=255)])
    is_external = BooleanField("External client", default=False)


class RoleForm(ApiForm):
    role = SelectField(
        "Role",
        validators=[DataRequired()],
        choices=[(role.value, role.value) for role in UserRole],
    )


class UploadRequestForm(ApiForm):
    name = StringField("File name", validators=[DataRequired(), Length(max=255)])
    size = IntegerField("File size", validators=[InputRequired(), NumberRange(min=1)])
    content_type = StringField("Content type", validators=[DataRequired(), Length(max=255)])


def normalize_payload(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """Map client aliases onto snake_case field names.

    When a payload carries both spellings of a field, the snake_case key wins.
    """
    normalized: Dict[str, Any] = {}
    for key, value in payload.items():
        field = FIELD_ALIASES.get(key, key)
        if field != key and field in payload:
            continue
        normalized[field] = value
    return normalized


def _as_formdata(payload: Mapping[str, Any]) -> MultiDict:
    items = []
    nested: Dict[str, List[str]] = {}
    for key, value in payload.items():
        if value is None:
            continue
        if isinstance(value, (list, dict)):
            nested[key] = ["Must be a scalar value."]
        elif isinstance(value, bool):
            items.append((key, value))
        elif isinstance(value, (int, float, Decimal)):
            items.append((key, str(value)))
        else:
            items.append((key, value))
    if nested:
        raise PayloadValidationError("Validation failed.", fields=nested)
    return MultiDict(items)


def validated_form(form_cls: Type[FormT], payload: Mapping[str, Any]) -> FormT:
    """Build ``form_cls`` from a JSON payload, raising on invalid input."""
    form = form_cls(formdata=_as_formdata(normalize_payload(payload)))
    if not form.validate():
        raise PayloadValidationError("Validation failed.", fields=form.errors)
    return form
