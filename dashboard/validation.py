"""Invoice form validation."""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from dashboard.models import InvoiceStatus

logger = logging.getLogger(__name__)

FIELD_MESSAGES = {
    "customerId": "Please select a customer.",
    "amount": "Please enter an amount greater than $0.",
    "status": "Please select an invoice status.",
}

# Largest amount whose cents fit the 32-bit amount column
MAX_AMOUNT = Decimal("21474836.47")


class InvoiceFields(BaseModel):
    """Validated invoice form values. ``amount`` is in dollars."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    customer_id: str = Field(..., alias="customerId", min_length=1)
    amount: Decimal = Field(..., gt=0, le=MAX_AMOUNT)
    status: InvoiceStatus

    @field_validator("amount")
    @classmethod
    def at_least_one_cent(cls, v: Decimal) -> Decimal:
        if to_cents(v) <= 0:
            raise ValueError("amount rounds to zero cents")
        return v

    @property
    def amount_in_cents(self) -> int:
        return to_cents(self.amount)


class FormValidation(BaseModel):
    """Outcome of validating a submitted invoice form."""

    success: bool
    data: Optional[InvoiceFields] = None
    errors: dict[str, list[str]] = Field(default_factory=dict)


def to_cents(amount: Decimal) -> int:
    """Convert dollars to integer cents, rounding half up (19.99 -> 1999)."""
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _normalize(value: Any) -> Any:
    if isinstance(value, float):
        # repr is the shortest exact form, so 19.99 stays "19.99"
        return repr(value)
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def validate_invoice_form(form: Mapping[str, Any]) -> FormValidation:
    """
    Validate customer, amount and status from a submitted form.

    Keys other than ``customerId``, ``amount`` and ``status`` are ignored.
    Failures are returned, never raised: ``errors`` maps each bad field
    to its messages.
    """
    raw = {key: _normalize(form.get(key)) for key in FIELD_MESSAGES}

    try:
        fields = InvoiceFields.model_validate(raw)
    except ValidationError as e:
        errors: dict[str, list[str]] = {}
        for error in e.errors():
            field = str(error["loc"][0]) if error["loc"] else ""
            message = FIELD_MESSAGES.get(field)
            if message and message not in errors.get(field, []):
                errors.setdefault(field, []).append(message)
        logger.debug(f"Invoice form rejected: {sorted(errors)}")
        return FormValidation(success=False, errors=errors)

    return FormValidation(success=True, data=fields)
