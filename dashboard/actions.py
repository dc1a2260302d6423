"""
Mutation actions: create, update and delete invoices, and sign in.

Each invoice action runs validation, then the store write, then the
revalidation signal, then returns where to navigate. A failed validation
returns an ``InvoiceFormState`` and never touches the store. A failed
store write is logged and raised as ``MutationError``.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING, Any, Callable, MutableMapping, Mapping, Optional, Union

from pydantic import BaseModel, Field

from dashboard.errors import AuthError, MutationError, StoreError
from dashboard.revalidation import Revalidator
from dashboard.store import DashboardStore
from dashboard.validation import validate_invoice_form

if TYPE_CHECKING:
    from auth.provider import CredentialsProvider

logger = logging.getLogger(__name__)

INVOICES_PATH = "/dashboard/invoices"


class InvoiceFormState(BaseModel):
    """Form state returned to the invoice form after a failed submit."""

    errors: dict[str, list[str]] = Field(default_factory=dict)
    message: Optional[str] = None


@dataclass(frozen=True)
class Redirect:
    """Navigate to ``location`` after a successful action."""

    location: str


ActionResult = Union[InvoiceFormState, Redirect]


def create_invoice(
    store: DashboardStore,
    revalidator: Revalidator,
    form: Mapping[str, Any],
    today: Callable[[], date] = date.today,
) -> ActionResult:
    """
    Create an invoice dated today.

    Returns:
        InvoiceFormState when the form is invalid, else Redirect to the list.

    Raises:
        MutationError: The insert failed.
    """
    validated = validate_invoice_form(form)
    if not validated.success:
        return InvoiceFormState(errors=validated.errors, message="Failed to Create Invoice.")

    fields = validated.data
    try:
        invoice = store.insert_invoice(
            customer_id=fields.customer_id,
            amount=fields.amount_in_cents,
            status=fields.status.value,
            date=today().isoformat(),
        )
    except StoreError as e:
        logger.error(f"Error inserting invoice: {e}")
        raise MutationError("Failed to create invoice.") from e

    logger.info(f"Created invoice {invoice.id} for customer {invoice.customer_id}")
    revalidator.revalidate_path(INVOICES_PATH)
    return Redirect(INVOICES_PATH)


def update_invoice(
    store: DashboardStore,
    revalidator: Revalidator,
    invoice_id: str,
    form: Mapping[str, Any],
) -> ActionResult:
    """
    Replace customer, amount and status of an invoice. Id and date stay.

    Raises:
        MutationError: The update failed.
    """
    validated = validate_invoice_form(form)
    if not validated.success:
        return InvoiceFormState(errors=validated.errors, message="Failed to Update Invoice.")

    fields = validated.data
    try:
        updated = store.update_invoice(
            invoice_id,
            customer_id=fields.customer_id,
            amount=fields.amount_in_cents,
            status=fields.status.value,
        )
    except StoreError as e:
        logger.error(f"Error updating invoice {invoice_id}: {e}")
        raise MutationError("Failed to update invoice.") from e

    if not updated:
        logger.warning(f"Update matched no invoice with id {invoice_id}")

    revalidator.revalidate_path(INVOICES_PATH)
    return Redirect(INVOICES_PATH)


def delete_invoice(
    store: DashboardStore,
    revalidator: Revalidator,
    invoice_id: str,
) -> None:
    """
    Hard-delete an invoice. Unknown ids delete nothing but still revalidate.

    Raises:
        MutationError: The delete failed.
    """
    try:
        deleted = store.delete_invoice(invoice_id)
    except StoreError as e:
        logger.error(f"Error deleting invoice {invoice_id}: {e}")
        raise MutationError("Failed to delete invoice.") from e

    if not deleted:
        logger.warning(f"Delete matched no invoice with id {invoice_id}")

    revalidator.revalidate_path(INVOICES_PATH)


def authenticate(
    provider: "CredentialsProvider",
    form: Mapping[str, Any],
    session: MutableMapping[str, Any],
) -> Optional[str]:
    """
    Sign in with the submitted email and password.

    Returns:
        None on success, otherwise a message for the login form.

    Raises:
        Anything that is not an AuthError.
    """
    try:
        provider.sign_in(form, session)
    except AuthError as e:
        if e.kind == AuthError.CREDENTIALS_SIGNIN:
            return "Invalid credentials."
        return "Something went wrong."
    return None
