"""Core domain models for the invoice dashboard."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class InvoiceStatus(str, Enum):
    """Possible invoice statuses."""

    PENDING = "pending"
    PAID = "paid"


class Customer(BaseModel):
    """Customer entity."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    email: str
    image_url: str = ""


class InvoiceRecord(BaseModel):
    """Invoice row as stored. Amount is in cents."""

    model_config = ConfigDict(frozen=True)

    id: str
    customer_id: str
    amount: int
    status: str
    date: str


class Revenue(BaseModel):
    """Revenue for one calendar month."""

    model_config = ConfigDict(frozen=True)

    month: str
    revenue: float


class User(BaseModel):
    """Dashboard user. The password field holds a bcrypt hash."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    email: str
    password: str = Field(..., repr=False)


# ============================================================================
# View models handed to the presentation layer
# ============================================================================


class LatestInvoice(BaseModel):
    """Latest invoice card entry with a formatted amount."""

    id: str
    name: str
    image_url: str
    email: str
    amount: str


class CardData(BaseModel):
    """Summary card values."""

    number_of_invoices: int
    number_of_customers: int
    total_paid_invoices: str
    total_pending_invoices: str


class InvoicesTableRow(BaseModel):
    """Invoice table row enriched with customer fields."""

    id: str
    customer_id: str
    name: str
    email: str
    image_url: str
    date: str
    amount: int
    status: str


class InvoiceForm(BaseModel):
    """Invoice values used to pre-fill the edit form."""

    id: str
    customer_id: str
    amount: int
    status: str


class CustomerField(BaseModel):
    """Customer option for the invoice form select."""

    id: str
    name: str


class CustomersTableRow(BaseModel):
    """Customer table row with invoice totals."""

    id: str
    name: str
    email: str
    image_url: str
    total_invoices: int
    total_pending: str
    total_paid: str


class EditInvoicePage(BaseModel):
    """Data needed to render the edit invoice page."""

    invoice: InvoiceForm
    customers: list[CustomerField]


class PageLink(BaseModel):
    """One entry of the pagination bar. Ellipsis entries have no href."""

    label: str
    page: Optional[int] = None
    href: Optional[str] = None
    active: bool = False
