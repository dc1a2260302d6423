"""
Read side of the dashboard.

Every function takes the store explicitly. Store calls are blocking, so
they run in worker threads; independent reads inside one request are
started together with ``asyncio.gather`` and fail together.

Store failures are logged with their detail and re-raised as
``DataFetchError`` carrying a message that is safe to show to users.
"""

import asyncio
import calendar
import logging
import math
from typing import Iterable, Optional

from dashboard.errors import CustomerNotFoundError, DataFetchError, StoreError
from dashboard.models import (
    CardData,
    Customer,
    CustomerField,
    CustomersTableRow,
    EditInvoicePage,
    InvoiceForm,
    InvoiceRecord,
    InvoicesTableRow,
    InvoiceStatus,
    LatestInvoice,
    Revenue,
)
from dashboard.store import DashboardStore
from dashboard.utils import format_currency

logger = logging.getLogger(__name__)

ITEMS_PER_PAGE = 6
LATEST_INVOICES_LIMIT = 5

_MONTH_ORDER = {name.lower(): i for i, name in enumerate(calendar.month_name) if name}
_MONTH_ORDER.update({abbr.lower(): i for i, abbr in enumerate(calendar.month_abbr) if abbr})


def _month_position(row: Revenue) -> int:
    # Unknown labels sort after December
    return _MONTH_ORDER.get(row.month.strip().lower(), 13)


async def _enrich(
    store: DashboardStore,
    invoices: list[InvoiceRecord],
    public_message: str,
) -> list[tuple[InvoiceRecord, Customer]]:
    """
    Pair each invoice with its customer.

    Customers are fetched in one round trip for the distinct ids in the
    batch. A single missing customer fails the whole batch.
    """
    if not invoices:
        return []

    customer_ids = {invoice.customer_id for invoice in invoices}
    customers = await asyncio.to_thread(store.get_customers, customer_ids)

    pairs = []
    for invoice in invoices:
        customer = customers.get(invoice.customer_id)
        if customer is None:
            raise CustomerNotFoundError(invoice.customer_id, public_message=public_message)
        pairs.append((invoice, customer))
    return pairs


def _store_failure(error: StoreError, public_message: str) -> DataFetchError:
    logger.error(f"Database Error: {error}")
    return DataFetchError(public_message)


async def fetch_revenue(store: DashboardStore) -> list[Revenue]:
    """Monthly revenue in calendar order."""
    try:
        rows = await asyncio.to_thread(store.list_revenue)
    except StoreError as e:
        raise _store_failure(e, "Failed to fetch revenue data.") from e

    return sorted(rows, key=_month_position)


async def fetch_latest_invoices(store: DashboardStore) -> list[LatestInvoice]:
    """
    The five most recent invoices with customer details.

    Raises:
        CustomerNotFoundError: An invoice points at a missing customer.
        DataFetchError: The store failed.
    """
    message = "Failed to fetch the latest invoices."
    try:
        invoices = await asyncio.to_thread(store.latest_invoices, LATEST_INVOICES_LIMIT)
        pairs = await _enrich(store, invoices, message)
    except CustomerNotFoundError as e:
        logger.error(f"Data integrity error: {e}")
        raise
    except StoreError as e:
        raise _store_failure(e, message) from e

    return [
        LatestInvoice(
            id=invoice.id,
            name=customer.name,
            image_url=customer.image_url,
            email=customer.email,
            amount=format_currency(invoice.amount),
        )
        for invoice, customer in pairs
    ]


def summarize_amounts(rows: Iterable[InvoiceRecord]) -> dict[str, int]:
    """Sum amounts per status. Statuses other than paid/pending are ignored."""
    totals = {InvoiceStatus.PAID.value: 0, InvoiceStatus.PENDING.value: 0}
    for row in rows:
        if row.status in totals:
            totals[row.status] += row.amount
    return totals


async def fetch_card_data(store: DashboardStore) -> CardData:
    """Invoice and customer counts plus collected/pending totals."""
    try:
        invoice_count, customer_count, rows = await asyncio.gather(
            asyncio.to_thread(store.count_invoices),
            asyncio.to_thread(store.count_customers),
            asyncio.to_thread(store.invoice_amounts),
        )
    except StoreError as e:
        raise _store_failure(e, "Failed to fetch card data.") from e

    totals = summarize_amounts(rows)

    return CardData(
        number_of_invoices=invoice_count or 0,
        number_of_customers=customer_count or 0,
        total_paid_invoices=format_currency(totals[InvoiceStatus.PAID.value]),
        total_pending_invoices=format_currency(totals[InvoiceStatus.PENDING.value]),
    )


async def fetch_filtered_invoices(
    store: DashboardStore,
    query: str = "",
    current_page: int = 1,
) -> list[InvoicesTableRow]:
    """
    One page of invoices matching ``query``, newest first.

    Raises:
        CustomerNotFoundError: An invoice on the page points at a missing customer.
        DataFetchError: The store failed.
    """
    offset = (max(current_page, 1) - 1) * ITEMS_PER_PAGE
    message = "Failed to fetch filtered invoices."

    try:
        invoices = await asyncio.to_thread(
            store.search_invoices, query or "", offset, ITEMS_PER_PAGE
        )
        pairs = await _enrich(store, invoices, message)
    except CustomerNotFoundError as e:
        logger.error(f"Data integrity error: {e}")
        raise
    except StoreError as e:
        raise _store_failure(e, message) from e

    return [
        InvoicesTableRow(
            id=invoice.id,
            customer_id=invoice.customer_id,
            name=customer.name,
            email=customer.email,
            image_url=customer.image_url,
            date=invoice.date,
            amount=invoice.amount,
            status=invoice.status,
        )
        for invoice, customer in pairs
    ]


async def fetch_invoices_pages(store: DashboardStore, query: str = "") -> int:
    """Number of pages of invoices matching ``query``."""
    try:
        count = await asyncio.to_thread(store.count_invoices, query or "")
    except StoreError as e:
        raise _store_failure(e, "Failed to fetch total number of invoices.") from e

    return math.ceil((count or 0) / ITEMS_PER_PAGE)


async def fetch_invoice_by_id(store: DashboardStore, invoice_id: str) -> Optional[InvoiceForm]:
    """Invoice form values, or None when no such invoice exists."""
    try:
        invoice = await asyncio.to_thread(store.get_invoice, invoice_id)
    except StoreError as e:
        raise _store_failure(e, "Failed to fetch invoice.") from e

    if invoice is None:
        return None

    return InvoiceForm(
        id=invoice.id,
        customer_id=invoice.customer_id,
        amount=invoice.amount,
        status=invoice.status,
    )


async def fetch_customers(store: DashboardStore) -> list[CustomerField]:
    """All customers ordered by name."""
    try:
        customers = await asyncio.to_thread(store.list_customers)
    except StoreError as e:
        raise _store_failure(e, "Failed to fetch all customers.") from e

    return [CustomerField(id=c.id, name=c.name) for c in customers]


async def fetch_filtered_customers(store: DashboardStore, query: str = "") -> list[CustomersTableRow]:
    """Customers whose name or email matches ``query``, with invoice totals."""
    try:
        customers = await asyncio.to_thread(store.list_customers, query or None)
        rows: list[InvoiceRecord] = []
        if customers:
            rows = await asyncio.to_thread(
                store.invoice_amounts, [c.id for c in customers]
            )
    except StoreError as e:
        raise _store_failure(e, "Failed to fetch customer table.") from e

    by_customer: dict[str, list[InvoiceRecord]] = {c.id: [] for c in customers}
    for row in rows:
        by_customer.setdefault(row.customer_id, []).append(row)

    table = []
    for customer in customers:
        invoices = by_customer[customer.id]
        totals = summarize_amounts(invoices)
        table.append(
            CustomersTableRow(
                id=customer.id,
                name=customer.name,
                email=customer.email,
                image_url=customer.image_url,
                total_invoices=len(invoices),
                total_pending=format_currency(totals[InvoiceStatus.PENDING.value]),
                total_paid=format_currency(totals[InvoiceStatus.PAID.value]),
            )
        )
    return table


async def fetch_edit_invoice_page(store: DashboardStore, invoice_id: str) -> Optional[EditInvoicePage]:
    """Invoice and customer options for the edit page, fetched together."""
    invoice, customers = await asyncio.gather(
        fetch_invoice_by_id(store, invoice_id),
        fetch_customers(store),
    )
    if invoice is None:
        return None
    return EditInvoicePage(invoice=invoice, customers=customers)
