"""Store contract for dashboard data and an in-memory implementation."""

import logging
from typing import Iterable, Optional, Protocol
from uuid import uuid4

from dashboard.errors import StoreError
from dashboard.models import Customer, InvoiceRecord, Revenue, User

logger = logging.getLogger(__name__)


class DashboardStore(Protocol):
    """Protocol for dashboard storage.

    Implementations raise ``StoreError`` when the backing store fails.
    """

    def list_revenue(self) -> list[Revenue]:
        """List all revenue rows."""
        ...

    def latest_invoices(self, limit: int) -> list[InvoiceRecord]:
        """Most recent invoices, newest first."""
        ...

    def count_invoices(self, query: Optional[str] = None) -> int:
        """Count invoices, optionally only those matching a search query."""
        ...

    def count_customers(self) -> int:
        """Count customers."""
        ...

    def invoice_amounts(
        self, customer_ids: Optional[Iterable[str]] = None
    ) -> list[InvoiceRecord]:
        """Invoice rows used for totals, optionally limited to some customers."""
        ...

    def search_invoices(self, query: str, offset: int, limit: int) -> list[InvoiceRecord]:
        """One page of invoices matching a query, newest first."""
        ...

    def get_invoice(self, invoice_id: str) -> Optional[InvoiceRecord]:
        """Get an invoice by id."""
        ...

    def get_customers(self, customer_ids: Iterable[str]) -> dict[str, Customer]:
        """Get customers keyed by id. Unknown ids are absent from the result."""
        ...

    def list_customers(self, query: Optional[str] = None) -> list[Customer]:
        """Customers ordered by name, optionally filtered on name or email."""
        ...

    def insert_invoice(
        self, customer_id: str, amount: int, status: str, date: str
    ) -> InvoiceRecord:
        """Insert an invoice and return the stored row."""
        ...

    def update_invoice(
        self, invoice_id: str, customer_id: str, amount: int, status: str
    ) -> int:
        """Update an invoice. Returns the number of rows touched."""
        ...

    def delete_invoice(self, invoice_id: str) -> int:
        """Delete an invoice. Returns the number of rows removed."""
        ...

    def get_user_by_email(self, email: str) -> Optional[User]:
        """Get a user by email."""
        ...


def _contains(value: object, query: str) -> bool:
    return query.lower() in str(value).lower()


def invoice_matches(invoice: InvoiceRecord, customer: Optional[Customer], query: str) -> bool:
    """Case-insensitive substring match used by invoice search.

    Looks at status, amount, date and, when known, the customer's
    name and email. An empty query matches everything.
    """
    if not query:
        return True

    fields: list[object] = [invoice.status, invoice.amount, invoice.date]
    if customer is not None:
        fields.extend([customer.name, customer.email])
    return any(_contains(value, query) for value in fields)


class InMemoryDashboardStore:
    """Simple in-memory dashboard store for development/testing.

    ``fail_on`` holds method names that should raise ``StoreError``,
    to simulate an unavailable database. ``calls`` records every
    method invoked, in order.
    """

    def __init__(
        self,
        customers: Optional[Iterable[Customer]] = None,
        invoices: Optional[Iterable[InvoiceRecord]] = None,
        revenue: Optional[Iterable[Revenue]] = None,
        users: Optional[Iterable[User]] = None,
    ) -> None:
        self._customers: dict[str, Customer] = {c.id: c for c in customers or []}
        self._invoices: dict[str, InvoiceRecord] = {i.id: i for i in invoices or []}
        self._revenue: list[Revenue] = list(revenue or [])
        self._users: dict[str, User] = {u.email: u for u in users or []}
        self.fail_on: set[str] = set()
        self.calls: list[str] = []

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if name in self.fail_on:
            raise StoreError(f"Simulated store failure in {name}")

    def _check_customer(self, customer_id: str) -> None:
        # Same failure the database foreign key produces
        if customer_id not in self._customers:
            raise StoreError(f"Unknown customer_id: {customer_id}")

    def _by_date_desc(self, invoices: Iterable[InvoiceRecord]) -> list[InvoiceRecord]:
        return sorted(invoices, key=lambda inv: inv.date, reverse=True)

    def _matching(self, query: Optional[str]) -> list[InvoiceRecord]:
        return [
            inv
            for inv in self._invoices.values()
            if invoice_matches(inv, self._customers.get(inv.customer_id), query or "")
        ]

    @property
    def mutation_calls(self) -> list[str]:
        """Recorded calls that write to the store."""
        writes = {"insert_invoice", "update_invoice", "delete_invoice"}
        return [name for name in self.calls if name in writes]

    def list_revenue(self) -> list[Revenue]:
        self._record("list_revenue")
        return list(self._revenue)

    def latest_invoices(self, limit: int) -> list[InvoiceRecord]:
        self._record("latest_invoices")
        return self._by_date_desc(self._invoices.values())[:limit]

    def count_invoices(self, query: Optional[str] = None) -> int:
        self._record("count_invoices")
        return len(self._matching(query))

    def count_customers(self) -> int:
        self._record("count_customers")
        return len(self._customers)

    def invoice_amounts(
        self, customer_ids: Optional[Iterable[str]] = None
    ) -> list[InvoiceRecord]:
        self._record("invoice_amounts")
        if customer_ids is None:
            return list(self._invoices.values())
        wanted = set(customer_ids)
        return [inv for inv in self._invoices.values() if inv.customer_id in wanted]

    def search_invoices(self, query: str, offset: int, limit: int) -> list[InvoiceRecord]:
        self._record("search_invoices")
        rows = self._by_date_desc(self._matching(query))
        return rows[offset:offset + limit]

    def get_invoice(self, invoice_id: str) -> Optional[InvoiceRecord]:
        self._record("get_invoice")
        return self._invoices.get(invoice_id)

    def get_customers(self, customer_ids: Iterable[str]) -> dict[str, Customer]:
        self._record("get_customers")
        return {
            cid: self._customers[cid]
            for cid in set(customer_ids)
            if cid in self._customers
        }

    def list_customers(self, query: Optional[str] = None) -> list[Customer]:
        self._record("list_customers")
        customers = self._customers.values()
        if query:
            customers = [
                c for c in customers
                if _contains(c.name, query) or _contains(c.email, query)
            ]
        return sorted(customers, key=lambda c: c.name)

    def insert_invoice(
        self, customer_id: str, amount: int, status: str, date: str
    ) -> InvoiceRecord:
        self._record("insert_invoice")
        self._check_customer(customer_id)
        invoice = InvoiceRecord(
            id=str(uuid4()),
            customer_id=customer_id,
            amount=amount,
            status=status,
            date=date,
        )
        self._invoices[invoice.id] = invoice
        return invoice

    def update_invoice(
        self, invoice_id: str, customer_id: str, amount: int, status: str
    ) -> int:
        self._record("update_invoice")
        existing = self._invoices.get(invoice_id)
        if existing is None:
            return 0
        self._check_customer(customer_id)
        self._invoices[invoice_id] = existing.model_copy(
            update={"customer_id": customer_id, "amount": amount, "status": status}
        )
        return 1

    def delete_invoice(self, invoice_id: str) -> int:
        self._record("delete_invoice")
        return 1 if self._invoices.pop(invoice_id, None) is not None else 0

    def get_user_by_email(self, email: str) -> Optional[User]:
        self._record("get_user_by_email")
        return self._users.get(email)

    # Helpers for tests and seeding

    def add_customer(self, customer: Customer) -> None:
        """Add or replace a customer."""
        self._customers[customer.id] = customer

    def remove_customer(self, customer_id: str) -> None:
        """Remove a customer, leaving its invoices orphaned."""
        self._customers.pop(customer_id, None)

    def add_invoice(self, invoice: InvoiceRecord) -> None:
        """Add or replace an invoice."""
        self._invoices[invoice.id] = invoice

    def add_user(self, user: User) -> None:
        """Add or replace a user."""
        self._users[user.email] = user

    def list_invoices(self) -> list[InvoiceRecord]:
        """All stored invoices, newest first."""
        return self._by_date_desc(self._invoices.values())
