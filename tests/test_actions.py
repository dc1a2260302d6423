"""Tests for the invoice mutation actions and sign-in action."""

from datetime import date
from unittest.mock import MagicMock

import pytest

from auth.provider import SESSION_USER_KEY, CredentialsProvider
from dashboard import actions
from dashboard.actions import INVOICES_PATH, InvoiceFormState, Redirect
from dashboard.errors import AuthError, MutationError
from dashboard.revalidation import PathRevalidator
from dashboard.store import InMemoryDashboardStore
from tests.conftest import USER_EMAIL, USER_PASSWORD


@pytest.fixture
def revalidator() -> PathRevalidator:
    return PathRevalidator()


def _today() -> date:
    return date(2026, 10, 17)


class TestCreateInvoice:
    """Tests for create_invoice."""

    def test_creates_and_redirects(self, store: InMemoryDashboardStore, revalidator: PathRevalidator) -> None:
        result = actions.create_invoice(
            store,
            revalidator,
            {"customerId": "c1", "amount": "49.99", "status": "pending"},
            today=_today,
        )

        assert result == Redirect("/dashboard/invoices")
        assert revalidator.version(INVOICES_PATH) == 1

        created = store.list_invoices()[0]
        assert created.customer_id == "c1"
        assert created.amount == 4999
        assert created.status == "pending"
        assert created.date == "2026-10-17"

    def test_date_defaults_to_today(self, store: InMemoryDashboardStore, revalidator: PathRevalidator) -> None:
        actions.create_invoice(
            store, revalidator, {"customerId": "c2", "amount": "1", "status": "paid"}
        )

        newest = store.list_invoices()[0]
        assert newest.date == date.today().isoformat()

    @pytest.mark.parametrize("amount", ["0", "-1", "ten", "0.001", "1e30"])
    def test_invalid_amount_does_not_touch_store(
        self, store: InMemoryDashboardStore, revalidator: PathRevalidator, amount: str
    ) -> None:
        result = actions.create_invoice(
            store, revalidator, {"customerId": "c1", "amount": amount, "status": "paid"}
        )

        assert isinstance(result, InvoiceFormState)
        assert result.message == "Failed to Create Invoice."
        assert "amount" in result.errors
        assert store.mutation_calls == []
        assert revalidator.version(INVOICES_PATH) == 0

    def test_invalid_status(self, store: InMemoryDashboardStore, revalidator: PathRevalidator) -> None:
        result = actions.create_invoice(
            store, revalidator, {"customerId": "c1", "amount": "10", "status": "overdue"}
        )

        assert result.errors == {"status": ["Please select an invoice status."]}
        assert store.mutation_calls == []

    def test_store_failure(self, store: InMemoryDashboardStore, revalidator: PathRevalidator) -> None:
        store.fail_on.add("insert_invoice")

        with pytest.raises(MutationError, match="Failed to create invoice."):
            actions.create_invoice(
                store, revalidator, {"customerId": "c1", "amount": "10", "status": "paid"}
            )

        assert revalidator.version(INVOICES_PATH) == 0

    def test_unknown_customer(self, store: InMemoryDashboardStore, revalidator: PathRevalidator) -> None:
        with pytest.raises(MutationError, match="Failed to create invoice."):
            actions.create_invoice(
                store, revalidator, {"customerId": "ghost", "amount": "10", "status": "paid"}
            )

        assert len(store.list_invoices()) == 7
        assert revalidator.version(INVOICES_PATH) == 0


class TestUpdateInvoice:
    """Tests for update_invoice."""

    def test_updates_fields_and_keeps_date(
        self, store: InMemoryDashboardStore, revalidator: PathRevalidator
    ) -> None:
        result = actions.update_invoice(
            store, revalidator, "i1", {"customerId": "c2", "amount": "19.99", "status": "paid"}
        )

        assert result == Redirect(INVOICES_PATH)
        assert revalidator.version(INVOICES_PATH) == 1

        updated = store.get_invoice("i1")
        assert updated.customer_id == "c2"
        assert updated.amount == 1999
        assert updated.status == "paid"
        assert updated.date == "2023-12-06"

    def test_zero_amount_rejected_without_store_call(
        self, store: InMemoryDashboardStore, revalidator: PathRevalidator
    ) -> None:
        result = actions.update_invoice(
            store, revalidator, "i1", {"customerId": "c2", "amount": "0", "status": "paid"}
        )

        assert isinstance(result, InvoiceFormState)
        assert result.errors["amount"] == ["Please enter an amount greater than $0."]
        assert result.message == "Failed to Update Invoice."
        assert store.calls == []

    def test_unknown_id_still_redirects(
        self, store: InMemoryDashboardStore, revalidator: PathRevalidator
    ) -> None:
        result = actions.update_invoice(
            store, revalidator, "nope", {"customerId": "c2", "amount": "3", "status": "paid"}
        )

        assert result == Redirect(INVOICES_PATH)
        assert store.get_invoice("nope") is None

    def test_store_failure(self, store: InMemoryDashboardStore, revalidator: PathRevalidator) -> None:
        store.fail_on.add("update_invoice")

        with pytest.raises(MutationError, match="Failed to update invoice."):
            actions.update_invoice(
                store, revalidator, "i1", {"customerId": "c2", "amount": "3", "status": "paid"}
            )

    def test_unknown_customer(self, store: InMemoryDashboardStore, revalidator: PathRevalidator) -> None:
        with pytest.raises(MutationError, match="Failed to update invoice."):
            actions.update_invoice(
                store, revalidator, "i1", {"customerId": "ghost", "amount": "3", "status": "paid"}
            )

        assert store.get_invoice("i1").customer_id == "c1"


class TestDeleteInvoice:
    """Tests for delete_invoice."""

    def test_removes_only_that_invoice(
        self, store: InMemoryDashboardStore, revalidator: PathRevalidator
    ) -> None:
        before = {inv.id for inv in store.list_invoices()}

        actions.delete_invoice(store, revalidator, "i3")

        after = {inv.id for inv in store.list_invoices()}
        assert before - after == {"i3"}
        assert revalidator.version(INVOICES_PATH) == 1

    def test_unknown_id_still_revalidates(
        self, store: InMemoryDashboardStore, revalidator: PathRevalidator
    ) -> None:
        actions.delete_invoice(store, revalidator, "nope")

        assert len(store.list_invoices()) == 7
        assert revalidator.version(INVOICES_PATH) == 1

    def test_store_failure(self, store: InMemoryDashboardStore, revalidator: PathRevalidator) -> None:
        store.fail_on.add("delete_invoice")

        with pytest.raises(MutationError, match="Failed to delete invoice."):
            actions.delete_invoice(store, revalidator, "i3")

        assert revalidator.version(INVOICES_PATH) == 0


class TestAuthenticate:
    """Tests for the authenticate action."""

    def test_success(self, store: InMemoryDashboardStore) -> None:
        session: dict = {}

        message = actions.authenticate(
            CredentialsProvider(store),
            {"email": USER_EMAIL, "password": USER_PASSWORD},
            session,
        )

        assert message is None
        assert session[SESSION_USER_KEY]["email"] == USER_EMAIL

    def test_wrong_password(self, store: InMemoryDashboardStore) -> None:
        session: dict = {}

        message = actions.authenticate(
            CredentialsProvider(store),
            {"email": USER_EMAIL, "password": "wrong-password"},
            session,
        )

        assert message == "Invalid credentials."
        assert session == {}

    def test_store_down_is_something_went_wrong(self, store: InMemoryDashboardStore) -> None:
        store.fail_on.add("get_user_by_email")

        message = actions.authenticate(
            CredentialsProvider(store),
            {"email": USER_EMAIL, "password": USER_PASSWORD},
            {},
        )

        assert message == "Something went wrong."

    def test_other_errors_propagate(self) -> None:
        provider = MagicMock()
        provider.sign_in.side_effect = RuntimeError("boom")

        with pytest.raises(RuntimeError):
            actions.authenticate(provider, {}, {})

    def test_other_auth_error_kind(self) -> None:
        provider = MagicMock()
        provider.sign_in.side_effect = AuthError("AccessDenied")

        assert actions.authenticate(provider, {}, {}) == "Something went wrong."
