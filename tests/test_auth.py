"""Tests for passwords, the credentials provider and the route gate."""

import pytest

from auth.gate import GateDecision, authorize_request
from auth.passwords import hash_password, verify_password
from auth.provider import SESSION_USER_KEY, CredentialsProvider, current_user
from dashboard.errors import AuthError, DataFetchError
from dashboard.store import InMemoryDashboardStore
from tests.conftest import USER_EMAIL, USER_PASSWORD


class TestPasswords:
    """Tests for bcrypt hashing."""

    def test_hash_is_salted(self) -> None:
        first = hash_password("secret1", rounds=4)
        second = hash_password("secret1", rounds=4)

        assert first != second
        assert verify_password("secret1", first)
        assert verify_password("secret1", second)

    def test_mismatch(self, password_hash: str) -> None:
        assert verify_password(USER_PASSWORD, password_hash) is True
        assert verify_password(USER_PASSWORD + "x", password_hash) is False

    def test_not_a_hash(self) -> None:
        assert verify_password("anything", "plaintext") is False


class TestCredentialsProvider:
    """Tests for CredentialsProvider."""

    def test_get_user(self, store: InMemoryDashboardStore) -> None:
        provider = CredentialsProvider(store)

        assert provider.get_user(USER_EMAIL).id == "u1"

    def test_get_unknown_user_is_none(self, store: InMemoryDashboardStore) -> None:
        assert CredentialsProvider(store).get_user("nobody@nextmail.com") is None

    def test_get_user_store_failure(self, store: InMemoryDashboardStore) -> None:
        store.fail_on.add("get_user_by_email")

        with pytest.raises(DataFetchError, match="Failed to fetch user."):
            CredentialsProvider(store).get_user(USER_EMAIL)

    def test_authorize_success(self, store: InMemoryDashboardStore) -> None:
        user = CredentialsProvider(store).authorize(
            {"email": USER_EMAIL, "password": USER_PASSWORD}
        )

        assert user is not None
        assert user.email == USER_EMAIL

    @pytest.mark.parametrize(
        "credentials",
        [
            {"email": USER_EMAIL, "password": "654321"},
            {"email": "nobody@nextmail.com", "password": USER_PASSWORD},
            {"email": "not-an-email", "password": USER_PASSWORD},
            {"email": USER_EMAIL, "password": "12345"},
            {},
        ],
    )
    def test_authorize_rejects(self, store: InMemoryDashboardStore, credentials: dict) -> None:
        assert CredentialsProvider(store).authorize(credentials) is None

    def test_short_password_skips_lookup(self, store: InMemoryDashboardStore) -> None:
        CredentialsProvider(store).authorize({"email": USER_EMAIL, "password": "123"})

        assert "get_user_by_email" not in store.calls

    def test_sign_in_and_out(self, store: InMemoryDashboardStore) -> None:
        provider = CredentialsProvider(store)
        session: dict = {}

        provider.sign_in({"email": USER_EMAIL, "password": USER_PASSWORD}, session)
        assert current_user(session) == {"id": "u1", "name": "User", "email": USER_EMAIL}
        assert "password" not in session[SESSION_USER_KEY]

        provider.sign_out(session)
        assert current_user(session) is None

    def test_sign_in_bad_credentials(self, store: InMemoryDashboardStore) -> None:
        with pytest.raises(AuthError) as exc_info:
            CredentialsProvider(store).sign_in({"email": USER_EMAIL, "password": "nope-nope"}, {})

        assert exc_info.value.kind == AuthError.CREDENTIALS_SIGNIN


class TestGate:
    """Tests for authorize_request."""

    @pytest.mark.parametrize("path", ["/dashboard", "/dashboard/invoices", "/dashboard/invoices/i1/edit"])
    def test_dashboard_requires_session(self, path: str) -> None:
        assert authorize_request(False, path) == GateDecision(allowed=False, redirect_to="/login")
        assert authorize_request(True, path) == GateDecision(allowed=True)

    def test_signed_in_users_sent_to_dashboard(self) -> None:
        assert authorize_request(True, "/login") == GateDecision(allowed=False, redirect_to="/dashboard")
        assert authorize_request(True, "/") == GateDecision(allowed=False, redirect_to="/dashboard")

    def test_anonymous_entry_points_allowed(self) -> None:
        assert authorize_request(False, "/login").allowed is True
        assert authorize_request(False, "/").allowed is True

    def test_similar_prefix_is_not_dashboard(self) -> None:
        assert authorize_request(False, "/dashboards").allowed is True

    def test_health_is_public(self) -> None:
        assert authorize_request(False, "/health").allowed is True
        assert authorize_request(True, "/health").allowed is True
