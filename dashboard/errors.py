"""Error types for the invoice dashboard.

Validation failures are not errors here: they are returned as form state.
Everything below propagates to the request boundary, where only
``public_message`` is shown to the caller. The full message goes to the log.
"""

from typing import Any, Optional


class DashboardError(Exception):
    """Base class for dashboard failures."""

    code = "INTERNAL_ERROR"
    http_status = 500

    def __init__(self, message: str, public_message: Optional[str] = None):
        self.public_message = public_message or message
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for JSON serialization."""
        return {
            "error": self.code,
            "message": self.public_message,
        }


class StoreError(DashboardError):
    """Raised by a store when the backing database fails."""

    code = "STORE_ERROR"


class DataFetchError(DashboardError):
    """A read failed. The message is safe to show to users."""

    code = "DATA_FETCH_ERROR"


class CustomerNotFoundError(DataFetchError):
    """An invoice references a customer that does not exist."""

    code = "CUSTOMER_NOT_FOUND"

    def __init__(self, customer_id: str, public_message: Optional[str] = None):
        self.customer_id = customer_id
        super().__init__(
            f"Customer not found for customer_id: {customer_id}",
            public_message=public_message,
        )


class MutationError(DashboardError):
    """A create, update or delete failed in the store."""

    code = "MUTATION_ERROR"


class AuthError(DashboardError):
    """Authentication failed.

    ``kind`` names the failure, e.g. ``CredentialsSignin`` for a bad
    email/password pair.
    """

    code = "AUTH_ERROR"
    http_status = 401

    CREDENTIALS_SIGNIN = "CredentialsSignin"
    CALLBACK_ROUTE_ERROR = "CallbackRouteError"

    def __init__(self, kind: str, message: Optional[str] = None):
        self.kind = kind
        super().__init__(message or kind)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["kind"] = self.kind
        return result
