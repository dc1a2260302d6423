"""Invoice dashboard: data access, validation and mutation actions."""

from dashboard.errors import (
    AuthError,
    CustomerNotFoundError,
    DashboardError,
    DataFetchError,
    MutationError,
    StoreError,
)
from dashboard.models import InvoiceStatus
from dashboard.store import DashboardStore, InMemoryDashboardStore

__all__ = [
    "AuthError",
    "CustomerNotFoundError",
    "DashboardError",
    "DashboardStore",
    "DataFetchError",
    "InMemoryDashboardStore",
    "InvoiceStatus",
    "MutationError",
    "StoreError",
]
