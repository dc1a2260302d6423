"""Database module for persistent storage."""

from database.models import (
    Base,
    CustomerModel,
    InvoiceModel,
    RevenueModel,
    UserModel,
)
from database.seed import seed_if_empty
from database.session import create_db_engine, drop_db, init_db, session_scope
from database.store import DatabaseDashboardStore

__all__ = [
    "Base",
    "CustomerModel",
    "InvoiceModel",
    "RevenueModel",
    "UserModel",
    "DatabaseDashboardStore",
    "create_db_engine",
    "drop_db",
    "init_db",
    "seed_if_empty",
    "session_scope",
]
