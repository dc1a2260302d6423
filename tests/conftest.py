"""
Pytest configuration and fixtures.

Environment variables are loaded before test collection so settings pick
up any local .env overrides.
"""

import pytest
from dotenv import load_dotenv

from auth.passwords import hash_password
from dashboard.models import Customer, InvoiceRecord, Revenue, User
from dashboard.store import InMemoryDashboardStore

load_dotenv()

USER_EMAIL = "user@nextmail.com"
USER_PASSWORD = "123456"

CUSTOMERS = [
    Customer(id="c1", name="Evil Rabbit", email="evil@rabbit.com", image_url="/customers/evil-rabbit.png"),
    Customer(id="c2", name="Delba de Oliveira", email="delba@oliveira.com", image_url="/customers/delba.png"),
    Customer(id="c3", name="Amy Burns", email="amy@burns.com", image_url="/customers/amy-burns.png"),
]

# paid total 49590, pending total 36809
INVOICES = [
    InvoiceRecord(id="i1", customer_id="c1", amount=15795, status="pending", date="2023-12-06"),
    InvoiceRecord(id="i2", customer_id="c2", amount=20348, status="pending", date="2023-11-14"),
    InvoiceRecord(id="i3", customer_id="c3", amount=3040, status="paid", date="2023-10-29"),
    InvoiceRecord(id="i4", customer_id="c1", amount=44800, status="paid", date="2023-09-10"),
    InvoiceRecord(id="i5", customer_id="c2", amount=500, status="paid", date="2023-08-19"),
    InvoiceRecord(id="i6", customer_id="c3", amount=666, status="pending", date="2023-07-27"),
    InvoiceRecord(id="i7", customer_id="c1", amount=1250, status="paid", date="2023-06-17"),
]

REVENUE = [
    Revenue(month="Mar", revenue=2200),
    Revenue(month="Jan", revenue=2000),
    Revenue(month="Feb", revenue=1800),
]


@pytest.fixture(scope="session")
def password_hash() -> str:
    """bcrypt hash of USER_PASSWORD (low cost to keep tests fast)."""
    return hash_password(USER_PASSWORD, rounds=4)


@pytest.fixture
def user(password_hash: str) -> User:
    return User(id="u1", name="User", email=USER_EMAIL, password=password_hash)


@pytest.fixture
def store(user: User) -> InMemoryDashboardStore:
    """A fresh populated in-memory store for each test."""
    return InMemoryDashboardStore(
        customers=CUSTOMERS,
        invoices=INVOICES,
        revenue=REVENUE,
        users=[user],
    )
