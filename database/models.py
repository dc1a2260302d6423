"""
SQLAlchemy models for the invoice dashboard.

Tables:
- customers: Customer directory
- invoices: Invoices, amounts in cents
- revenue: Monthly revenue (reference data)
- users: Dashboard users with bcrypt password hashes
"""

from uuid import uuid4

from sqlalchemy import (
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
)
from sqlalchemy.orm import DeclarativeBase, relationship


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class CustomerModel(Base):
    """Customer table."""

    __tablename__ = "customers"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    name = Column(String(255), nullable=False, index=True)
    email = Column(String(255), nullable=False)
    image_url = Column(String(255), nullable=False, default="")

    # Relationships
    invoices = relationship("InvoiceModel", back_populates="customer")

    def __repr__(self) -> str:
        return f"<Customer {self.name}>"


class InvoiceModel(Base):
    """Invoice table."""

    __tablename__ = "invoices"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    customer_id = Column(String(36), ForeignKey("customers.id"), nullable=False)

    amount = Column(Integer, nullable=False)  # cents
    status = Column(String(20), nullable=False)
    date = Column(String(10), nullable=False)  # ISO date

    # Relationships
    customer = relationship("CustomerModel", back_populates="invoices")

    __table_args__ = (
        CheckConstraint("status IN ('pending', 'paid')", name="ck_invoices_status"),
        Index("ix_invoices_date", "date"),
        Index("ix_invoices_customer_status", "customer_id", "status"),
    )

    def __repr__(self) -> str:
        return f"<Invoice {self.id} status={self.status}>"


class RevenueModel(Base):
    """Monthly revenue table."""

    __tablename__ = "revenue"

    month = Column(String(20), primary_key=True)
    revenue = Column(Numeric(12, 2), nullable=False)

    def __repr__(self) -> str:
        return f"<Revenue {self.month}={self.revenue}>"


class UserModel(Base):
    """Dashboard users."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<User {self.email}>"
