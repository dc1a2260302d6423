"""Database-backed dashboard store implementation."""

import logging
from contextlib import contextmanager
from typing import Generator, Iterable, Optional

from sqlalchemy import String, cast, func, or_
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from dashboard.errors import StoreError
from dashboard.models import Customer, InvoiceRecord, Revenue, User
from database.models import CustomerModel, InvoiceModel, RevenueModel, UserModel
from database.session import create_session_factory, session_scope

logger = logging.getLogger(__name__)


def _like_pattern(query: str) -> str:
    escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _to_invoice(row: InvoiceModel) -> InvoiceRecord:
    return InvoiceRecord(
        id=row.id,
        customer_id=row.customer_id,
        amount=row.amount,
        status=row.status,
        date=row.date,
    )


def _to_customer(row: CustomerModel) -> Customer:
    return Customer(
        id=row.id,
        name=row.name,
        email=row.email,
        image_url=row.image_url or "",
    )


class DatabaseDashboardStore:
    """
    Production dashboard store using SQLAlchemy.

    Implements the DashboardStore protocol. Every method runs in its own
    session; driver failures surface as ``StoreError``.
    """

    def __init__(self, engine: Engine):
        """
        Initialize the database store.

        Args:
            engine: Engine whose tables already exist (see ``init_db``).
        """
        self.engine = engine
        self._factory = create_session_factory(engine)

    @contextmanager
    def _session(self) -> Generator[Session, None, None]:
        try:
            with session_scope(self._factory) as session:
                yield session
        except SQLAlchemyError as e:
            raise StoreError(f"{type(e).__name__}: {e}") from e

    def _search(self, session: Session, query: Optional[str]) -> Query:
        invoices = session.query(InvoiceModel)
        if not query:
            return invoices

        pattern = _like_pattern(query)
        return invoices.outerjoin(
            CustomerModel, InvoiceModel.customer_id == CustomerModel.id
        ).filter(
            or_(
                InvoiceModel.status.ilike(pattern, escape="\\"),
                InvoiceModel.date.ilike(pattern, escape="\\"),
                cast(InvoiceModel.amount, String).ilike(pattern, escape="\\"),
                CustomerModel.name.ilike(pattern, escape="\\"),
                CustomerModel.email.ilike(pattern, escape="\\"),
            )
        )

    # Reads

    def list_revenue(self) -> list[Revenue]:
        with self._session() as session:
            return [
                Revenue(month=row.month, revenue=float(row.revenue))
                for row in session.query(RevenueModel).all()
            ]

    def latest_invoices(self, limit: int) -> list[InvoiceRecord]:
        with self._session() as session:
            rows = (
                session.query(InvoiceModel)
                .order_by(InvoiceModel.date.desc())
                .limit(limit)
                .all()
            )
            return [_to_invoice(row) for row in rows]

    def count_invoices(self, query: Optional[str] = None) -> int:
        with self._session() as session:
            return self._search(session, query).count()

    def count_customers(self) -> int:
        with self._session() as session:
            return session.query(func.count(CustomerModel.id)).scalar() or 0

    def invoice_amounts(
        self, customer_ids: Optional[Iterable[str]] = None
    ) -> list[InvoiceRecord]:
        with self._session() as session:
            rows = session.query(InvoiceModel)
            if customer_ids is not None:
                rows = rows.filter(InvoiceModel.customer_id.in_(list(customer_ids)))
            return [_to_invoice(row) for row in rows.all()]

    def search_invoices(self, query: str, offset: int, limit: int) -> list[InvoiceRecord]:
        with self._session() as session:
            rows = (
                self._search(session, query)
                .order_by(InvoiceModel.date.desc())
                .offset(offset)
                .limit(limit)
                .all()
            )
            return [_to_invoice(row) for row in rows]

    def get_invoice(self, invoice_id: str) -> Optional[InvoiceRecord]:
        with self._session() as session:
            row = session.get(InvoiceModel, invoice_id)
            return _to_invoice(row) if row else None

    def get_customers(self, customer_ids: Iterable[str]) -> dict[str, Customer]:
        ids = list(set(customer_ids))
        if not ids:
            return {}
        with self._session() as session:
            rows = session.query(CustomerModel).filter(CustomerModel.id.in_(ids)).all()
            return {row.id: _to_customer(row) for row in rows}

    def list_customers(self, query: Optional[str] = None) -> list[Customer]:
        with self._session() as session:
            rows = session.query(CustomerModel)
            if query:
                pattern = _like_pattern(query)
                rows = rows.filter(
                    or_(
                        CustomerModel.name.ilike(pattern, escape="\\"),
                        CustomerModel.email.ilike(pattern, escape="\\"),
                    )
                )
            return [_to_customer(row) for row in rows.order_by(CustomerModel.name.asc()).all()]

    def get_user_by_email(self, email: str) -> Optional[User]:
        with self._session() as session:
            row = session.query(UserModel).filter(UserModel.email == email).first()
            if not row:
                return None
            return User(id=row.id, name=row.name, email=row.email, password=row.password)

    # Writes

    def insert_invoice(
        self, customer_id: str, amount: int, status: str, date: str
    ) -> InvoiceRecord:
        with self._session() as session:
            row = InvoiceModel(
                customer_id=customer_id,
                amount=amount,
                status=status,
                date=date,
            )
            session.add(row)
            session.flush()
            logger.debug(f"Inserted invoice {row.id}")
            return _to_invoice(row)

    def update_invoice(
        self, invoice_id: str, customer_id: str, amount: int, status: str
    ) -> int:
        with self._session() as session:
            return (
                session.query(InvoiceModel)
                .filter(InvoiceModel.id == invoice_id)
                .update(
                    {
                        InvoiceModel.customer_id: customer_id,
                        InvoiceModel.amount: amount,
                        InvoiceModel.status: status,
                    },
                    synchronize_session=False,
                )
            )

    def delete_invoice(self, invoice_id: str) -> int:
        with self._session() as session:
            return (
                session.query(InvoiceModel)
                .filter(InvoiceModel.id == invoice_id)
                .delete(synchronize_session=False)
            )
