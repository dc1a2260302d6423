"""Placeholder data for a fresh database."""

import logging
from decimal import Decimal

from sqlalchemy.engine import Engine

from auth.passwords import hash_password
from database.models import CustomerModel, InvoiceModel, RevenueModel, UserModel
from database.session import create_session_factory, session_scope

logger = logging.getLogger(__name__)

DEMO_USER = {
    "id": "410544b2-4001-4271-9855-fec4b6a6442a",
    "name": "User",
    "email": "user@nextmail.com",
    "password": "123456",
}

CUSTOMERS = [
    {
        "id": "d6e15727-9fe1-4961-8c5b-ea44a9bd81aa",
        "name": "Evil Rabbit",
        "email": "evil@rabbit.com",
        "image_url": "/customers/evil-rabbit.png",
    },
    {
        "id": "3958dc9e-712f-4377-85e9-fec4b6a6442a",
        "name": "Delba de Oliveira",
        "email": "delba@oliveira.com",
        "image_url": "/customers/delba-de-oliveira.png",
    },
    {
        "id": "3958dc9e-742f-4377-85e9-fec4b6a6442a",
        "name": "Lee Robinson",
        "email": "lee@robinson.com",
        "image_url": "/customers/lee-robinson.png",
    },
    {
        "id": "76d65c26-f784-44a2-ac19-586678f7c2f2",
        "name": "Michael Novotny",
        "email": "michael@novotny.com",
        "image_url": "/customers/michael-novotny.png",
    },
    {
        "id": "cc27c14a-0acf-4f4a-a6c9-d45682c144b9",
        "name": "Amy Burns",
        "email": "amy@burns.com",
        "image_url": "/customers/amy-burns.png",
    },
    {
        "id": "13d07535-c59e-4157-a011-f8d2ef4e0cbb",
        "name": "Balazs Orban",
        "email": "balazs@orban.com",
        "image_url": "/customers/balazs-orban.png",
    },
]

INVOICES = [
    (CUSTOMERS[0]["id"], 15795, "pending", "2022-12-06"),
    (CUSTOMERS[1]["id"], 20348, "pending", "2022-11-14"),
    (CUSTOMERS[4]["id"], 3040, "paid", "2022-10-29"),
    (CUSTOMERS[3]["id"], 44800, "paid", "2023-09-10"),
    (CUSTOMERS[5]["id"], 34577, "pending", "2023-08-05"),
    (CUSTOMERS[2]["id"], 54246, "pending", "2023-07-16"),
    (CUSTOMERS[0]["id"], 666, "pending", "2023-06-27"),
    (CUSTOMERS[3]["id"], 32545, "paid", "2023-06-09"),
    (CUSTOMERS[4]["id"], 1250, "paid", "2023-06-17"),
    (CUSTOMERS[5]["id"], 8546, "paid", "2023-06-07"),
    (CUSTOMERS[1]["id"], 500, "paid", "2023-08-19"),
    (CUSTOMERS[5]["id"], 8945, "paid", "2023-06-03"),
    (CUSTOMERS[2]["id"], 1000, "paid", "2022-06-05"),
]

REVENUE = [
    ("Jan", 2000),
    ("Feb", 1800),
    ("Mar", 2200),
    ("Apr", 2500),
    ("May", 2300),
    ("Jun", 3200),
    ("Jul", 3500),
    ("Aug", 3700),
    ("Sep", 2500),
    ("Oct", 2800),
    ("Nov", 3000),
    ("Dec", 4800),
]


def seed_if_empty(engine: Engine) -> bool:
    """
    Load placeholder customers, invoices, revenue and a demo user.

    Does nothing when any customer already exists.

    Returns:
        True if data was written.
    """
    factory = create_session_factory(engine)

    with session_scope(factory) as session:
        if session.query(CustomerModel).first() is not None:
            logger.info("Database already seeded")
            return False

        session.add(
            UserModel(
                id=DEMO_USER["id"],
                name=DEMO_USER["name"],
                email=DEMO_USER["email"],
                password=hash_password(DEMO_USER["password"]),
            )
        )
        session.add_all(CustomerModel(**customer) for customer in CUSTOMERS)
        session.flush()

        session.add_all(
            InvoiceModel(customer_id=customer_id, amount=amount, status=status, date=date)
            for customer_id, amount, status, date in INVOICES
        )
        session.add_all(
            RevenueModel(month=month, revenue=Decimal(revenue))
            for month, revenue in REVENUE
        )

    logger.info(
        f"Seeded {len(CUSTOMERS)} customers, {len(INVOICES)} invoices, "
        f"{len(REVENUE)} revenue rows"
    )
    return True
