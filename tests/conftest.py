import os

# Settings are read at import time, so they must be in place first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["JWT_ALGORITHM"] = "HS256"
os.environ["JWT_AUDIENCE"] = ""
os.environ["CURRENCY_SYMBOL"] = "₹"

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from expense_tracker import models
from expense_tracker.database import Base, SessionLocal, engine
from expense_tracker.main import app
from expense_tracker.services.categories import seed_system_categories
from expense_tracker.services.expenses import ExpenseStore


@pytest.fixture(autouse=True)
def fresh_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    with SessionLocal() as session:
        seed_system_categories(session)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


def make_token(user_id, role="User"):
    return jwt.encode({"sub": str(user_id), "role": role}, "test-secret", algorithm="HS256")


def auth_headers(user_id, role="User"):
    return {"Authorization": f"Bearer {make_token(user_id, role)}"}


def category_id(db, name="Food & Dining"):
    return db.query(models.Category).filter(models.Category.name == name).one().id


def add_expense(db, owner_id, category, amount, on=date(2024, 6, 10)):
    return ExpenseStore(db).create(
        owner_id=owner_id,
        category_id=category,
        amount=Decimal(amount),
        expense_date=on,
    )


class BrokenSession(Session):
    """A session whose every query fails the way an unreachable database does."""

    def query(self, *entities, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))
