"""Pytest configuration and fixtures"""
import os
from datetime import datetime, timezone
from decimal import Decimal

import pytest

# every test runs against a throwaway in-memory database
os.environ["DATABASE_URL"] = "sqlite://"
# no redis under test; production defaults to the shared redis guard
os.environ["SWEEP_GUARD_BACKEND"] = "memory"
os.environ["ADMIN_API_TOKEN"] = ""
os.environ.setdefault("CELERY_BROKER_URL", "memory://")
os.environ.setdefault("CELERY_RESULT_BACKEND", "cache+memory://")

from app.data.database import Base, SessionLocal, engine, init_db  # noqa: E402
from app.data.models import CartItemModel, CartModel, SettingsModel, UserModel  # noqa: E402

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def db_session():
    init_db()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def make_user(db_session):
    def _make(name="علی", email="ali@example.com", mobile="09121234567"):
        user = UserModel(name=name, email=email, mobile=mobile)
        db_session.add(user)
        db_session.commit()
        return user

    return _make


@pytest.fixture
def make_cart(db_session):
    def _make(user=None, expires_at=None, items=None, **kwargs):
        if items is None:
            items = [
                CartItemModel(product_id=1, quantity=2, price=Decimal("150000.00")),
                CartItemModel(product_id=2, quantity=1, price=Decimal("90000.00")),
            ]
        total = sum((i.price * i.quantity for i in items), Decimal("0.00"))
        cart = CartModel(user=user, expires_at=expires_at, items=items, total_price=total, **kwargs)
        db_session.add(cart)
        db_session.commit()
        return cart

    return _make


@pytest.fixture
def make_settings(db_session):
    def _make(**kwargs):
        row = SettingsModel(**kwargs)
        db_session.add(row)
        db_session.commit()
        return row

    return _make
