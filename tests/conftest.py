import json
import os

os.environ["ENV"] = "testing"
os.environ.setdefault("LOG_DIR", "logs")

import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from typing import Generator

from main import app
from core.config import settings
from core.database import Base
from models.orders import Order
from models.products import Product
from services.data_client import DataClient
from services.order_repository import OrderRepository
from utils.deps import get_db

SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False}
)

TestingSessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)


@pytest.fixture
def session() -> Generator[Session, None, None]:
    """
    Creates a fresh, empty database for each test.
    """
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

    Base.metadata.drop_all(bind=engine)


@pytest.fixture
async def client(session: Session):
    """
    HTTP client bound to the app, with get_db pointed at the test session.
    """
    def override_get_db():
        try:
            yield session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def data_client(session) -> DataClient:
    return DataClient(session)


@pytest.fixture
def repository(data_client) -> OrderRepository:
    return OrderRepository(data_client)


def make_token(user_id="user-1", role="customer", email="shopper@example.com",
               token_type="access", expires_in=timedelta(minutes=15)):
    payload = {
        "sub": email,
        "id": user_id,
        "role": role,
        "type": token_type,
        "exp": datetime.now(timezone.utc) + expires_in,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {make_token(user_id='admin-1', role='admin', email='admin@example.com')}"}


@pytest.fixture
def customer_headers():
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture
def customer():
    """Decoded-token shape used by the views."""
    return {"email": "shopper@example.com", "user_id": "user-1", "user_role": "customer"}


@pytest.fixture
def make_order(session):
    """
    Factory inserting an order row. Items and address are stored as JSON
    text the way the orders table keeps them.
    """
    counter = {"n": 0}

    def _make_order(**overrides):
        counter["n"] += 1
        n = counter["n"]
        values = {
            "id": f"ord-{n:04d}-{'x' * 8}",
            "customer_name": f"Customer {n}",
            "customer_email": f"customer{n}@example.com",
            "order_date": datetime(2024, 1, 1, 9, 30, tzinfo=timezone.utc) + timedelta(days=n),
            "status": "pending",
            "total_amount": Decimal("499.00"),
            "items": json.dumps([{"id": 1, "name": "Silk Saree", "price": 499, "quantity": 1}]),
            "shipping_address": json.dumps({
                "line1": "12 MG Road", "city": "Pune", "state": "MH", "postal_code": "411001"
            }),
        }
        values.update(overrides)
        order = Order(**values)
        session.add(order)
        session.commit()
        return order

    return _make_order


@pytest.fixture
def product(session):
    model = Product(
        id=1,
        name="Banarasi Silk Saree",
        category="Sarees",
        price=Decimal("2500.00"),
        discount=20,
        image_url="/images/banarasi.jpg",
        in_stock=True,
        rating=4.5,
        sales_count=32,
    )
    session.add(model)
    session.commit()
    return model


@pytest.fixture
def out_of_stock_product(session):
    model = Product(
        id=2,
        name="Kanjivaram Saree",
        category="Sarees",
        price=Decimal("4200.00"),
        discount=0,
        in_stock=False,
    )
    session.add(model)
    session.commit()
    return model


class RecordingDataClient(DataClient):
    """
    DataClient that records every call and can be told to fail.
    """
    MUTATIONS = {"update_order_status", "add_wishlist_entry", "remove_wishlist_entry", "add_cart_item"}

    def __init__(self, db, fail_on=()):
        super().__init__(db)
        self.calls = []
        self.fail_on = set(fail_on)

    def _record(self, name):
        from services.data_client import DataClientError

        self.calls.append(name)
        if name in self.fail_on:
            raise DataClientError("backend unavailable", operation=name)

    @property
    def mutations(self):
        return [name for name in self.calls if name in self.MUTATIONS]

    def list_orders(self, *args, **kwargs):
        self._record("list_orders")
        return super().list_orders(*args, **kwargs)

    def update_order_status(self, *args, **kwargs):
        self._record("update_order_status")
        return super().update_order_status(*args, **kwargs)

    def check_wishlist_membership(self, *args, **kwargs):
        self._record("check_wishlist_membership")
        return super().check_wishlist_membership(*args, **kwargs)

    def add_wishlist_entry(self, *args, **kwargs):
        self._record("add_wishlist_entry")
        return super().add_wishlist_entry(*args, **kwargs)

    def remove_wishlist_entry(self, *args, **kwargs):
        self._record("remove_wishlist_entry")
        return super().remove_wishlist_entry(*args, **kwargs)

    def check_cart_membership(self, *args, **kwargs):
        self._record("check_cart_membership")
        return super().check_cart_membership(*args, **kwargs)

    def add_cart_item(self, *args, **kwargs):
        self._record("add_cart_item")
        return super().add_cart_item(*args, **kwargs)


@pytest.fixture
def recording_client(session):
    return RecordingDataClient(session)


@pytest.fixture
def failing_client(session):
    def _failing_client(*operations):
        return RecordingDataClient(session, fail_on=operations)
    return _failing_client
