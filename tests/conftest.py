"""Pytest configuration and fixtures."""

import os
from collections.abc import Callable, Generator
from datetime import datetime
from typing import Any, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# Set test environment variables before importing application modules
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["RESEND_API_KEY"] = ""

from database import Base, get_db  # noqa: E402
from models.order import Address, Order, OrderItem, OrderStatus, PaymentMethod  # noqa: E402
from models.product import Product, ProductCondition, ProductFormat  # noqa: E402
from models.users import User  # noqa: E402
import models.log  # noqa: E402,F401
from utils.clock import utc_now  # noqa: E402
from utils.hashing import get_password_hash  # noqa: E402
from utils.tokenJWT import create_access_token  # noqa: E402

ADMIN_EMAIL = "admin@tiendavinilos.cl"
CUSTOMER_EMAIL = "cliente@tiendavinilos.cl"
PASSWORD = "secreto123"


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """Provide a fresh in-memory database per test.

    Yields:
        Engine: SQLAlchemy engine bound to a single shared connection.
    """
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory: sessionmaker) -> Generator[Session, None, None]:
    """Provide a session for arranging and inspecting test data.

    Yields:
        Session: Session on the same database the app uses.
    """
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory: sessionmaker) -> Generator[TestClient, None, None]:
    """Provide a test client for the FastAPI application.

    Args:
        session_factory: Session factory for the per-test database.

    Yields:
        TestClient: FastAPI test client.
    """
    from main import app

    def override_get_db() -> Generator[Session, None, None]:
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _create_user(db: Session, email: str, role: str, created_at: Optional[datetime] = None) -> User:
    user = User(
        email=email,
        password_hash=get_password_hash(PASSWORD),
        role=role,
        first_name="Test",
        last_name="User",
        created_at=created_at or utc_now(),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def make_user(db_session: Session) -> Callable[..., User]:
    def _make(email: str, role: str = "user", created_at: Optional[datetime] = None) -> User:
        return _create_user(db_session, email, role, created_at)

    return _make


@pytest.fixture
def admin_headers(make_user: Callable[..., User]) -> dict[str, str]:
    """Authorization header for a back-office administrator."""
    user = make_user(ADMIN_EMAIL, role="ADMIN")
    token = create_access_token({"sub": user.email, "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def customer_headers(make_user: Callable[..., User]) -> dict[str, str]:
    """Authorization header for a storefront customer."""
    user = make_user(CUSTOMER_EMAIL, role="user")
    token = create_access_token({"sub": user.email, "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_product(db_session: Session) -> Callable[..., Product]:
    counter = {"n": 0}

    def _make(**overrides: Any) -> Product:
        counter["n"] += 1
        n = counter["n"]
        data: dict[str, Any] = {
            "sku": f"SKU-{n:06d}",
            "slug": f"vinilo-{n}",
            "name": f"Vinilo {n}",
            "artist": "Artista",
            "price": 20000,
            "category": "Rock",
            "format": ProductFormat.VINYL_LP,
            "condition": ProductCondition.SEALED,
            "stock": 10,
            "min_stock": 5,
            "created_at": utc_now(),
        }
        data.update(overrides)
        product = Product(**data)
        db_session.add(product)
        db_session.commit()
        db_session.refresh(product)
        return product

    return _make


@pytest.fixture
def make_order(db_session: Session) -> Callable[..., Order]:
    """Insert an order directly, bypassing the checkout endpoint."""
    counter = {"n": 0}

    def _make(
        order_number: Optional[str] = None,
        customer_name: str = "Ana Pérez",
        customer_email: str = "ana@tiendavinilos.cl",
        status: OrderStatus = OrderStatus.PENDING,
        items: Optional[list[tuple[str, str, int, int]]] = None,
        created_at: Optional[datetime] = None,
        paid_at: Optional[datetime] = None,
    ) -> Order:
        counter["n"] += 1
        lines = items or [("1", "Abbey Road", 20000, 1)]
        subtotal = sum(price * qty for _, _, price, qty in lines)
        created = created_at or utc_now()
        order = Order(
            order_number=order_number or f"ORD-20260101-{counter['n']:05d}",
            customer_name=customer_name,
            customer_email=customer_email,
            customer_phone="+56912345678",
            status=status,
            payment_method=PaymentMethod.WEBPAY,
            subtotal=subtotal,
            shipping=0,
            tax=0,
            total=subtotal,
            created_at=created,
            updated_at=created,
            paid_at=paid_at,
            address=Address(street="Av. Providencia", number="1234", region="RM", city="Santiago", comuna="Providencia"),
            items=[
                OrderItem(product_id=pid, product_name=name, category="Rock", quantity=qty, price=price)
                for pid, name, price, qty in lines
            ],
        )
        db_session.add(order)
        db_session.commit()
        db_session.refresh(order)
        return order

    return _make


@pytest.fixture
def order_payload() -> dict[str, Any]:
    """A valid checkout draft as sent by the storefront."""
    return {
        "customer": {
            "email": "ana@tiendavinilos.cl",
            "firstName": "Ana",
            "lastName": "Pérez",
            "phone": "+56912345678",
        },
        "shipping": {
            "street": "Av. Providencia",
            "number": "1234",
            "region": "Región Metropolitana",
            "city": "Santiago",
            "comuna": "Providencia",
        },
        "payment": {"method": "webpay"},
        "items": [
            {"id": "1", "name": "Abbey Road", "price": 30000, "quantity": 2, "artist": "The Beatles", "category": "Rock"},
        ],
        "total": 60000,
    }
