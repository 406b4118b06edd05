"""Shared test fixtures.

Each test gets its own SQLite file store with a fresh schema, so tests never
pollute each other and threaded tests can open independent connections.
Fixtures commit their rows because the API under test uses its own sessions.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from retailpos.app.core.config import Settings
from retailpos.app.core.database import Store
from retailpos.app.core.security import create_access_token, get_password_hash
from retailpos.app.main import create_app
from retailpos.app.models.customer import Customer
from retailpos.app.models.inventory import Product
from retailpos.app.models.user import RoleEnum, User

TEST_SECRET = "test-secret-key"
TEST_PASSWORD = "Passw0rd123"


# ─── Store & sessions ────────────────────────────────────────────────────────


@pytest.fixture()
def store(tmp_path) -> Generator[Store, None, None]:
    s = Store(f"sqlite:///{tmp_path / 'pos.db'}")
    s.create_all()
    yield s
    s.dispose()


@pytest.fixture()
def db(store: Store) -> Generator[Session, None, None]:
    session = store.session()
    yield session
    session.close()


@pytest.fixture()
def test_settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite:///{tmp_path / 'pos.db'}",
        SECRET_KEY=TEST_SECRET,
        LOG_LEVEL="WARNING",
        SALE_COMMIT_RETRY_BACKOFF_SECONDS=0,
    )


@pytest.fixture()
def client(test_settings: Settings, store: Store) -> Generator[TestClient, None, None]:
    """TestClient wired to the per-test store."""
    app = create_app(test_settings, store)
    with TestClient(app) as c:
        yield c


# ─── Accounts & tokens ───────────────────────────────────────────────────────


def _make_user(db: Session, username: str, role: RoleEnum) -> User:
    user = User(
        username=username,
        hashed_password=get_password_hash(TEST_PASSWORD),
        role=role,
    )
    db.add(user)
    db.commit()
    return user


@pytest.fixture()
def admin_user(db: Session) -> User:
    return _make_user(db, "test_admin", RoleEnum.ADMIN)


@pytest.fixture()
def staff_user(db: Session) -> User:
    return _make_user(db, "test_cashier", RoleEnum.STAFF)


def token_for(user: User) -> str:
    return create_access_token(
        subject=str(user.id), role=user.role, secret_key=TEST_SECRET
    )


@pytest.fixture()
def admin_token(admin_user: User) -> str:
    return token_for(admin_user)


@pytest.fixture()
def staff_token(staff_user: User) -> str:
    return token_for(staff_user)


def auth(token: str) -> dict[str, str]:
    """Return Authorization header dict."""
    return {"Authorization": f"Bearer {token}"}


# ─── Catalog ─────────────────────────────────────────────────────────────────


@pytest.fixture()
def product_p1(db: Session) -> Product:
    """Refund-eligible product: 10.00 each, 5 in stock."""
    p = Product(
        name="Product P1",
        sku="SKU-P1",
        price=Decimal("10.00"),
        stock=5,
        is_refundable=True,
    )
    db.add(p)
    db.commit()
    return p


@pytest.fixture()
def product_plain(db: Session) -> Product:
    """Not refund-eligible: 4.99 each, 10 in stock."""
    p = Product(
        name="Plain Product",
        sku="SKU-PLAIN",
        price=Decimal("4.99"),
        stock=10,
        is_refundable=False,
    )
    db.add(p)
    db.commit()
    return p


# ─── Customers ───────────────────────────────────────────────────────────────


@pytest.fixture()
def member(db: Session) -> Customer:
    c = Customer(
        name="Member Customer",
        email="member@test.com",
        phone="0811111111",
        is_member=True,
    )
    db.add(c)
    db.commit()
    return c


@pytest.fixture()
def non_member(db: Session) -> Customer:
    c = Customer(
        name="Regular Customer",
        email="regular@test.com",
        phone="0822222222",
        is_member=False,
    )
    db.add(c)
    db.commit()
    return c
