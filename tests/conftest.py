import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import datetime, timedelta
import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.core.security import create_access_token, get_password_hash
from storefront.database.connection import Base, get_db
from storefront.models import order, product, user  # noqa: F401
from storefront.models.user import User
from storefront.schemas.product import ProductCreate
from storefront.services.product_service import create_product

TEST_DB_URL = "sqlite:///:memory:"

engine = create_engine(
    TEST_DB_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client(db):
    from storefront.main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------- builders ----------

def make_user(db, username="buyer", role="user", full_name="Test Buyer", phone="07700000000"):
    u = User(
        username=username,
        email=f"{username}@example.com",
        full_name=full_name,
        phone=phone,
        hashed_password=get_password_hash("secret123"),
        role=role,
    )
    db.add(u)
    db.commit()
    db.refresh(u)
    return u


def auth_headers(u):
    token = create_access_token({"sub": u.username, "role": u.role})
    return {"Authorization": f"Bearer {token}"}


def make_product(db, prod_id=None, price=100.0, stock=5, **overrides):
    payload = dict(
        product_id=prod_id or f"PROD_{uuid.uuid4().hex[:6].upper()}",
        name="Test Product",
        category="phones",
        brand="Acme",
        price=price,
        stock=stock,
    )
    payload.update(overrides)
    return create_product(db, ProductCreate(**payload))


def make_auction(
    db,
    prod_id=None,
    starting_bid=1000.0,
    increment=100.0,
    starts_in=timedelta(hours=-1),
    ends_in=timedelta(hours=1),
    now=None,
):
    now = now or datetime.utcnow()
    return make_product(
        db,
        prod_id=prod_id,
        price=starting_bid,
        stock=1,
        name="Vintage Watch",
        is_auction=True,
        starting_bid=starting_bid,
        minimum_bid_increment=increment,
        auction_start_date=now + starts_in,
        auction_end_date=now + ends_in,
    )


@pytest.fixture()
def buyer(db):
    return make_user(db)


@pytest.fixture()
def admin(db):
    return make_user(db, username="admin", role="admin", full_name="Store Admin")
