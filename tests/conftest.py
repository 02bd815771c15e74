"""
Shared fixtures: in-memory database, API client and bearer tokens
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["AUTH_JWT_SECRET"] = "test-secret"

import itertools
import uuid
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from jose import jwt

from app.database import Base, get_db
from app.config import AUTH_JWT_SECRET, AUTH_JWT_ALGORITHM, AUTH_JWT_AUDIENCE
from app.auth.permissions import Role
from app.models.order import Order
from app.models.rider import Rider
from app.models.profile import Profile
from main import app

_numbers = itertools.count(1)

@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()

@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()

@pytest.fixture
def make_profile(db_session):
    def _make(role=Role.ADMIN, **fields):
        role_value = getattr(role, "value", role)
        profile = Profile(
            id=fields.pop("id", str(uuid.uuid4())),
            role=role_value,
            email=fields.pop("email", f"{role_value}-{next(_numbers)}@pideai.test"),
            full_name=fields.pop("full_name", f"Staff {role_value}"),
            **fields
        )
        db_session.add(profile)
        db_session.commit()
        return profile
    return _make

@pytest.fixture
def make_rider(db_session):
    def _make(**fields):
        n = next(_numbers)
        rider = Rider(
            full_name=fields.pop("full_name", f"Rider {n:03d}"),
            phone=fields.pop("phone", f"+58412000{n:04d}"),
            **fields
        )
        db_session.add(rider)
        db_session.commit()
        return rider
    return _make

@pytest.fixture
def make_order(db_session):
    def _make(**fields):
        n = next(_numbers)
        order = Order(
            order_number=fields.pop("order_number", f"PED-{n:05d}"),
            customer_name=fields.pop("customer_name", "Cliente Prueba"),
            customer_phone=fields.pop("customer_phone", "+584140000000"),
            customer_address=fields.pop("customer_address", "Av. Principal 123"),
            store_id=fields.pop("store_id", "store-1"),
            store_name=fields.pop("store_name", "Tienda Centro"),
            total_amount=fields.pop("total_amount", 25.0),
            **fields
        )
        db_session.add(order)
        db_session.commit()
        return order
    return _make

@pytest.fixture
def make_token():
    """Mint a token shaped like the identity provider's"""
    def _make(claims, secret=AUTH_JWT_SECRET, audience=AUTH_JWT_AUDIENCE, expires_delta=timedelta(minutes=60)):
        to_encode = dict(claims)
        to_encode["exp"] = datetime.now(timezone.utc) + expires_delta
        if audience:
            to_encode.setdefault("aud", audience)
        return jwt.encode(to_encode, secret, algorithm=AUTH_JWT_ALGORITHM)
    return _make

@pytest.fixture
def auth_headers(make_token):
    def _headers(profile):
        token = make_token({"sub": profile.id, "email": profile.email})
        return {"Authorization": f"Bearer {token}"}
    return _headers
