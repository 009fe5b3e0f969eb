"""
Shared fixtures: an in-memory SQLite database wired into the FastAPI app,
a signed-in operator and a canned room.
"""

import pytest
from decimal import Decimal
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from stayadmin import models  # noqa: F401
from stayadmin.database import Base, get_db
from stayadmin.main import app
from stayadmin.models.operator import Operator
from stayadmin.models.room import Room
from stayadmin.utils.rate_limiter import limiter
from stayadmin.utils.security import hash_password, create_access_token

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    limiter.enabled = False
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        limiter.enabled = True


@pytest.fixture
def operator(db):
    op = Operator(username="frontdesk", hashed_password=hash_password("correct-horse"), is_active=True)
    db.add(op)
    db.commit()
    db.refresh(op)
    return op


@pytest.fixture
def auth_headers(operator):
    token = create_access_token({"sub": operator.username})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def room(db):
    r = Room(name="Garden Room", slug="garden", base_price=Decimal("100.00"), max_guests=2, active=True)
    db.add(r)
    db.commit()
    db.refresh(r)
    return r
