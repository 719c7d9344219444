"""Shared test fixtures and helpers."""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ADMIN_EMAILS", "owner@example.com")

from datetime import date, timedelta
from typing import Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.security import SessionContext, create_access_token, hash_password
from app.db.base import get_db
from app.db.init_db import init_db
from app.db.models.technician import StudioService, Technician
from app.db.models.user import User
from app.main import app
from app.services.technicians import DEFAULT_SERVICES

BOOKING_DATE = date.today() + timedelta(days=3)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_user(
    db,
    email: str = "casey@example.com",
    name: str = "Casey Customer",
    role: str = "customer",
    approved: bool = True,
    signed_terms: bool = True,
    password: str = "password123",
) -> User:
    """Helper to insert a user with sensible defaults."""
    user = User(
        email=email,
        name=name,
        role=role,
        password_hash=hash_password(password),
        is_approved=approved,
        has_signed_terms=signed_terms,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_technician(
    db,
    technician_id: str = "tech-ana",
    email: str = "ana@example.com",
    name: str = "Ana",
    is_active: bool = True,
    services: Optional[list] = None,
) -> Technician:
    technician = Technician(
        id=technician_id,
        name=name,
        email=email,
        business_name=f"{name} Nails",
        specialties=["Nail Art & Design"],
        is_active=is_active,
        rating=0,
        total_reviews=0,
    )
    technician.services = [StudioService(**data) for data in (services or DEFAULT_SERVICES[:3])]
    db.add(technician)
    db.commit()
    db.refresh(technician)
    return technician


def auth_headers(user: User) -> dict:
    token = create_access_token({"sub": user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def customer(db):
    return make_user(db)


@pytest.fixture
def admin_user(db):
    return make_user(db, email="owner@example.com", name="Olivia Owner", role="admin")


@pytest.fixture
def technician(db):
    return make_technician(db)


@pytest.fixture
def customer_ctx(customer):
    return SessionContext.from_user(customer)
