"""Pytest configuration and fixtures."""

import os
import tempfile

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="kheops-logs-"))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.deps import get_current_active_user, get_current_manager
from app.core.security import get_password_hash
from app.db.base import Base, get_db
from app.main import app
from app.models.booking import Booking
from app.models.category import ActivityCategory
from app.models.client import Client
from app.models.contract import Contract
from app.models.user import User, UserRole
from app.services.notifier import notifier


@pytest.fixture(name="db")
def db_fixture():
    """Create an in-memory SQLite database for testing."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        notifier.clear()


@pytest.fixture(name="staff_user")
def staff_user_fixture(db):
    user = User(
        email="caisse@kheops.studio",
        username="caisse",
        hashed_password=get_password_hash("caisse123"),
        full_name="Caisse",
        role=UserRole.ADMIN,
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture(name="client")
def client_fixture(db, staff_user):
    """Create a test client with the test database and an authenticated admin."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    def override_current_user():
        return staff_user

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_active_user] = override_current_user
    app.dependency_overrides[get_current_manager] = override_current_user
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture(name="anonymous_client")
def anonymous_client_fixture(db):
    """Test client without authentication overrides."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture(name="categories")
def categories_fixture(db):
    categories = [
        ActivityCategory(name="Réservation Studio", point_cost=50, unit_price=15000, icon="mic", color="purple"),
        ActivityCategory(name="Achat de livre", point_cost=20, unit_price=5000, icon="book", color="blue"),
        ActivityCategory(name="Session de jeu", point_cost=10, unit_price=2000, icon="gamepad", color="green"),
    ]
    db.add_all(categories)
    db.commit()
    return {c.name: c for c in categories}


@pytest.fixture(name="loyal_client")
def loyal_client_fixture(db):
    client = Client(name="Awa Diallo", phone="620000001", loyalty_points=100)
    db.add(client)
    db.commit()
    db.refresh(client)
    return client


@pytest.fixture(name="booking")
def booking_fixture(db):
    from datetime import datetime, timezone

    booking = Booking(
        client_name="Mamadou Camara",
        phone="620000002",
        service="Réservation Studio",
        date=datetime(2026, 10, 20, 14, 0, tzinfo=timezone.utc),
        amount=30000,
    )
    db.add(booking)
    db.commit()
    db.refresh(booking)
    return booking


@pytest.fixture(name="contract")
def contract_fixture(db):
    contract = Contract(client_name="Fatoumata Barry", title="Enregistrement album", amount=60000)
    db.add(contract)
    db.commit()
    db.refresh(contract)
    return contract
