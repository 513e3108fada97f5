"""
Pytest Configuration and Shared Fixtures
========================================

This module provides shared fixtures for all MedsBuddy tests.
Fixtures include database sessions, test clients, sample data, and mocks.
"""

import os
import sys
from datetime import datetime, date, timedelta
from typing import Generator, Dict, Any, List
from unittest.mock import AsyncMock

# Settings are read at import time
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["CRON_SECRET"] = "test-cron-secret"
os.environ.pop("MAIL_HOST", None)
os.environ.pop("APP_TIMEZONE", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from database import Base, get_db
from models import Profile, Medication, MedicationLog, UserRole, MedicationFrequency
from tools.notification_service import NotificationResult
from app import app


# A fixed instant: 10:30 on a weekday
FIXED_NOW = datetime(2024, 3, 14, 10, 30)

CRON_HEADERS = {"Authorization": "Bearer test-cron-secret"}


# ==================== DATABASE FIXTURES ====================

@pytest.fixture(scope="function")
def test_engine():
    """Create a test database engine with in-memory SQLite"""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    # Enable foreign keys for SQLite
    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    # Create all tables
    Base.metadata.create_all(bind=engine)

    yield engine

    # Cleanup
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(test_engine) -> Generator[Session, None, None]:
    """Create a test database session"""
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=test_engine
    )

    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """Create a FastAPI test client with database override"""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# ==================== SAMPLE DATA FIXTURES ====================

@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def sample_patient_data() -> Dict[str, Any]:
    """Sample patient profile with alerts forwarded to a caretaker"""
    return {
        "id": "patient-1",
        "email": "john.doe@example.com",
        "role": UserRole.PATIENT,
        "caretaker_email": "carer@example.com",
        "notification_window_minutes": 60,
    }


@pytest.fixture
def test_patient(db_session: Session, sample_patient_data: Dict) -> Profile:
    """Create and return a test patient"""
    patient = Profile(**sample_patient_data)
    db_session.add(patient)
    db_session.commit()
    db_session.refresh(patient)
    return patient


@pytest.fixture
def test_caretaker(db_session: Session, test_patient: Profile) -> Profile:
    """Caretaker whose email the test patient forwards alerts to"""
    caretaker = Profile(
        id="caretaker-1",
        email=test_patient.caretaker_email,
        role=UserRole.CARETAKER
    )
    db_session.add(caretaker)
    db_session.commit()
    db_session.refresh(caretaker)
    return caretaker


@pytest.fixture
def test_medications(db_session: Session, test_patient: Profile) -> List[Medication]:
    """Morning and evening medication for the test patient"""
    medications = [
        Medication(
            patient_id=test_patient.id,
            name="Metformin",
            dosage="500mg",
            frequency=MedicationFrequency.TWICE_DAILY,
            scheduled_time="08:00",
            is_active=True
        ),
        Medication(
            patient_id=test_patient.id,
            name="Atorvastatin",
            dosage="20mg",
            frequency=MedicationFrequency.ONCE_DAILY,
            scheduled_time="20:00",
            is_active=True
        ),
    ]
    db_session.add_all(medications)
    db_session.commit()
    for med in medications:
        db_session.refresh(med)
    return medications


@pytest.fixture
def test_medication(test_medications: List[Medication]) -> Medication:
    return test_medications[0]


@pytest.fixture
def make_log(db_session: Session):
    """Factory for today's (or any day's) medication log"""
    def _make(medication: Medication, day: date = FIXED_NOW.date(), taken_at: datetime = None) -> MedicationLog:
        log = MedicationLog(
            medication_id=medication.id,
            patient_id=medication.patient_id,
            date=day,
            taken_at=taken_at or datetime.combine(day, datetime.min.time()) + timedelta(hours=9)
        )
        db_session.add(log)
        db_session.commit()
        db_session.refresh(log)
        return log

    return _make


# ==================== AUTH HELPERS ====================

@pytest.fixture
def patient_headers(test_patient: Profile) -> Dict[str, str]:
    return {"X-User-Id": test_patient.id}


@pytest.fixture
def caretaker_headers(test_caretaker: Profile) -> Dict[str, str]:
    return {"X-User-Id": test_caretaker.id}


@pytest.fixture
def cron_headers() -> Dict[str, str]:
    return dict(CRON_HEADERS)


# ==================== MOCKS ====================

@pytest.fixture
def mock_notifier():
    """Mail collaborator that accepts every message"""
    notifier = AsyncMock()

    async def _send(request):
        return NotificationResult(success=True, recipient=request.to, message_id="test")

    notifier.send_email.side_effect = _send
    return notifier
