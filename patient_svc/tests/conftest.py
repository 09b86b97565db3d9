"""
Shared pytest fixtures for API tests.

Key patterns:

1. Database Isolation: Each test gets a fresh temporary database
2. DI Override: Use app.dependency_overrides to inject test dependencies
3. Service Injection: Services are created with test repositories

Fixture Hierarchy:
    temp_db → patient_repo → patient_service → test_app → client
"""
import os
import tempfile

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

# Keep the default database directory out of the working tree.
# This must happen before any config imports.
os.environ.setdefault("PATIENT_SVC_DB_DIR", tempfile.mkdtemp(prefix="patient_svc_"))

from repositories.base import Database
from repositories import PatientRepository
from services.patient_service import PatientService
from core.exceptions import setup_exception_handlers
from core import dependencies as deps


class FailingPatientService:
    """Service stand-in whose every call raises, for error-mapping tests."""

    def __init__(self, error: Exception = None):
        self.error = error or RuntimeError("database is locked")

    def _fail(self, *args, **kwargs):
        raise self.error

    save = get_all = get_by_id = update = delete = _fail
    get_by_phone_number = get_by_slot_id = _fail
    get_by_doctor_user_id = get_by_doctor_user_id_and_date = _fail


@pytest.fixture
def temp_db():
    """
    Create a temporary database for testing.

    A fresh SQLite file per test keeps tests fully isolated.
    """
    fd, db_path = tempfile.mkstemp(suffix='.db')
    os.close(fd)

    db = Database(db_path=db_path)
    yield db

    for path in (db_path, db_path + "-wal", db_path + "-shm"):
        if os.path.exists(path):
            os.unlink(path)


@pytest.fixture
def patient_repo(temp_db):
    """Create a PatientRepository with the test database."""
    return PatientRepository(db=temp_db)


@pytest.fixture
def patient_service(patient_repo):
    """Create a PatientService with the test repository."""
    return PatientService(patient_repository=patient_repo)


def _build_app(temp_db, service) -> FastAPI:
    from api.routers import health_router, patients_router

    app = FastAPI(title="Patient Service API Test")
    setup_exception_handlers(app)

    app.dependency_overrides[deps.get_database] = lambda: temp_db
    app.dependency_overrides[deps.get_patient_service] = lambda: service

    app.include_router(health_router)
    app.include_router(patients_router)
    return app


@pytest.fixture
def test_app(temp_db, patient_service):
    """
    Create a FastAPI test app using the real routers and exception
    handlers, with the database and service injected via overrides.
    """
    app = _build_app(temp_db, patient_service)
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(test_app):
    """Create a test client for the API."""
    return TestClient(test_app)


@pytest.fixture
def failing_client(temp_db):
    """Test client whose PatientService raises on every call."""
    app = _build_app(temp_db, FailingPatientService())
    # Errors that reach the generic handler are re-raised by Starlette
    # after the response is sent; inspect the response instead.
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


@pytest.fixture
def patient_payload():
    """Factory for valid patient request bodies (camelCase, as sent by clients)."""
    def _make(**overrides):
        payload = {
            "patientName": "Asha Verma",
            "age": 34,
            "gender": "Female",
            "phoneNumber": "9876543210",
            "email": "asha.verma@example.com",
            "address": "12 MG Road, Pune",
            "symptoms": "Recurring headache",
            "appointmentDate": "2024-02-15",
            "appointmentTime": "10:30",
            "doctorUserId": 7,
            "slotId": 101,
        }
        payload.update(overrides)
        return payload
    return _make
