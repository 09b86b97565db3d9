"""
FastAPI Dependency Injection configuration for Patient Service API.

Architecture Flow:
    API Layer (Routers)
         ↓ Depends()
    Service Layer (Business Logic)
         ↓ Injected
    Repository Layer (Data Access)
         ↓ Injected
    Database (SQLite Connection)

Usage in Routers:
    from core.dependencies import get_patient_service

    @router.get("/{id}")
    def get_patient(
        id: int,
        patient_service: PatientService = Depends(get_patient_service)
    ):
        return patient_service.get_by_id(id)

Testing:
    # Override dependencies in tests
    app.dependency_overrides[get_patient_service] = lambda: test_service
"""
import logging
from typing import Optional

from core.config import settings

logger = logging.getLogger(__name__)


# =============================================================================
# DATABASE DEPENDENCY
# =============================================================================

# Lazy import to avoid circular dependencies
_database_instance: Optional["Database"] = None


def get_database() -> "Database":
    """
    Get the database instance.

    Created on first use and reused afterwards. The instance only holds
    configuration; each repository call opens its own connection.

    Returns:
        Database: The configured database instance.
    """
    global _database_instance

    if _database_instance is None:
        from repositories.base import Database

        logger.info(f"Initializing database: {settings.database_path}")
        _database_instance = Database(
            db_path=settings.database_path,
            busy_timeout=settings.patient_svc_db_busy_timeout
        )
        logger.info("Database initialized successfully")

    return _database_instance


def reset_database() -> None:
    """
    Reset the database instance (for testing only).
    """
    global _database_instance
    _database_instance = None


# =============================================================================
# REPOSITORY DEPENDENCIES
# =============================================================================

def get_patient_repository() -> "PatientRepository":
    """
    Get a PatientRepository instance with database injected.

    Returns:
        PatientRepository: Repository for patient CRUD operations.
    """
    from repositories import PatientRepository

    return PatientRepository(db=get_database())


# =============================================================================
# SERVICE DEPENDENCIES
# =============================================================================

def get_patient_service() -> "PatientService":
    """
    Get a PatientService instance with repository injected.

    Returns:
        PatientService: Service for patient operations.
    """
    from services import PatientService

    return PatientService(patient_repository=get_patient_repository())
