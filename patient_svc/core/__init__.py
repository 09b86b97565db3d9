"""
Core module for application configuration, logging, and shared utilities.

This module provides:
- Settings: Application configuration via pydantic-settings
- Dependency injection: FastAPI Depends() functions for services and repositories
- Exceptions: Domain-specific exception classes and ErrorResponse rendering
- Datetime utilities: UTC timestamps and strict ISO date parsing
"""
from core.config import settings, Settings

# Dependency injection - import functions for FastAPI Depends()
from core.dependencies import (
    get_database,
    get_patient_repository,
    get_patient_service,
    reset_database,
)

# Exception classes for consistent error handling
from core.exceptions import (
    PatientServiceError,
    PatientNotFoundError,
    InvalidPatientDataError,
    SlotAlreadyBookedError,
    DatabaseError,
    error_response,
    setup_exception_handlers,
)

from core.datetime_utils import (
    utc_now,
    to_utc,
    parse_iso_date,
    parse_iso_date_safe,
    format_iso,
    format_iso_date,
)
from core.config import (
    DATABASE_DIR,
    DATABASE_FILE,
    DATABASE_PATH,
    API_HOST,
    API_PORT,
    API_RELOAD,
    CORS_ORIGIN,
)

__all__ = [
    # Settings
    "settings",
    "Settings",
    # Dependency injection
    "get_database",
    "get_patient_repository",
    "get_patient_service",
    "reset_database",
    # Exceptions
    "PatientServiceError",
    "PatientNotFoundError",
    "InvalidPatientDataError",
    "SlotAlreadyBookedError",
    "DatabaseError",
    "error_response",
    "setup_exception_handlers",
    # Datetime utilities
    "utc_now",
    "to_utc",
    "parse_iso_date",
    "parse_iso_date_safe",
    "format_iso",
    "format_iso_date",
    # Module-level config
    "DATABASE_DIR",
    "DATABASE_FILE",
    "DATABASE_PATH",
    "API_HOST",
    "API_PORT",
    "API_RELOAD",
    "CORS_ORIGIN",
]
