"""
Pydantic schemas for request/response validation.

This module contains all Pydantic models used at API boundaries.
"""
from schemas.error import ErrorResponse
from schemas.patient import PatientCreate, PatientResponse

__all__ = [
    # Patient schemas
    "PatientCreate",
    "PatientResponse",
    # Error schema
    "ErrorResponse",
]
