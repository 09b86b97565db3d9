"""
Domain models for the patient service.

This module contains internal domain models built from database rows.
"""
from models.patient import Patient, PATIENT_COLUMNS

__all__ = ["Patient", "PATIENT_COLUMNS"]
