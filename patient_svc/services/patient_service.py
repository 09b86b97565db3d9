"""
Service layer for patient operations.

This service contains business logic for patient management
and orchestrates calls to repositories.

Architecture:
    API Layer (routers) → PatientService → PatientRepository → Database

Dependency Injection:
    PatientService receives its repository via constructor injection.
    Use core.dependencies.get_patient_service() in routers with Depends().
"""
import logging
import re
import sqlite3
from datetime import date
from typing import Any, Dict, List, Optional

from pydantic.alias_generators import to_camel

from repositories import PatientRepository
from models import Patient
from schemas import PatientCreate, PatientResponse
from core.exceptions import (
    DatabaseError,
    InvalidPatientDataError,
    PatientNotFoundError,
    SlotAlreadyBookedError,
)

logger = logging.getLogger(__name__)

_TIME_PATTERN = re.compile(r"\d{2}:\d{2}")

_MAX_TEXT_LENGTHS = {
    "patient_name": 200,
    "gender": 20,
    "email": 200,
    "address": 500,
    "symptoms": 2000,
}


def _to_response(patient: Patient) -> PatientResponse:
    return PatientResponse(**patient.to_dict())


class PatientService:
    """
    Service layer for patient operations.

    Handles business rules for patient management and translates
    repository outcomes into domain exceptions.
    """

    def __init__(self, patient_repository: PatientRepository):
        """
        Initialize the patient service.

        Args:
            patient_repository: PatientRepository instance for data access.
                               Injected via core.dependencies.get_patient_service().
        """
        self._repo = patient_repository

    def _validate(self, patient: PatientCreate) -> Dict[str, Any]:
        """
        Apply the patient field rules and return the normalized fields.

        Raises:
            InvalidPatientDataError: On the first rule the payload breaks.
        """
        fields = patient.model_dump()
        fields["patient_name"] = fields["patient_name"].strip()
        fields["phone_number"] = fields["phone_number"].strip()

        for name, limit in _MAX_TEXT_LENGTHS.items():
            value = fields[name]
            if value is not None and len(value) > limit:
                raise InvalidPatientDataError(
                    detail=f"{to_camel(name)} must be at most {limit} characters",
                    field=name,
                )

        if not fields["patient_name"]:
            raise InvalidPatientDataError(detail="patientName must not be blank")

        phone_length = len(fields["phone_number"])
        if not 5 <= phone_length <= 20:
            raise InvalidPatientDataError(
                detail="phoneNumber must be between 5 and 20 characters",
                phone_length=phone_length,
            )

        age = fields["age"]
        if age is not None and not 0 <= age <= 150:
            raise InvalidPatientDataError(detail="age must be between 0 and 150", age=age)

        for name in ("doctor_user_id", "slot_id"):
            if fields[name] is not None and fields[name] < 1:
                raise InvalidPatientDataError(
                    detail=f"{to_camel(name)} must be a positive integer",
                    field=name,
                )

        appointment_time = fields["appointment_time"]
        if appointment_time is not None and not _TIME_PATTERN.fullmatch(appointment_time):
            raise InvalidPatientDataError(
                detail="appointmentTime must use HH:MM",
                appointment_time=appointment_time,
            )
        if appointment_time and fields["appointment_date"] is None:
            raise InvalidPatientDataError(
                detail="appointmentTime requires appointmentDate",
                appointment_time=appointment_time,
            )
        return fields

    def save(self, patient: PatientCreate) -> PatientResponse:
        """
        Register a new patient.

        Args:
            patient: Validated patient payload.

        Returns:
            PatientResponse: The created patient with its id.

        Raises:
            InvalidPatientDataError: If the payload breaks a business rule.
            SlotAlreadyBookedError: If the slot is held by another patient.
        """
        fields = self._validate(patient)
        logger.info(f"Registering patient: {patient.patient_name}")

        try:
            created = self._repo.add(fields)
        except sqlite3.IntegrityError as e:
            logger.warning(f"Slot already booked: {patient.slot_id}")
            raise SlotAlreadyBookedError(slot_id=patient.slot_id) from e
        except sqlite3.Error as e:
            logger.error(f"Failed to insert patient: {e}")
            raise DatabaseError(operation="insert") from e

        logger.info(f"Patient created successfully: {created.patient_name} (id={created.id})")
        return _to_response(created)

    def get_all(self) -> List[PatientResponse]:
        """Get all patients ordered by id."""
        return [_to_response(p) for p in self._repo.get_all()]

    def get_by_id(self, patient_id: int) -> PatientResponse:
        """
        Get a patient by id.

        Raises:
            PatientNotFoundError: If no patient has this id.
        """
        patient = self._repo.get_by_id(patient_id)
        if patient is None:
            raise PatientNotFoundError(patient_id=patient_id)
        return _to_response(patient)

    def update(self, patient_id: int, patient: PatientCreate) -> PatientResponse:
        """
        Replace a patient's details.

        Raises:
            PatientNotFoundError: If no patient has this id.
            InvalidPatientDataError: If the payload breaks a business rule.
            SlotAlreadyBookedError: If the new slot is held by another patient.
        """
        fields = self._validate(patient)

        try:
            updated = self._repo.update(patient_id, fields)
        except sqlite3.IntegrityError as e:
            raise SlotAlreadyBookedError(slot_id=patient.slot_id) from e
        except sqlite3.Error as e:
            logger.error(f"Failed to update patient {patient_id}: {e}")
            raise DatabaseError(operation="update", patient_id=patient_id) from e

        if updated is None:
            raise PatientNotFoundError(patient_id=patient_id)

        logger.info(f"Patient updated: id={patient_id}")
        return _to_response(updated)

    def delete(self, patient_id: int) -> None:
        """
        Delete a patient.

        Raises:
            PatientNotFoundError: If no patient has this id.
        """
        if not self._repo.delete(patient_id):
            raise PatientNotFoundError(patient_id=patient_id)
        logger.info(f"Patient deleted: id={patient_id}")

    def get_by_phone_number(self, phone_number: str) -> List[PatientResponse]:
        """Get patients registered with a phone number (exact match, trimmed)."""
        return [_to_response(p) for p in self._repo.get_by_phone_number(phone_number.strip())]

    def get_by_slot_id(self, slot_id: int) -> Optional[PatientResponse]:
        """
        Get the patient holding a slot.

        Returns None when the slot is free; callers decide how to report it.
        """
        patient = self._repo.get_by_slot_id(slot_id)
        return _to_response(patient) if patient else None

    def get_by_doctor_user_id(self, doctor_user_id: int) -> List[PatientResponse]:
        """Get all patients assigned to a doctor."""
        return [_to_response(p) for p in self._repo.get_by_doctor_user_id(doctor_user_id)]

    def get_by_doctor_user_id_and_date(
        self,
        doctor_user_id: int,
        appointment_date: date
    ) -> List[PatientResponse]:
        """Get a doctor's patients with appointments on one day."""
        patients = self._repo.get_by_doctor_user_id_and_date(doctor_user_id, appointment_date)
        return [_to_response(p) for p in patients]
