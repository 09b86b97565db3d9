"""
Repository for patient database operations.

This module contains all database access for patient-related operations.

Architecture:
    PatientRepository is the data access layer for patients.
    It should be injected via core.dependencies.get_patient_repository().

All SQL is encapsulated in this repository - no SQL in service or API layers.
"""
import logging
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from repositories.base import Database
from models.patient import Patient, PATIENT_COLUMNS
from core.datetime_utils import format_iso, format_iso_date, utc_now

logger = logging.getLogger(__name__)

_SELECT_PATIENTS = f"SELECT {', '.join(PATIENT_COLUMNS)} FROM patients"

# Columns written on insert/update, in parameter order
_WRITABLE_COLUMNS = (
    "patient_name",
    "age",
    "gender",
    "phone_number",
    "email",
    "address",
    "symptoms",
    "appointment_date",
    "appointment_time",
    "doctor_user_id",
    "slot_id",
)


def _to_params(fields: Dict[str, Any]) -> List[Any]:
    params = [fields.get(column) for column in _WRITABLE_COLUMNS]
    params[_WRITABLE_COLUMNS.index("appointment_date")] = format_iso_date(fields.get("appointment_date"))
    return params


class PatientRepository:
    """
    Repository for patient CRUD operations.

    Write methods let sqlite3.IntegrityError propagate (a taken slot_id);
    the service layer translates it into a domain error.
    """

    def __init__(self, db: Database):
        """
        Initialize the patient repository.

        Args:
            db: Database instance for data access.
                Injected via core.dependencies.get_patient_repository().
        """
        self._db = db

    def _fetch_all(self, where: str = "", params: Sequence[Any] = (), order_by: str = "id ASC") -> List[Patient]:
        conn = self._db.get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(f"{_SELECT_PATIENTS} {where} ORDER BY {order_by}", tuple(params))
            return [Patient.from_row(row) for row in cursor.fetchall()]
        finally:
            conn.close()

    def _fetch_one(self, where: str, params: Sequence[Any]) -> Optional[Patient]:
        conn = self._db.get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(f"{_SELECT_PATIENTS} {where}", tuple(params))
            row = cursor.fetchone()
            return Patient.from_row(row) if row else None
        finally:
            conn.close()

    def add(self, fields: Dict[str, Any]) -> Patient:
        """
        Insert a patient and return the stored record.

        Insert and read-back share one transaction so the returned row is
        exactly what was written.

        Args:
            fields: Patient fields keyed by column name.

        Returns:
            Patient: The created patient with id and created_at set.

        Raises:
            sqlite3.IntegrityError: If slot_id is already taken.
        """
        conn = self._db.get_connection()
        cursor = conn.cursor()

        try:
            placeholders = ", ".join("?" for _ in _WRITABLE_COLUMNS)
            cursor.execute(
                f"INSERT INTO patients ({', '.join(_WRITABLE_COLUMNS)}, created_at) "
                f"VALUES ({placeholders}, ?)",
                (*_to_params(fields), format_iso(utc_now()))
            )
            patient_id = cursor.lastrowid

            cursor.execute(f"{_SELECT_PATIENTS} WHERE id = ?", (patient_id,))
            row = cursor.fetchone()

            conn.commit()
            return Patient.from_row(row)
        finally:
            conn.close()

    def update(self, patient_id: int, fields: Dict[str, Any]) -> Optional[Patient]:
        """
        Replace the writable fields of a patient.

        Args:
            patient_id: Id of the patient to update.
            fields: New values keyed by column name.

        Returns:
            Optional[Patient]: The updated patient, or None if the id is unknown.

        Raises:
            sqlite3.IntegrityError: If the new slot_id is held by another patient.
        """
        conn = self._db.get_connection()
        cursor = conn.cursor()

        try:
            assignments = ", ".join(f"{column} = ?" for column in _WRITABLE_COLUMNS)
            cursor.execute(
                f"UPDATE patients SET {assignments} WHERE id = ?",
                (*_to_params(fields), patient_id)
            )
            if cursor.rowcount == 0:
                conn.rollback()
                return None

            cursor.execute(f"{_SELECT_PATIENTS} WHERE id = ?", (patient_id,))
            row = cursor.fetchone()

            conn.commit()
            return Patient.from_row(row)
        finally:
            conn.close()

    def delete(self, patient_id: int) -> bool:
        """
        Delete a patient.

        Returns:
            bool: True if a row was removed, False if the id is unknown.
        """
        conn = self._db.get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM patients WHERE id = ?", (patient_id,))
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()

    def get_all(self) -> List[Patient]:
        """Get all patients ordered by id."""
        return self._fetch_all()

    def get_by_id(self, patient_id: int) -> Optional[Patient]:
        """Get a patient by id, or None if not found."""
        return self._fetch_one("WHERE id = ?", (patient_id,))

    def get_by_phone_number(self, phone_number: str) -> List[Patient]:
        """Get all patients registered with an exact phone number."""
        return self._fetch_all("WHERE phone_number = ?", (phone_number,))

    def get_by_slot_id(self, slot_id: int) -> Optional[Patient]:
        """Get the patient holding a slot, or None."""
        return self._fetch_one("WHERE slot_id = ?", (slot_id,))

    def get_by_doctor_user_id(self, doctor_user_id: int) -> List[Patient]:
        """Get all patients assigned to a doctor, earliest appointment first."""
        return self._fetch_all(
            "WHERE doctor_user_id = ?",
            (doctor_user_id,),
            order_by="appointment_date IS NULL, appointment_date ASC, appointment_time ASC, id ASC",
        )

    def get_by_doctor_user_id_and_date(self, doctor_user_id: int, appointment_date: date) -> List[Patient]:
        """Get a doctor's patients for one day, ordered by appointment time."""
        return self._fetch_all(
            "WHERE doctor_user_id = ? AND appointment_date = ?",
            (doctor_user_id, format_iso_date(appointment_date)),
            order_by="appointment_time IS NULL, appointment_time ASC, id ASC",
        )
