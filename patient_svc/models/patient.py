"""
Domain model for patients.
"""
from dataclasses import asdict, dataclass
from datetime import date
from typing import Any, Dict, Optional, Sequence

from core.datetime_utils import parse_iso_date_safe

# Column order used by every SELECT in the patient repository
PATIENT_COLUMNS = (
    "id",
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
    "created_at",
)


@dataclass
class Patient:
    """Model representing a stored patient."""

    id: int
    patient_name: str
    phone_number: str
    created_at: str
    age: Optional[int] = None
    gender: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    symptoms: Optional[str] = None
    appointment_date: Optional[date] = None
    appointment_time: Optional[str] = None
    doctor_user_id: Optional[int] = None
    slot_id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert patient to a dictionary of snake_case fields."""
        return asdict(self)

    @classmethod
    def from_row(cls, row: Sequence[Any]) -> 'Patient':
        """
        Create a Patient from a database row.

        Args:
            row: Values in PATIENT_COLUMNS order.

        Returns:
            Patient instance.
        """
        data = dict(zip(PATIENT_COLUMNS, row))
        # appointment_date is stored as TEXT (YYYY-MM-DD)
        data["appointment_date"] = parse_iso_date_safe(data["appointment_date"])
        return cls(**data)
