"""
Pydantic schemas for patient-related API operations.

Wire names are camelCase (``phoneNumber``, ``doctorUserId``); Python code uses
snake_case. Both spellings are accepted on input.
"""
from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_PATIENT_EXAMPLE = {
    "patientName": "Asha Verma",
    "age": 34,
    "gender": "Female",
    "phoneNumber": "9876543210",
    "email": "asha.verma@example.com",
    "address": "12 MG Road, Pune",
    "symptoms": "Recurring headache",
    "appointmentDate": "2025-01-15",
    "appointmentTime": "10:30",
    "doctorUserId": 7,
    "slotId": 101
}


class PatientBase(BaseModel):
    """Fields shared by patient requests and responses.

    Only types and required keys are enforced here. Value rules (ranges,
    lengths, time format) are checked by PatientService so that each
    endpoint reports them with its own status.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    patient_name: str = Field(..., description="Patient full name")
    age: Optional[int] = Field(None, description="Age in years (0-150)")
    gender: Optional[str] = None
    phone_number: str = Field(..., description="Contact phone number (5-20 characters)")
    email: Optional[str] = None
    address: Optional[str] = None
    symptoms: Optional[str] = Field(None, description="Reason for the visit")
    appointment_date: Optional[date] = Field(None, description="Appointment day (YYYY-MM-DD)")
    appointment_time: Optional[str] = Field(None, description="Appointment time of day (HH:MM)")
    doctor_user_id: Optional[int] = Field(None, description="User id of the treating doctor")
    slot_id: Optional[int] = Field(None, description="Booked appointment slot; unique per patient")


class PatientCreate(PatientBase):
    """Schema for creating or replacing a patient.

    Used as the body of both ``POST /post`` and ``PUT /{id}``.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={"example": _PATIENT_EXAMPLE},
    )


class PatientResponse(PatientBase):
    """Schema for patient response.

    Returns the stored patient including its id and creation timestamp.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        json_schema_extra={
            "example": {"id": 1, **_PATIENT_EXAMPLE, "createdAt": "2025-01-01T10:00:00Z"}
        },
    )

    id: int = Field(..., description="Unique patient identifier")
    created_at: str = Field(..., description="ISO format UTC timestamp when the patient was created")
