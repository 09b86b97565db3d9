"""
Patients router - patient registration and lookup endpoints.

Architecture:
    HTTP Request → Router (this file) → PatientService → PatientRepository → Database

Each endpoint calls exactly one service method and maps the outcome to a
status code. The failure mapping differs per operation and is part of the
public contract:

    create          any error → 500
    get / update    any error → 404
    delete          any error → 500
    search by phone empty     → 404
    slot lookup     absent    → 404 with an empty body
    doctor lookup   empty     → 404
    doctor + date   empty → 404, bad date (or any other error) → 400

Dependency Injection:
    Services are injected via FastAPI's Depends() mechanism.
    The DI chain is defined in core/dependencies.py.
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, Query, Response, status

from schemas import ErrorResponse, PatientCreate, PatientResponse
from services import PatientService
from core.datetime_utils import parse_iso_date
from core.dependencies import get_patient_service
from core.exceptions import error_response

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/patients",
    tags=["Patient Management"],
)

_ERROR_CONTENT = {"model": ErrorResponse}


# =============================================================================
# CRUD
# =============================================================================

@router.post(
    "/post",
    response_model=PatientResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new patient",
    description="Creates and saves a new patient record.",
    responses={500: {**_ERROR_CONTENT, "description": "Internal server error"}},
)
def create_patient(
    patient: PatientCreate,
    patient_service: PatientService = Depends(get_patient_service)
):
    try:
        return patient_service.save(patient)
    except Exception as e:
        logger.error(f"Error creating patient: {e}")
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Failed to create patient",
            str(e),
        )


@router.get(
    "/",
    response_model=List[PatientResponse],
    summary="Get all patients",
    description="Retrieves a list of all patients.",
)
@router.get("", response_model=List[PatientResponse], include_in_schema=False)
def list_patients(patient_service: PatientService = Depends(get_patient_service)):
    return patient_service.get_all()


# Declared before /{patient_id} so "search1" is not captured as an id
@router.get(
    "/search1",
    response_model=List[PatientResponse],
    summary="Get patients by phone number",
    description="Retrieves patients using their phone number.",
    responses={404: {**_ERROR_CONTENT, "description": "No patients found"}},
)
def search_by_phone_number(
    phone_number: str = Query(..., alias="phoneNumber", description="Patient phone number"),
    patient_service: PatientService = Depends(get_patient_service)
):
    patients = patient_service.get_by_phone_number(phone_number)
    if not patients:
        return error_response(
            status.HTTP_404_NOT_FOUND,
            "No patients found with this mobile number",
        )
    return patients


@router.get(
    "/{patient_id}",
    response_model=PatientResponse,
    summary="Get a patient by ID",
    description="Retrieves a patient using their ID.",
    responses={404: {**_ERROR_CONTENT, "description": "Patient not found"}},
)
def get_patient(
    patient_id: int,
    patient_service: PatientService = Depends(get_patient_service)
):
    try:
        return patient_service.get_by_id(patient_id)
    except Exception as e:
        logger.error(f"Patient with ID {patient_id} not found: {e}")
        return error_response(status.HTTP_404_NOT_FOUND, "Patient not found", str(e))


@router.put(
    "/{patient_id}",
    response_model=PatientResponse,
    summary="Update a patient",
    description="Updates an existing patient record.",
    responses={404: {**_ERROR_CONTENT, "description": "Patient not found"}},
)
def update_patient(
    patient_id: int,
    patient: PatientCreate,
    patient_service: PatientService = Depends(get_patient_service)
):
    # Validation and conflict errors are reported as 404 as well
    try:
        return patient_service.update(patient_id, patient)
    except Exception as e:
        logger.error(f"Error updating patient with ID {patient_id}: {e}")
        return error_response(status.HTTP_404_NOT_FOUND, "Failed to update patient", str(e))


@router.delete(
    "/{patient_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a patient",
    description="Deletes a patient using their ID.",
    responses={500: {**_ERROR_CONTENT, "description": "Internal server error"}},
)
def delete_patient(
    patient_id: int,
    patient_service: PatientService = Depends(get_patient_service)
):
    # Unknown ids are reported as 500, not 404
    try:
        patient_service.delete(patient_id)
    except Exception as e:
        logger.error(f"Error deleting patient with ID {patient_id}: {e}")
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Failed to delete patient",
            str(e),
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# QUERIES
# =============================================================================

@router.get(
    "/slot/{slot_id}",
    response_model=PatientResponse,
    summary="Get patient by slot ID",
    description="Retrieves a patient using their slot ID.",
    responses={404: {"description": "Patient not found (empty body)"}},
)
def get_patient_by_slot(
    slot_id: int,
    patient_service: PatientService = Depends(get_patient_service)
):
    patient = patient_service.get_by_slot_id(slot_id)
    if patient is None:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return patient


@router.get(
    "/doctor/{user_id}",
    response_model=List[PatientResponse],
    summary="Get patients by doctor ID",
    description="Retrieves patients associated with a doctor by their user ID.",
    responses={404: {**_ERROR_CONTENT, "description": "No patients found"}},
)
def get_patients_by_doctor(
    user_id: int,
    patient_service: PatientService = Depends(get_patient_service)
):
    patients = patient_service.get_by_doctor_user_id(user_id)
    if not patients:
        return error_response(status.HTTP_404_NOT_FOUND, "No patients found for this doctor")
    return patients


@router.get(
    "/doctor/{user_id}/date/{appointment_date}",
    response_model=List[PatientResponse],
    summary="Get patients by doctor ID and date",
    description="Retrieves patients associated with a doctor by their user ID "
                "and appointment date (YYYY-MM-DD).",
    responses={
        400: {**_ERROR_CONTENT, "description": "Invalid date format"},
        404: {**_ERROR_CONTENT, "description": "No patients found"},
    },
)
def get_patients_by_doctor_and_date(
    user_id: int,
    appointment_date: str,
    patient_service: PatientService = Depends(get_patient_service)
):
    # Every failure in this block, service errors included, is reported as 400
    try:
        parsed_date = parse_iso_date(appointment_date)
        patients = patient_service.get_by_doctor_user_id_and_date(user_id, parsed_date)

        if not patients:
            return error_response(
                status.HTTP_404_NOT_FOUND,
                "No patients found for this doctor on this date",
            )
        return patients
    except Exception as e:
        logger.error(f"Error parsing date {appointment_date}: {e}")
        return error_response(status.HTTP_400_BAD_REQUEST, "Invalid date format", str(e))
