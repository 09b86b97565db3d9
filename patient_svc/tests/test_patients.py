"""
Tests for patient endpoints backed by a real service and database.
"""
BASE = "/api/patients"


def _assert_error_body(response, status_code):
    body = response.json()
    assert body["statusCode"] == status_code
    assert body["timestamp"]
    assert "message" in body
    assert "detail" in body
    return body


# =============================================================================
# CREATE
# =============================================================================

def test_create_patient_success(client, patient_payload):
    """Test successful patient creation returns 201 with an id."""
    response = client.post(f"{BASE}/post", json=patient_payload())
    assert response.status_code == 201
    data = response.json()
    assert isinstance(data["id"], int)
    assert data["patientName"] == "Asha Verma"
    assert data["phoneNumber"] == "9876543210"
    assert data["appointmentDate"] == "2024-02-15"
    assert data["doctorUserId"] == 7
    assert data["slotId"] == 101
    assert data["createdAt"].endswith("Z")


def test_create_patient_minimal_payload(client):
    """Only name and phone number are required."""
    response = client.post(
        f"{BASE}/post",
        json={"patientName": "Ravi Kumar", "phoneNumber": "9000000001"}
    )
    assert response.status_code == 201
    data = response.json()
    assert data["slotId"] is None
    assert data["appointmentDate"] is None


def test_create_patient_duplicate_slot_returns_500(client, patient_payload):
    """A service failure on create is reported as a server fault."""
    assert client.post(f"{BASE}/post", json=patient_payload()).status_code == 201

    response = client.post(
        f"{BASE}/post",
        json=patient_payload(patientName="Someone Else", phoneNumber="9111111111")
    )
    assert response.status_code == 500
    body = _assert_error_body(response, 500)
    assert body["message"] == "Failed to create patient"
    assert "already booked" in body["detail"]


def test_create_patient_time_without_date_returns_500(client, patient_payload):
    """Business-rule violations on create are also 500."""
    response = client.post(
        f"{BASE}/post",
        json=patient_payload(appointmentDate=None)
    )
    assert response.status_code == 500
    assert "appointmentTime requires appointmentDate" in response.json()["detail"]


def test_create_patient_malformed_body_returns_400(client):
    """Payloads that cannot be bound are rejected before the handler runs."""
    response = client.post(f"{BASE}/post", json={"patientName": ""})
    assert response.status_code == 400
    body = _assert_error_body(response, 400)
    assert body["message"] == "Invalid request"


def test_create_patient_out_of_range_field_returns_500(client, patient_payload):
    """Field rules are enforced by the service, so create reports them as 500."""
    response = client.post(f"{BASE}/post", json=patient_payload(age=-1))
    assert response.status_code == 500
    body = _assert_error_body(response, 500)
    assert body["message"] == "Failed to create patient"
    assert body["detail"] == "age must be between 0 and 150"


def test_create_patient_blank_name_returns_500(client, patient_payload):
    response = client.post(f"{BASE}/post", json=patient_payload(patientName="   "))
    assert response.status_code == 500
    assert response.json()["detail"] == "patientName must not be blank"


def test_create_patient_wrong_json_type_returns_400(client, patient_payload):
    """A value of the wrong JSON type cannot be bound at all."""
    response = client.post(f"{BASE}/post", json=patient_payload(age="old"))
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid request"


# =============================================================================
# LIST / GET
# =============================================================================

def test_list_patients_empty(client):
    """Test listing patients when the database is empty."""
    response = client.get(f"{BASE}/")
    assert response.status_code == 200
    assert response.json() == []


def test_list_patients_without_trailing_slash(client, patient_payload):
    client.post(f"{BASE}/post", json=patient_payload())
    response = client.get(BASE)
    assert response.status_code == 200
    assert len(response.json()) == 1


def test_list_patients_ordered_by_id(client, patient_payload):
    ids = []
    for i, name in enumerate(["Zoya", "Arjun", "Meera"]):
        created = client.post(
            f"{BASE}/post",
            json=patient_payload(patientName=name, slotId=200 + i)
        ).json()
        ids.append(created["id"])

    patients = client.get(f"{BASE}/").json()
    assert [p["id"] for p in patients] == ids
    assert [p["patientName"] for p in patients] == ["Zoya", "Arjun", "Meera"]


def test_get_patient_by_id(client, patient_payload):
    created = client.post(f"{BASE}/post", json=patient_payload()).json()

    response = client.get(f"{BASE}/{created['id']}")
    assert response.status_code == 200
    assert response.json() == created


def test_get_unknown_patient_returns_404(client):
    response = client.get(f"{BASE}/999")
    assert response.status_code == 404
    body = _assert_error_body(response, 404)
    assert body["message"] == "Patient not found"
    assert "999" in body["detail"]


def test_get_patient_non_numeric_id_returns_400(client):
    response = client.get(f"{BASE}/abc")
    assert response.status_code == 400
    _assert_error_body(response, 400)


# =============================================================================
# UPDATE
# =============================================================================

def test_update_patient(client, patient_payload):
    created = client.post(f"{BASE}/post", json=patient_payload()).json()

    response = client.put(
        f"{BASE}/{created['id']}",
        json=patient_payload(phoneNumber="9123456780", symptoms="Follow-up")
    )
    assert response.status_code == 200
    data = response.json()
    assert data["id"] == created["id"]
    assert data["phoneNumber"] == "9123456780"
    assert data["symptoms"] == "Follow-up"
    assert data["createdAt"] == created["createdAt"]


def test_update_unknown_patient_returns_404(client, patient_payload):
    response = client.put(f"{BASE}/424242", json=patient_payload())
    assert response.status_code == 404
    body = _assert_error_body(response, 404)
    assert body["message"] == "Failed to update patient"


def test_update_slot_conflict_returns_404(client, patient_payload):
    """Conflicts on update are reported with the same 404 as missing ids."""
    client.post(f"{BASE}/post", json=patient_payload(slotId=1))
    second = client.post(
        f"{BASE}/post",
        json=patient_payload(patientName="Second", slotId=2)
    ).json()

    response = client.put(
        f"{BASE}/{second['id']}",
        json=patient_payload(patientName="Second", slotId=1)
    )
    assert response.status_code == 404
    assert "already booked" in response.json()["detail"]


def test_update_out_of_range_field_returns_404(client, patient_payload):
    """Invalid field values on update share the 404 used for missing ids."""
    created = client.post(f"{BASE}/post", json=patient_payload()).json()

    response = client.put(f"{BASE}/{created['id']}", json=patient_payload(age=200))
    assert response.status_code == 404
    body = _assert_error_body(response, 404)
    assert body["message"] == "Failed to update patient"
    assert body["detail"] == "age must be between 0 and 150"

    assert client.get(f"{BASE}/{created['id']}").json()["age"] == 34


def test_update_short_phone_number_returns_404(client, patient_payload):
    response = client.put(f"{BASE}/999", json=patient_payload(phoneNumber="12"))
    assert response.status_code == 404
    assert response.json()["detail"] == "phoneNumber must be between 5 and 20 characters"


# =============================================================================
# DELETE
# =============================================================================

def test_delete_patient(client, patient_payload):
    created = client.post(f"{BASE}/post", json=patient_payload()).json()

    response = client.delete(f"{BASE}/{created['id']}")
    assert response.status_code == 204
    assert response.content == b""

    assert client.get(f"{BASE}/{created['id']}").status_code == 404


def test_delete_unknown_patient_returns_500(client):
    """Deleting a missing patient is a server fault, never 404."""
    response = client.delete(f"{BASE}/31337")
    assert response.status_code == 500
    body = _assert_error_body(response, 500)
    assert body["message"] == "Failed to delete patient"


# =============================================================================
# SEARCH BY PHONE
# =============================================================================

def test_search_by_phone_returns_matches(client, patient_payload):
    first = client.post(f"{BASE}/post", json=patient_payload(slotId=11)).json()
    second = client.post(
        f"{BASE}/post",
        json=patient_payload(patientName="Family Member", slotId=12)
    ).json()
    client.post(
        f"{BASE}/post",
        json=patient_payload(patientName="Other", phoneNumber="9222222222", slotId=13)
    )

    response = client.get(f"{BASE}/search1", params={"phoneNumber": "9876543210"})
    assert response.status_code == 200
    assert response.json() == [first, second]


def test_search_by_phone_no_matches_returns_404(client):
    response = client.get(f"{BASE}/search1", params={"phoneNumber": "0000000"})
    assert response.status_code == 404
    body = _assert_error_body(response, 404)
    assert body["message"] == "No patients found with this mobile number"
    assert body["detail"] == ""


def test_search_by_phone_missing_param_returns_400(client):
    response = client.get(f"{BASE}/search1")
    assert response.status_code == 400
    assert "phoneNumber" in response.json()["detail"]


# =============================================================================
# SLOT LOOKUP
# =============================================================================

def test_get_patient_by_slot(client, patient_payload):
    created = client.post(f"{BASE}/post", json=patient_payload(slotId=55)).json()

    response = client.get(f"{BASE}/slot/55")
    assert response.status_code == 200
    assert response.json() == created


def test_get_patient_by_free_slot_returns_empty_404(client):
    """A free slot yields 404 with no body at all."""
    response = client.get(f"{BASE}/slot/77")
    assert response.status_code == 404
    assert response.content == b""


# =============================================================================
# DOCTOR LOOKUPS
# =============================================================================

def test_get_patients_by_doctor(client, patient_payload):
    client.post(f"{BASE}/post", json=patient_payload(slotId=1, doctorUserId=3))
    client.post(f"{BASE}/post", json=patient_payload(slotId=2, doctorUserId=3, patientName="B"))
    client.post(f"{BASE}/post", json=patient_payload(slotId=3, doctorUserId=4, patientName="C"))

    response = client.get(f"{BASE}/doctor/3")
    assert response.status_code == 200
    patients = response.json()
    assert len(patients) == 2
    assert all(p["doctorUserId"] == 3 for p in patients)


def test_get_patients_by_doctor_none_returns_404(client):
    response = client.get(f"{BASE}/doctor/99")
    assert response.status_code == 404
    body = _assert_error_body(response, 404)
    assert body["message"] == "No patients found for this doctor"


def test_get_patients_by_doctor_and_date(client, patient_payload):
    client.post(f"{BASE}/post", json=patient_payload(slotId=1, appointmentTime="11:00", patientName="Late"))
    client.post(f"{BASE}/post", json=patient_payload(slotId=2, appointmentTime="09:00", patientName="Early"))
    client.post(f"{BASE}/post", json=patient_payload(slotId=3, appointmentDate="2024-02-16", patientName="Tomorrow"))

    response = client.get(f"{BASE}/doctor/7/date/2024-02-15")
    assert response.status_code == 200
    assert [p["patientName"] for p in response.json()] == ["Early", "Late"]


def test_get_patients_by_doctor_and_date_trims_whitespace(client, patient_payload):
    client.post(f"{BASE}/post", json=patient_payload())

    response = client.get(f"{BASE}/doctor/7/date/%202024-02-15%20")
    assert response.status_code == 200
    assert len(response.json()) == 1


def test_get_patients_by_doctor_and_date_no_matches_returns_404(client):
    response = client.get(f"{BASE}/doctor/7/date/2024-02-15")
    assert response.status_code == 404
    body = _assert_error_body(response, 404)
    assert body["message"] == "No patients found for this doctor on this date"


def test_get_patients_by_doctor_and_impossible_date_returns_400(client):
    response = client.get(f"{BASE}/doctor/7/date/2024-02-30")
    assert response.status_code == 400
    body = _assert_error_body(response, 400)
    assert body["message"] == "Invalid date format"


def test_get_patients_by_doctor_and_non_iso_date_returns_400(client):
    for bad in ("15-02-2024", "2024-2-15", "20240215", "tomorrow"):
        response = client.get(f"{BASE}/doctor/7/date/{bad}")
        assert response.status_code == 400, bad
        assert response.json()["statusCode"] == 400

