from datetime import date, datetime
from decimal import Decimal

from fastapi.testclient import TestClient

from clinic_api.in_memory_db import get_store
from clinic_api import main
from clinic_api.main import app, entity_label


def register(client, payload):
    response = client.post("/api/patients", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def check_in(client, patient_id, **extra):
    response = client.post("/api/visits", json={"patientId": patient_id, **extra})
    assert response.status_code == 201, response.text
    return response.json()


# ==========================================
# 1. PATIENT REGISTRATION
# ==========================================

def test_create_patient_returns_camel_case_record(client, patient_payload):
    data = register(client, patient_payload)
    assert data["id"] == 1
    assert data["firstName"] == "Priya"
    assert data["bloodGroup"] is None
    assert data["emergencyContact"] is None
    assert "createdAt" in data


def test_create_patient_invalid_shape(client):
    response = client.post("/api/patients", json={"firstName": "Priya"})
    assert response.status_code == 400
    assert response.json() == {"detail": "Invalid patient data"}


def test_search_patients(client, patient_payload):
    register(client, patient_payload)
    register(client, {**patient_payload, "firstName": "John", "lastName": "Doe", "phone": "5550001111"})

    response = client.get("/api/patients", params={"search": "sharma"})
    assert response.status_code == 200
    assert [p["firstName"] for p in response.json()] == ["Priya"]
    assert len(client.get("/api/patients").json()) == 2


def test_get_patient_with_visits(client, patient_payload):
    patient = register(client, patient_payload)
    check_in(client, patient["id"], status="completed")
    waiting = check_in(client, patient["id"])

    response = client.get(f"/api/patients/{patient['id']}")
    assert response.status_code == 200
    data = response.json()
    assert len(data["visits"]) == 2
    assert data["currentVisit"]["id"] == waiting["id"]


def test_patch_patient(client, patient_payload):
    patient = register(client, patient_payload)
    response = client.patch(f"/api/patients/{patient['id']}", json={"address": "12 MG Road"})
    assert response.status_code == 200
    assert response.json()["address"] == "12 MG Road"
    assert response.json()["firstName"] == "Priya"

    assert client.patch("/api/patients/99", json={"age": 40}).status_code == 404
    assert client.patch(f"/api/patients/{patient['id']}", json={"age": "old"}).status_code == 400


def test_delete_patient_keeps_visits(client, patient_payload):
    patient = register(client, patient_payload)
    check_in(client, patient["id"])

    assert client.delete(f"/api/patients/{patient['id']}").status_code == 204
    assert client.get(f"/api/patients/{patient['id']}").status_code == 404
    assert client.delete(f"/api/patients/{patient['id']}").status_code == 404
    assert len(client.get("/api/visits").json()) == 1


# ==========================================
# 2. VISITS & TOKENS
# ==========================================

def test_check_in_assigns_code_and_token(client, patient_payload):
    patient = register(client, patient_payload)
    first = check_in(client, patient["id"], chiefComplaint="Knee pain")
    second = check_in(client, patient["id"])

    today = date.today().strftime("%y%m%d")
    assert first["visitCode"] == f"V{today}001"
    assert second["visitCode"] == f"V{today}002"
    assert first["tokenNumber"] == "T-001"
    assert second["tokenNumber"] == "T-002"
    assert first["status"] == "waiting"
    assert first["chiefComplaint"] == "Knee pain"


def test_check_in_rejects_unknown_status(client):
    response = client.post("/api/visits", json={"patientId": 1, "status": "admitted"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid visit data"


def test_visit_by_code(client, patient_payload):
    patient = register(client, patient_payload)
    visit = check_in(client, patient["id"])

    response = client.get(f"/api/visits/code/{visit['visitCode']}")
    assert response.status_code == 200
    assert response.json()["id"] == visit["id"]
    assert client.get("/api/visits/code/V000000000").status_code == 404


def test_todays_visits_filter(client, patient_payload):
    patient = register(client, patient_payload)
    check_in(client, patient["id"])
    response = client.get("/api/visits", params={"today": "true"})
    assert response.status_code == 200
    assert len(response.json()) == 1


def test_today_filter_only_on_exact_true(client, store, patient_payload):
    patient = register(client, patient_payload)
    old = check_in(client, patient["id"])
    check_in(client, patient["id"])
    store._db["visits"][old["id"]] = store.get_visit(old["id"]).model_copy(
        update={"visit_date": datetime(2020, 1, 1, 9, 0)}
    )

    assert len(client.get("/api/visits", params={"today": "true"}).json()) == 1
    for value in ("yes please", "1", "false"):
        response = client.get("/api/visits", params={"today": value})
        assert response.status_code == 200
        assert len(response.json()) == 2


def test_visit_status_flow_updates_stats(client, patient_payload):
    patient = register(client, patient_payload)
    visit = check_in(client, patient["id"])
    check_in(client, patient["id"])

    stats = client.get("/api/stats/today").json()
    assert stats == {"totalPatients": 2, "completed": 0, "inProgress": 0, "pending": 2}

    client.patch(f"/api/visits/{visit['id']}", json={"status": "in_consultation"})
    assert client.get("/api/stats/today").json()["inProgress"] == 1

    response = client.patch(f"/api/visits/{visit['id']}", json={"status": "completed"})
    assert response.status_code == 200
    stats = client.get("/api/stats/today").json()
    assert stats["completed"] == 1
    assert stats["totalPatients"] == 2


def test_patch_missing_visit(client):
    assert client.patch("/api/visits/5", json={"status": "completed"}).status_code == 404


# ==========================================
# 3. CLINICAL RECORDS ON A VISIT
# ==========================================

def test_visit_details_aggregate_children(client, patient_payload):
    patient = register(client, patient_payload)
    visit = check_in(client, patient["id"])
    vid = visit["id"]

    consultation = client.post("/api/consultations", json={
        "visitId": vid, "provisionalDiagnosis": "Osteoarthritis knee",
        "investigationsAdvised": ["X-ray knee AP/lateral"], "followUpDate": "2030-01-15T10:00:00",
    })
    assert consultation.status_code == 201
    assert consultation.json()["currentMedications"] is None

    assert client.post("/api/prescriptions", json={
        "visitId": vid, "medicines": ["Paracetamol 500mg"], "dosage": ["1-0-1"],
    }).status_code == 201
    assert client.post("/api/diagnostics", json={
        "visitId": vid, "testType": "xray", "testName": "Knee AP",
    }).json()["status"] == "pending"
    assert client.post("/api/physio-sessions", json={
        "visitId": vid, "sessionType": "Quadriceps strengthening", "duration": 30,
    }).json()["status"] == "scheduled"
    payment = client.post("/api/payments", json={"visitId": vid, "amount": 500, "paymentMethod": "upi"})
    assert payment.status_code == 201
    assert payment.json()["paymentStatus"] == "pending"
    assert Decimal(payment.json()["amount"]) == Decimal("500")

    response = client.get(f"/api/visits/{vid}")
    assert response.status_code == 200
    details = response.json()
    assert details["patient"]["id"] == patient["id"]
    assert details["consultation"]["provisionalDiagnosis"] == "Osteoarthritis knee"
    assert len(details["consultations"]) == 1
    assert len(details["prescriptions"]) == 1
    assert len(details["diagnostics"]) == 1
    assert len(details["labTests"]) == 0
    assert len(details["physioSessions"]) == 1
    assert len(details["payments"]) == 1


def test_visit_details_missing_patient(client):
    visit = check_in(client, 42)
    assert client.get(f"/api/visits/{visit['id']}").status_code == 404
    assert client.get("/api/visits/999").status_code == 404


def test_list_children_by_visit(client):
    client.post("/api/lab-tests", json={"visitId": 1, "testName": "CBC"})
    client.post("/api/lab-tests", json={"visitId": 2, "testName": "ESR"})

    response = client.get("/api/visits/1/lab-tests")
    assert response.status_code == 200
    assert [t["testName"] for t in response.json()] == ["CBC"]
    assert client.get("/api/visits/7/payments").json() == []


def test_consultation_get_and_patch(client):
    created = client.post("/api/consultations", json={"visitId": 1}).json()

    response = client.patch(f"/api/consultations/{created['id']}", json={"advice": "Hot fomentation"})
    assert response.status_code == 200
    assert response.json()["advice"] == "Hot fomentation"
    assert client.get(f"/api/consultations/{created['id']}").json()["advice"] == "Hot fomentation"
    assert client.get("/api/consultations/99").status_code == 404
    assert client.patch("/api/consultations/99", json={"advice": "x"}).status_code == 404


def test_child_record_patch(client):
    lab_test = client.post("/api/lab-tests", json={"visitId": 1, "testName": "Vitamin D"}).json()
    response = client.patch(f"/api/lab-tests/{lab_test['id']}", json={"status": "reported", "results": "18 ng/mL"})
    assert response.status_code == 200
    assert response.json()["status"] == "reported"

    payment = client.post("/api/payments", json={"visitId": 1, "amount": "250.50", "paymentMethod": "cash"}).json()
    response = client.patch(f"/api/payments/{payment['id']}", json={"paymentStatus": "completed"})
    assert response.json()["paymentStatus"] == "completed"
    assert client.get("/api/payments/99").status_code == 404


def test_prescription_get_and_patch(client):
    created = client.post("/api/prescriptions", json={
        "visitId": 1, "medicines": ["Aceclofenac 100mg"], "instructions": "After food",
    }).json()

    response = client.patch(f"/api/prescriptions/{created['id']}", json={"prescribedBy": "Dr. Rao"})
    assert response.status_code == 200
    assert response.json()["prescribedBy"] == "Dr. Rao"
    assert response.json()["medicines"] == ["Aceclofenac 100mg"]
    assert client.get(f"/api/prescriptions/{created['id']}").json()["instructions"] == "After food"

    assert client.get("/api/prescriptions/99").status_code == 404
    assert client.patch("/api/prescriptions/99", json={"instructions": "x"}).status_code == 404
    response = client.patch(f"/api/prescriptions/{created['id']}", json={"medicines": "Aceclofenac"})
    assert response.status_code == 400
    assert response.json() == {"detail": "Invalid prescription data"}


def test_diagnostic_get_and_patch(client):
    created = client.post("/api/diagnostics", json={"visitId": 1, "testType": "mri", "testName": "Knee"}).json()

    response = client.patch(f"/api/diagnostics/{created['id']}", json={"status": "reported", "results": "ACL tear"})
    assert response.status_code == 200
    assert response.json()["status"] == "reported"
    assert response.json()["testName"] == "Knee"
    assert client.get(f"/api/diagnostics/{created['id']}").json()["results"] == "ACL tear"

    assert client.get("/api/diagnostics/99").status_code == 404
    assert client.patch("/api/diagnostics/99", json={"status": "completed"}).status_code == 404
    response = client.patch(f"/api/diagnostics/{created['id']}", json={"status": "lost"})
    assert response.status_code == 400
    assert response.json() == {"detail": "Invalid diagnostic data"}


def test_physio_session_get_and_patch(client):
    created = client.post("/api/physio-sessions", json={
        "visitId": 1, "sessionType": "Ultrasound therapy", "duration": 15,
    }).json()

    response = client.patch(f"/api/physio-sessions/{created['id']}", json={"status": "completed"})
    assert response.status_code == 200
    assert response.json()["status"] == "completed"
    assert response.json()["duration"] == 15
    assert client.get(f"/api/physio-sessions/{created['id']}").json()["sessionType"] == "Ultrasound therapy"

    assert client.get("/api/physio-sessions/99").status_code == 404
    assert client.patch("/api/physio-sessions/99", json={"status": "cancelled"}).status_code == 404
    response = client.patch(f"/api/physio-sessions/{created['id']}", json={"status": "postponed"})
    assert response.status_code == 400
    assert response.json() == {"detail": "Invalid physio session data"}


def test_child_record_can_move_to_another_visit(client):
    created = client.post("/api/lab-tests", json={"visitId": 1, "testName": "HbA1c"}).json()
    response = client.patch(f"/api/lab-tests/{created['id']}", json={"visitId": 2})
    assert response.status_code == 200
    assert response.json()["visitId"] == 2
    assert client.get("/api/visits/1/lab-tests").json() == []


def test_child_record_validation(client):
    response = client.post("/api/lab-tests", json={"visitId": 1, "testName": "CBC", "status": "lost"})
    assert response.status_code == 400
    assert response.json() == {"detail": "Invalid lab test data"}

    response = client.post("/api/payments", json={"visitId": 1, "amount": "12.345", "paymentMethod": "card"})
    assert response.status_code == 400
    assert response.json() == {"detail": "Invalid payment data"}


# ==========================================
# 4. ERROR BOUNDARY
# ==========================================

def test_unexpected_error_returns_generic_500(caplog):
    class BrokenStore:
        def get_todays_stats(self):
            raise RuntimeError("counter corrupted")

    app.dependency_overrides[get_store] = lambda: BrokenStore()
    try:
        client = TestClient(app, raise_server_exceptions=False)
        response = client.get("/api/stats/today")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}
    record = next(r for r in caplog.records if r.name == "clinic_api.main" and r.levelname == "ERROR")
    assert record.getMessage() == "Unhandled error on GET /api/stats/today"
    assert record.exc_info is not None


def test_entity_label():
    assert entity_label("/api/patients/3") == "patient"
    assert entity_label("/api/visits/3/physio-sessions") == "physio session"
    assert entity_label("/api/stats/today") == "request"


def test_malformed_path_id_is_not_found(client):
    assert client.get("/api/patients/abc").json() == {"detail": "Patient not found"}
    assert client.get("/api/patients/abc").status_code == 404
    assert client.patch("/api/visits/abc", json={"status": "completed"}).status_code == 404
    assert client.get("/api/lab-tests/abc").json() == {"detail": "Lab test not found"}
    # A bad body on a malformed id is still a validation failure.
    assert client.patch("/api/visits/abc", json={"status": "admitted"}).status_code == 400


def test_startup_configures_logging(monkeypatch):
    calls = []
    monkeypatch.setattr(main.config, "configure_logging", lambda *args: calls.append(args))
    monkeypatch.setattr(main.config, "SEED_DEMO", False)

    with TestClient(app) as client:
        assert client.get("/").status_code == 200
    assert calls == [()]
