# clinic_api/schemas.py
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Literal, Optional
from datetime import datetime
from decimal import Decimal

# --- STATUS VOCABULARIES ---

VisitStatus = Literal["waiting", "in_consultation", "completed", "cancelled"]
TestStatus = Literal["pending", "completed", "reported"]
PhysioStatus = Literal["scheduled", "completed", "cancelled"]
PaymentStatus = Literal["pending", "completed", "failed"]

OPEN_VISIT_STATUSES = ("waiting", "in_consultation")


class CamelModel(BaseModel):
    """Base for every schema: snake_case in Python, camelCase on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- PATIENT ---

class PatientCreate(CamelModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    age: int = Field(..., ge=0, le=150)
    gender: str = Field(..., min_length=1)
    blood_group: Optional[str] = None
    phone: str = Field(..., min_length=1)
    address: Optional[str] = None
    emergency_contact: Optional[str] = None

    model_config = ConfigDict(json_schema_extra={"example": {
        "firstName": "Priya", "lastName": "Sharma", "age": 34, "gender": "female",
        "bloodGroup": "B+", "phone": "9876543210",
    }})


class PatientUpdate(CamelModel):
    first_name: Optional[str] = Field(default=None, min_length=1)
    last_name: Optional[str] = Field(default=None, min_length=1)
    age: Optional[int] = Field(default=None, ge=0, le=150)
    gender: Optional[str] = Field(default=None, min_length=1)
    blood_group: Optional[str] = None
    phone: Optional[str] = Field(default=None, min_length=1)
    address: Optional[str] = None
    emergency_contact: Optional[str] = None


class Patient(PatientCreate):
    id: int
    created_at: datetime


# --- VISIT ---

class VisitCreate(CamelModel):
    patient_id: int
    status: Optional[VisitStatus] = None
    chief_complaint: Optional[str] = None
    notes: Optional[str] = None

    model_config = ConfigDict(json_schema_extra={"example": {
        "patientId": 1, "chiefComplaint": "Knee pain for two weeks",
    }})


class VisitUpdate(CamelModel):
    patient_id: Optional[int] = None
    status: Optional[VisitStatus] = None
    chief_complaint: Optional[str] = None
    notes: Optional[str] = None


class Visit(CamelModel):
    id: int
    patient_id: int
    visit_code: str
    token_number: str
    status: VisitStatus
    visit_date: datetime
    chief_complaint: Optional[str] = None
    notes: Optional[str] = None


# --- CONSULTATION ---

class ConsultationUpdate(CamelModel):
    visit_id: Optional[int] = None
    chief_complaint: Optional[str] = None
    history_of_present_illness: Optional[str] = None
    past_medical_history: Optional[str] = None
    family_history: Optional[str] = None
    social_history: Optional[str] = None
    allergies: Optional[str] = None
    current_medications: Optional[List[str]] = None
    vital_signs: Optional[str] = None  # JSON text: BP, pulse, temperature...
    general_examination: Optional[str] = None
    systemic_examination: Optional[str] = None
    clinical_findings: Optional[str] = None
    provisional_diagnosis: Optional[str] = None
    differential_diagnosis: Optional[str] = None
    investigations_advised: Optional[List[str]] = None
    treatment_plan: Optional[str] = None
    advice: Optional[str] = None
    follow_up_date: Optional[datetime] = None
    follow_up_instructions: Optional[str] = None
    critical_notes: Optional[str] = None
    doctor_name: Optional[str] = None


class ConsultationCreate(ConsultationUpdate):
    visit_id: int


class Consultation(ConsultationCreate):
    id: int
    consultation_date: datetime
    created_at: datetime


# --- PRESCRIPTION ---

class PrescriptionUpdate(CamelModel):
    visit_id: Optional[int] = None
    medicines: Optional[List[str]] = None
    dosage: Optional[List[str]] = None
    instructions: Optional[str] = None
    prescribed_by: Optional[str] = None


class PrescriptionCreate(PrescriptionUpdate):
    visit_id: int


class Prescription(PrescriptionCreate):
    id: int
    created_at: datetime


# --- DIAGNOSTIC (imaging) ---

class DiagnosticCreate(CamelModel):
    visit_id: int
    test_type: str = Field(..., min_length=1)  # xray, mri, ct_scan...
    test_name: str = Field(..., min_length=1)
    results: Optional[str] = None
    report_url: Optional[str] = None
    status: Optional[TestStatus] = None
    ordered_by: Optional[str] = None


class DiagnosticUpdate(CamelModel):
    visit_id: Optional[int] = None
    test_type: Optional[str] = Field(default=None, min_length=1)
    test_name: Optional[str] = Field(default=None, min_length=1)
    results: Optional[str] = None
    report_url: Optional[str] = None
    status: Optional[TestStatus] = None
    ordered_by: Optional[str] = None


class Diagnostic(DiagnosticCreate):
    id: int
    status: TestStatus
    created_at: datetime


# --- LAB TEST ---

class LabTestCreate(CamelModel):
    visit_id: int
    test_name: str = Field(..., min_length=1)
    test_category: Optional[str] = None
    results: Optional[str] = None
    normal_range: Optional[str] = None
    status: Optional[TestStatus] = None
    ordered_by: Optional[str] = None


class LabTestUpdate(CamelModel):
    visit_id: Optional[int] = None
    test_name: Optional[str] = Field(default=None, min_length=1)
    test_category: Optional[str] = None
    results: Optional[str] = None
    normal_range: Optional[str] = None
    status: Optional[TestStatus] = None
    ordered_by: Optional[str] = None


class LabTest(LabTestCreate):
    id: int
    status: TestStatus
    created_at: datetime


# --- PHYSIOTHERAPY ---

class PhysioSessionCreate(CamelModel):
    visit_id: int
    session_type: str = Field(..., min_length=1)
    duration: Optional[int] = Field(default=None, ge=0, description="Minutes")
    exercises: Optional[List[str]] = None
    notes: Optional[str] = None
    therapist_name: Optional[str] = None
    status: Optional[PhysioStatus] = None
    session_date: Optional[datetime] = None


class PhysioSessionUpdate(CamelModel):
    visit_id: Optional[int] = None
    session_type: Optional[str] = Field(default=None, min_length=1)
    duration: Optional[int] = Field(default=None, ge=0)
    exercises: Optional[List[str]] = None
    notes: Optional[str] = None
    therapist_name: Optional[str] = None
    status: Optional[PhysioStatus] = None
    session_date: Optional[datetime] = None


class PhysioSession(PhysioSessionCreate):
    id: int
    status: PhysioStatus
    created_at: datetime


# --- PAYMENT ---

class PaymentCreate(CamelModel):
    visit_id: int
    amount: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    payment_method: str = Field(..., min_length=1)  # cash, card, upi
    payment_status: Optional[PaymentStatus] = None
    bill_items: Optional[List[str]] = None


class PaymentUpdate(CamelModel):
    visit_id: Optional[int] = None
    amount: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    payment_method: Optional[str] = Field(default=None, min_length=1)
    payment_status: Optional[PaymentStatus] = None
    bill_items: Optional[List[str]] = None


class Payment(PaymentCreate):
    id: int
    payment_status: PaymentStatus
    created_at: datetime


# --- COMPOSITE VIEWS ---

class PatientWithVisits(Patient):
    visits: List[Visit]
    current_visit: Optional[Visit] = None


class VisitWithDetails(Visit):
    patient: Patient
    consultation: Optional[Consultation] = None
    consultations: List[Consultation]
    prescriptions: List[Prescription]
    diagnostics: List[Diagnostic]
    lab_tests: List[LabTest]
    physio_sessions: List[PhysioSession]
    payments: List[Payment]


class TodayStats(CamelModel):
    total_patients: int
    completed: int
    in_progress: int
    pending: int
