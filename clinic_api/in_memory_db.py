# clinic_api/in_memory_db.py
import logging
import threading
from datetime import datetime, timedelta
from functools import wraps
from typing import Callable, Dict, List, Optional

from pydantic import BaseModel

from . import schemas

logger = logging.getLogger(__name__)

TABLES = ("patients", "visits", "consultations", "prescriptions",
          "diagnostics", "lab_tests", "physio_sessions", "payments")


def synchronized(method):
    """Runs a store method under the store lock."""
    @wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)
    return wrapper


def blank_to_none(data: dict) -> dict:
    """Empty strings and empty lists are stored as None."""
    return {
        key: (None if isinstance(value, (str, list)) and not value else value)
        for key, value in data.items()
    }


class ClinicStore:
    """
    In-memory clinical record store.

    Every collection is a dict keyed by id; dicts keep insertion order, so
    listing a table returns records in the order they were created. Missing
    records come back as None, and parent ids are never checked on write.
    All public methods hold one re-entrant lock, since FastAPI runs sync
    endpoints in a thread pool.
    """

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        self._clock = clock
        self._lock = threading.RLock()
        self.reset()

    @synchronized
    def reset(self):
        """Empties every table and restarts every counter."""
        self._db: Dict[str, Dict[int, BaseModel]] = {name: {} for name in TABLES}
        self._counters: Dict[str, int] = {name: 0 for name in TABLES}
        self._counters["token"] = 0

    # --- generic helpers ---

    def _next_id(self, name: str) -> int:
        self._counters[name] += 1
        return self._counters[name]

    def _insert(self, table: str, record_cls, data: dict, **generated):
        record_id = self._next_id(table)
        record = record_cls(id=record_id, **blank_to_none(data), **generated)
        self._db[table][record_id] = record
        logger.debug("Created %s #%s", table, record_id)
        return record

    def _update(self, table: str, record_id: int, patch: BaseModel):
        record = self._db[table].get(record_id)
        if record is None:
            return None
        # None means "unchanged"; an empty string or list clears the field.
        changes = blank_to_none(patch.model_dump(exclude_none=True))
        updated = record.model_copy(update=changes)
        self._db[table][record_id] = updated
        logger.debug("Updated %s #%s fields=%s", table, record_id, sorted(changes))
        return updated

    def _by_visit(self, table: str, visit_id: int) -> list:
        return [r for r in self._db[table].values() if r.visit_id == visit_id]

    # --- patients ---

    @synchronized
    def get_all_patients(self) -> List[schemas.Patient]:
        return list(self._db["patients"].values())

    @synchronized
    def get_patient(self, patient_id: int) -> Optional[schemas.Patient]:
        return self._db["patients"].get(patient_id)

    @synchronized
    def get_patient_with_visits(self, patient_id: int) -> Optional[schemas.PatientWithVisits]:
        patient = self._db["patients"].get(patient_id)
        if patient is None:
            return None
        visits = [v for v in self._db["visits"].values() if v.patient_id == patient_id]
        # First open visit in insertion order, no priority between statuses.
        current_visit = next(
            (v for v in visits if v.status in schemas.OPEN_VISIT_STATUSES), None
        )
        return schemas.PatientWithVisits(
            **patient.model_dump(), visits=visits, current_visit=current_visit
        )

    @synchronized
    def search_patients(self, query: str) -> List[schemas.Patient]:
        lower_query = query.lower()
        return [
            p for p in self._db["patients"].values()
            if lower_query in p.first_name.lower()
            or lower_query in p.last_name.lower()
            or query in p.phone
        ]

    @synchronized
    def create_patient(self, patient: schemas.PatientCreate) -> schemas.Patient:
        record = self._insert("patients", schemas.Patient, patient.model_dump(),
                              created_at=self._clock())
        logger.info("Registered patient #%s", record.id)
        return record

    @synchronized
    def update_patient(self, patient_id: int, patch: schemas.PatientUpdate) -> Optional[schemas.Patient]:
        return self._update("patients", patient_id, patch)

    @synchronized
    def delete_patient(self, patient_id: int) -> bool:
        # Visits are kept; no cascade.
        existed = self._db["patients"].pop(patient_id, None) is not None
        if existed:
            logger.info("Deleted patient #%s", patient_id)
        return existed

    # --- visits ---

    @synchronized
    def get_all_visits(self) -> List[schemas.Visit]:
        return list(self._db["visits"].values())

    @synchronized
    def get_visit(self, visit_id: int) -> Optional[schemas.Visit]:
        return self._db["visits"].get(visit_id)

    @synchronized
    def get_visit_with_details(self, visit_id: int) -> Optional[schemas.VisitWithDetails]:
        visit = self._db["visits"].get(visit_id)
        if visit is None:
            return None
        patient = self._db["patients"].get(visit.patient_id)
        if patient is None:
            return None
        consultations = self._by_visit("consultations", visit_id)
        return schemas.VisitWithDetails(
            **visit.model_dump(),
            patient=patient,
            consultation=consultations[0] if consultations else None,
            consultations=consultations,
            prescriptions=self._by_visit("prescriptions", visit_id),
            diagnostics=self._by_visit("diagnostics", visit_id),
            lab_tests=self._by_visit("lab_tests", visit_id),
            physio_sessions=self._by_visit("physio_sessions", visit_id),
            payments=self._by_visit("payments", visit_id),
        )

    @synchronized
    def get_visit_by_code(self, visit_code: str) -> Optional[schemas.Visit]:
        return next((v for v in self._db["visits"].values() if v.visit_code == visit_code), None)

    @synchronized
    def get_todays_visits(self) -> List[schemas.Visit]:
        today = self._clock().replace(hour=0, minute=0, second=0, microsecond=0)
        tomorrow = today + timedelta(days=1)
        return [v for v in self._db["visits"].values() if today <= v.visit_date < tomorrow]

    @synchronized
    def create_visit(self, visit: schemas.VisitCreate) -> schemas.Visit:
        # One clock read, so the code's date and visit_date never disagree.
        now = self._clock()
        # The code embeds the id this visit is about to receive.
        visit_code = self.generate_visit_code(now)
        token_number = self.generate_token_number()
        data = visit.model_dump()
        data["status"] = data["status"] or "waiting"
        record = self._insert("visits", schemas.Visit, data,
                              visit_code=visit_code, token_number=token_number,
                              visit_date=now)
        logger.info("Checked in visit %s (token %s) for patient #%s",
                    record.visit_code, record.token_number, record.patient_id)
        return record

    @synchronized
    def update_visit(self, visit_id: int, patch: schemas.VisitUpdate) -> Optional[schemas.Visit]:
        # Status transitions are not enforced here.
        return self._update("visits", visit_id, patch)

    @synchronized
    def generate_visit_code(self, when: Optional[datetime] = None) -> str:
        date_part = (when or self._clock()).strftime("%y%m%d")
        return f"V{date_part}{self._counters['visits'] + 1:03d}"

    @synchronized
    def generate_token_number(self) -> str:
        return f"T-{self._next_id('token'):03d}"

    # --- consultations ---

    @synchronized
    def create_consultation(self, consultation: schemas.ConsultationCreate) -> schemas.Consultation:
        now = self._clock()
        return self._insert("consultations", schemas.Consultation, consultation.model_dump(),
                            consultation_date=now, created_at=now)

    @synchronized
    def get_consultation(self, consultation_id: int) -> Optional[schemas.Consultation]:
        return self._db["consultations"].get(consultation_id)

    @synchronized
    def get_consultations_by_visit(self, visit_id: int) -> List[schemas.Consultation]:
        return self._by_visit("consultations", visit_id)

    @synchronized
    def update_consultation(self, consultation_id: int, patch: schemas.ConsultationUpdate):
        return self._update("consultations", consultation_id, patch)

    # --- prescriptions ---

    @synchronized
    def create_prescription(self, prescription: schemas.PrescriptionCreate) -> schemas.Prescription:
        return self._insert("prescriptions", schemas.Prescription, prescription.model_dump(),
                            created_at=self._clock())

    @synchronized
    def get_prescription(self, prescription_id: int) -> Optional[schemas.Prescription]:
        return self._db["prescriptions"].get(prescription_id)

    @synchronized
    def get_prescriptions_by_visit(self, visit_id: int) -> List[schemas.Prescription]:
        return self._by_visit("prescriptions", visit_id)

    @synchronized
    def update_prescription(self, prescription_id: int, patch: schemas.PrescriptionUpdate):
        return self._update("prescriptions", prescription_id, patch)

    # --- diagnostics ---

    @synchronized
    def create_diagnostic(self, diagnostic: schemas.DiagnosticCreate) -> schemas.Diagnostic:
        data = diagnostic.model_dump()
        data["status"] = data["status"] or "pending"
        return self._insert("diagnostics", schemas.Diagnostic, data, created_at=self._clock())

    @synchronized
    def get_diagnostic(self, diagnostic_id: int) -> Optional[schemas.Diagnostic]:
        return self._db["diagnostics"].get(diagnostic_id)

    @synchronized
    def get_diagnostics_by_visit(self, visit_id: int) -> List[schemas.Diagnostic]:
        return self._by_visit("diagnostics", visit_id)

    @synchronized
    def update_diagnostic(self, diagnostic_id: int, patch: schemas.DiagnosticUpdate):
        return self._update("diagnostics", diagnostic_id, patch)

    # --- lab tests ---

    @synchronized
    def create_lab_test(self, lab_test: schemas.LabTestCreate) -> schemas.LabTest:
        data = lab_test.model_dump()
        data["status"] = data["status"] or "pending"
        return self._insert("lab_tests", schemas.LabTest, data, created_at=self._clock())

    @synchronized
    def get_lab_test(self, lab_test_id: int) -> Optional[schemas.LabTest]:
        return self._db["lab_tests"].get(lab_test_id)

    @synchronized
    def get_lab_tests_by_visit(self, visit_id: int) -> List[schemas.LabTest]:
        return self._by_visit("lab_tests", visit_id)

    @synchronized
    def update_lab_test(self, lab_test_id: int, patch: schemas.LabTestUpdate):
        return self._update("lab_tests", lab_test_id, patch)

    # --- physiotherapy ---

    @synchronized
    def create_physio_session(self, session: schemas.PhysioSessionCreate) -> schemas.PhysioSession:
        data = session.model_dump()
        data["status"] = data["status"] or "scheduled"
        return self._insert("physio_sessions", schemas.PhysioSession, data, created_at=self._clock())

    @synchronized
    def get_physio_session(self, session_id: int) -> Optional[schemas.PhysioSession]:
        return self._db["physio_sessions"].get(session_id)

    @synchronized
    def get_physio_sessions_by_visit(self, visit_id: int) -> List[schemas.PhysioSession]:
        return self._by_visit("physio_sessions", visit_id)

    @synchronized
    def update_physio_session(self, session_id: int, patch: schemas.PhysioSessionUpdate):
        return self._update("physio_sessions", session_id, patch)

    # --- payments ---

    @synchronized
    def create_payment(self, payment: schemas.PaymentCreate) -> schemas.Payment:
        data = payment.model_dump()
        data["payment_status"] = data["payment_status"] or "pending"
        record = self._insert("payments", schemas.Payment, data, created_at=self._clock())
        logger.info("Recorded payment #%s of %s for visit #%s",
                    record.id, record.amount, record.visit_id)
        return record

    @synchronized
    def get_payment(self, payment_id: int) -> Optional[schemas.Payment]:
        return self._db["payments"].get(payment_id)

    @synchronized
    def get_payments_by_visit(self, visit_id: int) -> List[schemas.Payment]:
        return self._by_visit("payments", visit_id)

    @synchronized
    def update_payment(self, payment_id: int, patch: schemas.PaymentUpdate):
        return self._update("payments", payment_id, patch)

    # --- statistics ---

    @synchronized
    def get_todays_stats(self) -> schemas.TodayStats:
        todays_visits = self.get_todays_visits()
        return schemas.TodayStats(
            total_patients=len(todays_visits),
            completed=sum(1 for v in todays_visits if v.status == "completed"),
            in_progress=sum(1 for v in todays_visits if v.status == "in_consultation"),
            pending=sum(1 for v in todays_visits if v.status == "waiting"),
        )


# One store per process; routers receive it through get_store.
store = ClinicStore()


def get_store() -> ClinicStore:
    return store
