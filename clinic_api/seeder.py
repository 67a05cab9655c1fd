# clinic_api/seeder.py
import logging
import random
from decimal import Decimal
from typing import Optional

from faker import Faker

from . import schemas
from .in_memory_db import ClinicStore

logger = logging.getLogger(__name__)

COMPLAINTS = [
    "Lower back pain", "Knee pain while climbing stairs", "Neck stiffness",
    "Shoulder pain after fall", "Ankle sprain", "Wrist pain", "Hip pain",
]
BLOOD_GROUPS = ["A+", "A-", "B+", "B-", "AB+", "AB-", "O+", "O-"]
VISIT_STATUSES = ["waiting", "waiting", "in_consultation", "completed", "cancelled"]


def seed_demo_data(store: ClinicStore, patients: int = 10, seed: Optional[int] = None) -> dict:
    """
    Fills the store with fake patients, one visit each.

    Completed visits also get a consultation, a prescription and a paid bill.
    Returns the number of records created per kind.
    """
    fake = Faker("en_IN")
    rng = random.Random(seed)
    if seed is not None:
        fake.seed_instance(seed)

    summary = {"patients": 0, "visits": 0, "consultations": 0, "prescriptions": 0, "payments": 0}
    for _ in range(patients):
        patient = store.create_patient(schemas.PatientCreate(
            first_name=fake.first_name(),
            last_name=fake.last_name(),
            age=rng.randint(5, 85),
            gender=rng.choice(["male", "female"]),
            blood_group=rng.choice(BLOOD_GROUPS),
            phone=fake.numerify("9#########"),
            address=fake.address().replace("\n", ", "),
        ))
        summary["patients"] += 1

        status = rng.choice(VISIT_STATUSES)
        visit = store.create_visit(schemas.VisitCreate(
            patient_id=patient.id, status=status, chief_complaint=rng.choice(COMPLAINTS),
        ))
        summary["visits"] += 1
        if status != "completed":
            continue

        store.create_consultation(schemas.ConsultationCreate(
            visit_id=visit.id,
            chief_complaint=visit.chief_complaint,
            provisional_diagnosis="Soft tissue strain",
            treatment_plan="Rest, ice and analgesics",
            advice="Avoid heavy lifting for two weeks",
            doctor_name=f"Dr. {fake.last_name()}",
        ))
        store.create_prescription(schemas.PrescriptionCreate(
            visit_id=visit.id,
            medicines=["Paracetamol 500mg", "Diclofenac gel"],
            dosage=["1-0-1 after food", "Apply twice daily"],
        ))
        store.create_payment(schemas.PaymentCreate(
            visit_id=visit.id,
            amount=Decimal(rng.choice([300, 500, 800])),
            payment_method=rng.choice(["cash", "card", "upi"]),
            payment_status="completed",
            bill_items=["Consultation fee"],
        ))
        summary["consultations"] += 1
        summary["prescriptions"] += 1
        summary["payments"] += 1

    logger.info("Seeded demo data: %s", summary)
    return summary
