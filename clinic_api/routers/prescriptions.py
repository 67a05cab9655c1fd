# clinic_api/routers/prescriptions.py

from fastapi import APIRouter, Depends, HTTPException, status
from typing import List

from .. import schemas
from ..in_memory_db import ClinicStore, get_store

router = APIRouter(
    tags=["Pharmacy - Prescriptions"],
    responses={404: {"description": "Not found"}},
)


@router.get("/api/visits/{visit_id}/prescriptions", response_model=List[schemas.Prescription])
def read_visit_prescriptions(visit_id: int, store: ClinicStore = Depends(get_store)):
    return store.get_prescriptions_by_visit(visit_id)


@router.get("/api/prescriptions/{prescription_id}", response_model=schemas.Prescription)
def read_prescription(prescription_id: int, store: ClinicStore = Depends(get_store)):
    prescription = store.get_prescription(prescription_id)
    if prescription is None:
        raise HTTPException(status_code=404, detail="Prescription not found")
    return prescription


@router.post("/api/prescriptions", response_model=schemas.Prescription,
             status_code=status.HTTP_201_CREATED)
def create_prescription(prescription: schemas.PrescriptionCreate, store: ClinicStore = Depends(get_store)):
    return store.create_prescription(prescription)


@router.patch("/api/prescriptions/{prescription_id}", response_model=schemas.Prescription)
def update_prescription(prescription_id: int, patch: schemas.PrescriptionUpdate,
                        store: ClinicStore = Depends(get_store)):
    prescription = store.update_prescription(prescription_id, patch)
    if prescription is None:
        raise HTTPException(status_code=404, detail="Prescription not found")
    return prescription
