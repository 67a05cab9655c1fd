# clinic_api/routers/consultations.py

from fastapi import APIRouter, Depends, HTTPException, status
from typing import List

from .. import schemas
from ..in_memory_db import ClinicStore, get_store

router = APIRouter(
    tags=["Doctor - Consultations"],
    responses={404: {"description": "Not found"}},
)


@router.get("/api/visits/{visit_id}/consultations", response_model=List[schemas.Consultation])
def read_visit_consultations(visit_id: int, store: ClinicStore = Depends(get_store)):
    return store.get_consultations_by_visit(visit_id)


@router.get("/api/consultations/{consultation_id}", response_model=schemas.Consultation)
def read_consultation(consultation_id: int, store: ClinicStore = Depends(get_store)):
    consultation = store.get_consultation(consultation_id)
    if consultation is None:
        raise HTTPException(status_code=404, detail="Consultation not found")
    return consultation


@router.post("/api/consultations", response_model=schemas.Consultation,
             status_code=status.HTTP_201_CREATED)
def create_consultation(consultation: schemas.ConsultationCreate, store: ClinicStore = Depends(get_store)):
    """Doctor's notes for a visit; the consultation time is stamped by the server."""
    return store.create_consultation(consultation)


@router.patch("/api/consultations/{consultation_id}", response_model=schemas.Consultation)
def update_consultation(consultation_id: int, patch: schemas.ConsultationUpdate,
                        store: ClinicStore = Depends(get_store)):
    consultation = store.update_consultation(consultation_id, patch)
    if consultation is None:
        raise HTTPException(status_code=404, detail="Consultation not found")
    return consultation
