# clinic_api/routers/patients.py

from fastapi import APIRouter, Depends, HTTPException, Response, status
from typing import List, Optional

from .. import schemas
from ..in_memory_db import ClinicStore, get_store

router = APIRouter(
    prefix="/api/patients",
    tags=["Reception - Patients"],
    responses={404: {"description": "Not found"}},
)


@router.get("", response_model=List[schemas.Patient])
def read_patients(search: Optional[str] = None, store: ClinicStore = Depends(get_store)):
    """All patients, or those matching a name/phone search."""
    if search:
        return store.search_patients(search)
    return store.get_all_patients()


@router.get("/{patient_id}", response_model=schemas.PatientWithVisits)
def read_patient(patient_id: int, store: ClinicStore = Depends(get_store)):
    """Patient details with visit history and the current open visit."""
    patient = store.get_patient_with_visits(patient_id)
    if patient is None:
        raise HTTPException(status_code=404, detail="Patient not found")
    return patient


@router.post("", response_model=schemas.Patient, status_code=status.HTTP_201_CREATED)
def create_patient(patient: schemas.PatientCreate, store: ClinicStore = Depends(get_store)):
    return store.create_patient(patient)


@router.patch("/{patient_id}", response_model=schemas.Patient)
def update_patient(patient_id: int, patch: schemas.PatientUpdate, store: ClinicStore = Depends(get_store)):
    patient = store.update_patient(patient_id, patch)
    if patient is None:
        raise HTTPException(status_code=404, detail="Patient not found")
    return patient


@router.delete("/{patient_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_patient(patient_id: int, store: ClinicStore = Depends(get_store)):
    """Removes the patient record only; visits stay on file."""
    if not store.delete_patient(patient_id):
        raise HTTPException(status_code=404, detail="Patient not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
