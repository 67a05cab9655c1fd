# clinic_api/routers/diagnostics.py

from fastapi import APIRouter, Depends, HTTPException, status
from typing import List

from .. import schemas
from ..in_memory_db import ClinicStore, get_store

router = APIRouter(
    tags=["Diagnostics - Imaging"],
    responses={404: {"description": "Not found"}},
)


@router.get("/api/visits/{visit_id}/diagnostics", response_model=List[schemas.Diagnostic])
def read_visit_diagnostics(visit_id: int, store: ClinicStore = Depends(get_store)):
    return store.get_diagnostics_by_visit(visit_id)


@router.get("/api/diagnostics/{diagnostic_id}", response_model=schemas.Diagnostic)
def read_diagnostic(diagnostic_id: int, store: ClinicStore = Depends(get_store)):
    diagnostic = store.get_diagnostic(diagnostic_id)
    if diagnostic is None:
        raise HTTPException(status_code=404, detail="Diagnostic not found")
    return diagnostic


@router.post("/api/diagnostics", response_model=schemas.Diagnostic,
             status_code=status.HTTP_201_CREATED)
def create_diagnostic(diagnostic: schemas.DiagnosticCreate, store: ClinicStore = Depends(get_store)):
    """Orders an imaging study (x-ray, MRI, CT...). Status starts at 'pending'."""
    return store.create_diagnostic(diagnostic)


@router.patch("/api/diagnostics/{diagnostic_id}", response_model=schemas.Diagnostic)
def update_diagnostic(diagnostic_id: int, patch: schemas.DiagnosticUpdate,
                      store: ClinicStore = Depends(get_store)):
    diagnostic = store.update_diagnostic(diagnostic_id, patch)
    if diagnostic is None:
        raise HTTPException(status_code=404, detail="Diagnostic not found")
    return diagnostic
