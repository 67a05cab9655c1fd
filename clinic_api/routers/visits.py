# clinic_api/routers/visits.py

from fastapi import APIRouter, Depends, HTTPException, status
from typing import List, Optional

from .. import schemas
from ..in_memory_db import ClinicStore, get_store

router = APIRouter(
    prefix="/api/visits",
    tags=["Reception - Visits"],
    responses={404: {"description": "Not found"}},
)


@router.get("", response_model=List[schemas.Visit])
def read_visits(today: Optional[str] = None, store: ClinicStore = Depends(get_store)):
    """All visits; `?today=true` limits the list to today's queue."""
    if today == "true":
        return store.get_todays_visits()
    return store.get_all_visits()


@router.get("/code/{visit_code}", response_model=schemas.Visit)
def read_visit_by_code(visit_code: str, store: ClinicStore = Depends(get_store)):
    visit = store.get_visit_by_code(visit_code)
    if visit is None:
        raise HTTPException(status_code=404, detail="Visit not found")
    return visit


@router.get("/{visit_id}", response_model=schemas.VisitWithDetails)
def read_visit(visit_id: int, store: ClinicStore = Depends(get_store)):
    """
    Visit with its patient and every clinical record attached to it:
    consultations, prescriptions, diagnostics, lab tests, physio sessions
    and payments.
    """
    visit = store.get_visit_with_details(visit_id)
    if visit is None:
        raise HTTPException(status_code=404, detail="Visit not found")
    return visit


@router.post("", response_model=schemas.Visit, status_code=status.HTTP_201_CREATED)
def create_visit(visit: schemas.VisitCreate, store: ClinicStore = Depends(get_store)):
    """Check-in: the server assigns the visit code and token number."""
    return store.create_visit(visit)


@router.patch("/{visit_id}", response_model=schemas.Visit)
def update_visit(visit_id: int, patch: schemas.VisitUpdate, store: ClinicStore = Depends(get_store)):
    visit = store.update_visit(visit_id, patch)
    if visit is None:
        raise HTTPException(status_code=404, detail="Visit not found")
    return visit
