# clinic_api/routers/physio_sessions.py

from fastapi import APIRouter, Depends, HTTPException, status
from typing import List

from .. import schemas
from ..in_memory_db import ClinicStore, get_store

router = APIRouter(
    tags=["Physiotherapy"],
    responses={404: {"description": "Not found"}},
)


@router.get("/api/visits/{visit_id}/physio-sessions", response_model=List[schemas.PhysioSession])
def read_visit_physio_sessions(visit_id: int, store: ClinicStore = Depends(get_store)):
    return store.get_physio_sessions_by_visit(visit_id)


@router.get("/api/physio-sessions/{session_id}", response_model=schemas.PhysioSession)
def read_physio_session(session_id: int, store: ClinicStore = Depends(get_store)):
    session = store.get_physio_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Physio session not found")
    return session


@router.post("/api/physio-sessions", response_model=schemas.PhysioSession,
             status_code=status.HTTP_201_CREATED)
def create_physio_session(session: schemas.PhysioSessionCreate, store: ClinicStore = Depends(get_store)):
    """Schedules a therapy session; status starts at 'scheduled'."""
    return store.create_physio_session(session)


@router.patch("/api/physio-sessions/{session_id}", response_model=schemas.PhysioSession)
def update_physio_session(session_id: int, patch: schemas.PhysioSessionUpdate,
                          store: ClinicStore = Depends(get_store)):
    session = store.update_physio_session(session_id, patch)
    if session is None:
        raise HTTPException(status_code=404, detail="Physio session not found")
    return session
