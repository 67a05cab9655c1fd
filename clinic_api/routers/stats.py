# clinic_api/routers/stats.py

from fastapi import APIRouter, Depends

from .. import schemas
from ..in_memory_db import ClinicStore, get_store

router = APIRouter(
    prefix="/api/stats",
    tags=["Reports"],
)


@router.get("/today", response_model=schemas.TodayStats)
def get_todays_stats(store: ClinicStore = Depends(get_store)):
    """Dashboard counters for today's visits."""
    return store.get_todays_stats()
