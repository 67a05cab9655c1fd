# clinic_api/main.py

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from . import config
from .in_memory_db import store
from .routers import (
    consultations, diagnostics, lab_tests, patients, payments,
    physio_sessions, prescriptions, stats, visits,
)
from .seeder import seed_demo_data

logger = logging.getLogger(__name__)

# Path segment after /api/ -> label used in validation errors.
ENTITY_LABELS = {
    "patients": "patient",
    "visits": "visit",
    "consultations": "consultation",
    "prescriptions": "prescription",
    "diagnostics": "diagnostic",
    "lab-tests": "lab test",
    "physio-sessions": "physio session",
    "payments": "payment",
}


def entity_label(path: str) -> str:
    # /api/visits/3/payments is about payments, /api/visits/3 about the visit.
    segments = [s for s in path.split("/") if s and s != "api"]
    for segment in reversed(segments):
        if segment in ENTITY_LABELS:
            return ENTITY_LABELS[segment]
    return "request"


@asynccontextmanager
async def lifespan(app: FastAPI):
    config.configure_logging()
    logger.info("Clinic API starting (in-memory store, data is not persisted)")
    if config.SEED_DEMO:
        seed_demo_data(store, patients=config.SEED_PATIENTS)
    yield
    logger.info("Clinic API shutting down")


app = FastAPI(
    title=config.APP_TITLE,
    description="Patient registration, visit tokens, consultations, prescriptions, "
                "diagnostics, lab tests, physiotherapy and billing.",
    version=config.APP_VERSION,
    lifespan=lifespan,
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Schema failures become a 400 with a generic message; a malformed path id is a 404."""
    label = entity_label(request.url.path)
    logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
    if all(error["loc"][0] == "path" for error in exc.errors()):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": f"{label.capitalize()} not found"},
        )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": f"Invalid {label} data"},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


app.include_router(patients.router)
app.include_router(visits.router)
app.include_router(consultations.router)
app.include_router(prescriptions.router)
app.include_router(diagnostics.router)
app.include_router(lab_tests.router)
app.include_router(physio_sessions.router)
app.include_router(payments.router)
app.include_router(stats.router)


@app.get("/", tags=["General"])
def root():
    return {"message": f"{config.APP_TITLE} is running. See /docs for the API."}


def run():
    uvicorn.run("clinic_api.main:app", host=config.HOST, port=config.PORT)


if __name__ == "__main__":
    run()
