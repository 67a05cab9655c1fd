# clinic_api/routers/payments.py

from fastapi import APIRouter, Depends, HTTPException, status
from typing import List

from .. import schemas
from ..in_memory_db import ClinicStore, get_store

router = APIRouter(
    tags=["Billing"],
    responses={404: {"description": "Not found"}},
)


@router.get("/api/visits/{visit_id}/payments", response_model=List[schemas.Payment])
def read_visit_payments(visit_id: int, store: ClinicStore = Depends(get_store)):
    return store.get_payments_by_visit(visit_id)


@router.get("/api/payments/{payment_id}", response_model=schemas.Payment)
def read_payment(payment_id: int, store: ClinicStore = Depends(get_store)):
    payment = store.get_payment(payment_id)
    if payment is None:
        raise HTTPException(status_code=404, detail="Payment not found")
    return payment


@router.post("/api/payments", response_model=schemas.Payment, status_code=status.HTTP_201_CREATED)
def create_payment(payment: schemas.PaymentCreate, store: ClinicStore = Depends(get_store)):
    return store.create_payment(payment)


@router.patch("/api/payments/{payment_id}", response_model=schemas.Payment)
def update_payment(payment_id: int, patch: schemas.PaymentUpdate, store: ClinicStore = Depends(get_store)):
    """Typically used to mark a bill as completed or failed."""
    payment = store.update_payment(payment_id, patch)
    if payment is None:
        raise HTTPException(status_code=404, detail="Payment not found")
    return payment
