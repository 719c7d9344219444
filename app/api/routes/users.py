# app/api/routes/users.py
import logging
from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.security import get_current_user
from app.db.base import get_db
from app.db.models.user import User
from app.schemas.appointment import AppointmentResponse
from app.schemas.user import TermsSignature, UserResponse
from app.services import booking

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserResponse)
def read_profile(current_user: User = Depends(get_current_user)):
    return current_user


@router.post("/me/terms", response_model=UserResponse)
def sign_terms(
    payload: TermsSignature,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    current_user.has_signed_terms = True
    current_user.terms_signed_at = datetime.utcnow()
    current_user.digital_signature = payload.signature_name.strip()
    db.commit()
    db.refresh(current_user)
    logger.info(f"{current_user.email} signed the terms of service")
    return current_user


# Customer views their appointments
@router.get("/me/appointments", response_model=List[AppointmentResponse])
def my_appointments(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return booking.list_appointments(db, user_id=current_user.id)
