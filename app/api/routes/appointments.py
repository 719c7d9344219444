# app/api/routes/appointments.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.errors import PermissionDenied
from app.core.security import SessionContext, get_session_context, require_admin
from app.db.base import get_db
from app.schemas.appointment import (
    AppointmentCreate,
    AppointmentCreated,
    AppointmentResponse,
    AppointmentStatusUpdate,
)
from app.services import booking, technicians

router = APIRouter(prefix="/appointments", tags=["appointments"])


# Customer requests an appointment

@router.post("", response_model=AppointmentCreated, status_code=status.HTTP_201_CREATED)
def create_appointment(
    payload: AppointmentCreate,
    db: Session = Depends(get_db),
    ctx: SessionContext = Depends(get_session_context),
):
    request = booking.BookingRequest(
        name=payload.name,
        email=payload.email,
        phone=payload.phone,
        service=payload.service,
        technician_id=payload.technician_id,
        date=payload.date,
        time=payload.time,
        notes=payload.notes,
    )
    appointment_id = booking.create_appointment(db, ctx, request)
    return AppointmentCreated(id=appointment_id)


@router.get("/{appointment_id}", response_model=AppointmentResponse)
def get_appointment(
    appointment_id: int,
    db: Session = Depends(get_db),
    ctx: SessionContext = Depends(get_session_context),
):
    appointment = booking.get_appointment(db, appointment_id)
    if appointment.user_id != ctx.user_id and not technicians.can_manage_calendar(db, ctx, appointment.technician_id):
        raise PermissionDenied("Not your appointment")
    return appointment


# Admin views all appointments

@router.get("", response_model=List[AppointmentResponse])
def list_appointments(
    status: Optional[str] = Query(None),
    technician_id: Optional[str] = Query(None),
    user_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    admin: SessionContext = Depends(require_admin),
):
    return booking.list_appointments(db, status=status, technician_id=technician_id, user_id=user_id)


# Admin (or owning technician) updates status

@router.put("/{appointment_id}/status", response_model=AppointmentResponse)
def update_appointment_status(
    appointment_id: int,
    payload: AppointmentStatusUpdate,
    db: Session = Depends(get_db),
    ctx: SessionContext = Depends(get_session_context),
):
    appointment = booking.get_appointment(db, appointment_id)
    technicians.require_calendar_manager(db, ctx, appointment.technician_id)
    return booking.update_status(db, appointment_id, payload.status)


@router.delete("/{appointment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_appointment(
    appointment_id: int,
    db: Session = Depends(get_db),
    admin: SessionContext = Depends(require_admin),
):
    booking.delete_appointment(db, appointment_id)
    return
