# app/api/routes/technicians.py
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.security import SessionContext, get_session_context, require_admin
from app.db.base import get_db
from app.schemas.appointment import AppointmentResponse
from app.schemas.technician import StudioServiceResponse, TechnicianCreate, TechnicianResponse, TechnicianUpdate
from app.services import booking, technicians

router = APIRouter(prefix="/technicians", tags=["technicians"])


@router.get("", response_model=List[TechnicianResponse])
def list_technicians(db: Session = Depends(get_db)):
    return technicians.list_active_technicians(db)


@router.get("/{technician_id}", response_model=TechnicianResponse)
def get_technician(technician_id: str, db: Session = Depends(get_db)):
    return technicians.get_technician(db, technician_id)


@router.get("/{technician_id}/services", response_model=List[StudioServiceResponse])
def get_technician_services(technician_id: str, db: Session = Depends(get_db)):
    return technicians.get_technician(db, technician_id).services


@router.post("", response_model=TechnicianResponse, status_code=status.HTTP_201_CREATED)
def create_technician(
    payload: TechnicianCreate,
    db: Session = Depends(get_db),
    admin: SessionContext = Depends(require_admin),
):
    data = payload.model_dump()
    services = data.pop("services")
    technician_id = data.pop("id")
    return technicians.create_technician(db, technician_id, services, **data)


@router.put("/{technician_id}", response_model=TechnicianResponse)
def update_technician(
    technician_id: str,
    payload: TechnicianUpdate,
    db: Session = Depends(get_db),
    admin: SessionContext = Depends(require_admin),
):
    updates = payload.model_dump(exclude_unset=True)
    services = updates.pop("services", None)
    return technicians.update_technician(db, technician_id, services=services, **updates)


# Technician (or admin) views the technician's appointments
@router.get("/{technician_id}/appointments", response_model=List[AppointmentResponse])
def technician_appointments(
    technician_id: str,
    db: Session = Depends(get_db),
    ctx: SessionContext = Depends(get_session_context),
):
    technicians.get_technician(db, technician_id)
    technicians.require_calendar_manager(db, ctx, technician_id)
    return booking.list_appointments(db, technician_id=technician_id)
