# app/api/routes/availability.py
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.security import SessionContext, get_session_context
from app.db.base import get_db
from app.schemas.availability import (
    DaySlotsResponse,
    DeleteResponse,
    RangeSlotsResponse,
    SlotsAdd,
    SlotsAddResponse,
    SlotsReplace,
)
from app.services import availability_store, technicians

router = APIRouter(prefix="/availability", tags=["availability"])


def _resolve_scope(db: Session, technician_id: Optional[str]) -> str:
    if technician_id:
        technicians.get_technician(db, technician_id)
    return availability_store.scope_for(technician_id)


# Public reads used by the booking calendar

@router.get("", response_model=DaySlotsResponse)
def get_day_slots(
    day: date = Query(..., alias="date", description="date in YYYY-MM-DD"),
    technician_id: Optional[str] = Query(None, description="omit for the studio calendar"),
    db: Session = Depends(get_db),
):
    scope = _resolve_scope(db, technician_id)
    return DaySlotsResponse(scope=scope, date=day, slots=availability_store.get_slots(db, scope, day))


@router.get("/range", response_model=RangeSlotsResponse)
def get_range_slots(
    start: date = Query(...),
    end: date = Query(...),
    technician_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    scope = _resolve_scope(db, technician_id)
    days = availability_store.get_slots_for_range(db, scope, start, end)
    return RangeSlotsResponse(scope=scope, start=start, end=end, days=days)


# Calendar management (admin, or the technician that owns the calendar)

@router.post("", response_model=SlotsAddResponse)
def add_slots(
    payload: SlotsAdd,
    technician_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    ctx: SessionContext = Depends(get_session_context),
):
    scope = _resolve_scope(db, technician_id)
    technicians.require_calendar_manager(db, ctx, technician_id)
    days = availability_store.add_slots_for_dates(db, scope, payload.dates, payload.slots)
    return SlotsAddResponse(scope=scope, days=days)


@router.put("/{day}", response_model=DaySlotsResponse)
def replace_slots(
    day: date,
    payload: SlotsReplace,
    technician_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    ctx: SessionContext = Depends(get_session_context),
):
    scope = _resolve_scope(db, technician_id)
    technicians.require_calendar_manager(db, ctx, technician_id)
    slots = availability_store.save_slots(db, scope, day, payload.slots)
    return DaySlotsResponse(scope=scope, date=day, slots=slots)


@router.delete("/{day}/slot", response_model=DaySlotsResponse)
def remove_slot(
    day: date,
    time: str = Query(..., description="slot to remove, HH:MM or H:MM AM/PM"),
    technician_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    ctx: SessionContext = Depends(get_session_context),
):
    scope = _resolve_scope(db, technician_id)
    technicians.require_calendar_manager(db, ctx, technician_id)
    slots = availability_store.remove_slot(db, scope, day, time)
    return DaySlotsResponse(scope=scope, date=day, slots=slots)


@router.delete("/{day}", response_model=DeleteResponse)
def delete_day(
    day: date,
    technician_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    ctx: SessionContext = Depends(get_session_context),
):
    _resolve_scope(db, technician_id)
    technicians.require_calendar_manager(db, ctx, technician_id)
    deleted = availability_store.delete_slots(db, availability_store.scope_for(technician_id), day)
    return DeleteResponse(deleted=deleted, technician_id=technician_id)
