# app/services/booking.py
"""
Booking validation and the appointment write path.

A booking is accepted only when its time is published in the calendar for
that date, and it takes the slot through a SlotClaim row whose unique key
makes a second active booking of the same slot fail at commit time.
"""
import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import (
    InvalidStatusTransition,
    NotFound,
    PreconditionFailed,
    SlotAlreadyBooked,
    SlotNotAvailable,
    ValidationFailed,
)
from app.core.security import SessionContext
from app.db.models.appointment import Appointment
from app.db.models.availability import SlotClaim
from app.db.models.technician import Technician
from app.services import availability_store
from app.services.slots import contains_slot
from app.services.technicians import find_service
from app.services.timefmt import canonical_time, to_12_hour

logger = logging.getLogger(__name__)

PENDING = "pending"
CONFIRMED = "confirmed"
CANCELLED = "cancelled"
COMPLETED = "completed"

STATUSES = (PENDING, CONFIRMED, CANCELLED, COMPLETED)
TERMINAL_STATUSES = (CANCELLED, COMPLETED)

# intended lifecycle; only applied when ENFORCE_STATUS_TRANSITIONS is on
STATUS_TRANSITIONS = {
    PENDING: {CONFIRMED, CANCELLED},
    CONFIRMED: {COMPLETED},
    CANCELLED: set(),
    COMPLETED: set(),
}

REQUIRED_FIELDS = ("name", "email", "service", "date", "time")


@dataclass
class BookingRequest:
    name: str
    email: str
    service: str
    date: Optional[date]
    time: str
    technician_id: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None


def check_required_fields(request: BookingRequest) -> None:
    for field in REQUIRED_FIELDS:
        value = getattr(request, field)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationFailed(f"{field} is required", field=field)


def check_booking_preconditions(ctx: SessionContext) -> None:
    if not ctx.is_approved:
        raise PreconditionFailed(
            "Your account must be approved from our waitlist before you can book appointments.",
            remediation="waitlist",
        )
    if not ctx.has_signed_terms:
        raise PreconditionFailed(
            "Please sign the Terms of Service in your profile before booking.",
            remediation="terms",
        )


def validate_booking_slot(db: Session, technician_id: Optional[str], day: date, time: str) -> str:
    """Return the canonical time when it is published for ``day``."""
    canonical = canonical_time(time)
    published = availability_store.get_slots(db, availability_store.scope_for(technician_id), day)
    if not contains_slot(published, canonical):
        raise SlotNotAvailable(f"{to_12_hour(canonical)} is not available on {day.isoformat()}")
    return canonical


def _active_technician(db: Session, technician_id: str) -> Technician:
    technician = db.query(Technician).filter(Technician.id == technician_id).first()
    if not technician or not technician.is_active:
        raise NotFound("Technician not found")
    return technician


def create_appointment(db: Session, ctx: SessionContext, request: BookingRequest) -> int:
    check_required_fields(request)
    canonical = canonical_time(request.time)
    check_booking_preconditions(ctx)

    if request.technician_id:
        _active_technician(db, request.technician_id)

    service = find_service(db, request.technician_id, request.service.strip())
    if service is None:
        raise ValidationFailed(f"Unknown service {request.service!r}", field="service")

    validate_booking_slot(db, request.technician_id, request.date, canonical)

    appointment = Appointment(
        user_id=ctx.user_id,
        technician_id=request.technician_id,
        customer_name=request.name.strip(),
        customer_email=request.email.strip(),
        customer_phone=request.phone,
        service=service.name,
        price=service.price,
        date=request.date,
        time=to_12_hour(canonical),
        notes=request.notes,
        status=PENDING,
    )
    appointment.claim = SlotClaim(
        scope=availability_store.scope_for(request.technician_id),
        date=request.date,
        time=canonical,
    )
    db.add(appointment)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning(f"Slot {canonical} on {request.date} already taken, rejected booking by {ctx.email}")
        raise SlotAlreadyBooked(f"{to_12_hour(canonical)} on {request.date.isoformat()} has just been booked")

    db.refresh(appointment)
    logger.info(
        f"Appointment {appointment.id} requested by {ctx.email} for {appointment.service} "
        f"on {appointment.date} at {appointment.time}"
    )
    return appointment.id


def get_appointment(db: Session, appointment_id: int) -> Appointment:
    appointment = db.query(Appointment).filter(Appointment.id == appointment_id).first()
    if not appointment:
        raise NotFound("Appointment not found")
    return appointment


def list_appointments(
    db: Session,
    status: Optional[str] = None,
    technician_id: Optional[str] = None,
    user_id: Optional[int] = None,
) -> List[Appointment]:
    q = db.query(Appointment)
    if status:
        q = q.filter(Appointment.status == status)
    if technician_id:
        q = q.filter(Appointment.technician_id == technician_id)
    if user_id is not None:
        q = q.filter(Appointment.user_id == user_id)
    return q.order_by(Appointment.created_at.desc(), Appointment.id.desc()).all()


def check_transition(appointment: Appointment, new_status: str) -> None:
    if new_status not in STATUSES:
        raise ValidationFailed(f"Unknown status {new_status!r}", field="status")
    if not settings.enforce_status_transitions or new_status == appointment.status:
        return
    allowed = STATUS_TRANSITIONS[appointment.status]
    if new_status == COMPLETED and appointment.technician_id is None:
        # completion is tracked per technician only
        allowed = allowed - {COMPLETED}
    if new_status not in allowed:
        raise InvalidStatusTransition(f"Cannot move an appointment from {appointment.status} to {new_status}")


def update_status(db: Session, appointment_id: int, new_status: str) -> Appointment:
    appointment = get_appointment(db, appointment_id)
    check_transition(appointment, new_status)
    old_status = appointment.status

    if new_status == CANCELLED and appointment.claim is not None:
        appointment.claim = None
    elif old_status == CANCELLED and new_status != CANCELLED and appointment.claim is None:
        appointment.claim = SlotClaim(
            scope=availability_store.scope_for(appointment.technician_id),
            date=appointment.date,
            time=canonical_time(appointment.time),
        )
    appointment.status = new_status

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise SlotAlreadyBooked(
            f"{appointment.time} on {appointment.date.isoformat()} was booked by someone else"
        )
    db.refresh(appointment)
    logger.info(f"Appointment {appointment.id} status {old_status} -> {new_status}")
    return appointment


def delete_appointment(db: Session, appointment_id: int) -> None:
    appointment = get_appointment(db, appointment_id)
    db.delete(appointment)
    db.commit()
    logger.info(f"Appointment {appointment_id} deleted")
