# app/db/models/availability.py
from sqlalchemy import JSON, Column, Date, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from app.db.base import Base


class AvailabilityRecord(Base):
    """
    Published time slots for one calendar date.
    scope: technician id, or "studio" for the studio-wide calendar
    slots: display strings ("9:00 AM"), kept de-duplicated and sorted
    version: optimistic lock counter, bumped by SQLAlchemy on every update
    """
    __tablename__ = "availability_records"
    __table_args__ = (
        UniqueConstraint("scope", "date", name="uq_availability_scope_date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    scope = Column(String, nullable=False, index=True)
    date = Column(Date, nullable=False)
    slots = Column(JSON, nullable=False, default=list)
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}


class SlotClaim(Base):
    """
    Holds a slot for one active appointment.
    The unique (scope, date, time) key is the conditional write that stops
    two active appointments from taking the same slot.
    time is canonical 24-hour "HH:MM".
    """
    __tablename__ = "slot_claims"
    __table_args__ = (
        UniqueConstraint("scope", "date", "time", name="uq_slot_claim"),
    )

    id = Column(Integer, primary_key=True, index=True)
    scope = Column(String, nullable=False)
    date = Column(Date, nullable=False)
    time = Column(String, nullable=False)
    appointment_id = Column(Integer, ForeignKey("appointments.id", ondelete="CASCADE"), nullable=False, unique=True)

    appointment = relationship("Appointment", back_populates="claim")
