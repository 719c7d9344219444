# app/db/models/appointment.py
from datetime import datetime

from sqlalchemy import Boolean, Column, Date, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.db.base import Base


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    technician_id = Column(String, ForeignKey("technicians.id", ondelete="SET NULL"), nullable=True, index=True)

    customer_name = Column(String, nullable=False)
    customer_email = Column(String, nullable=False)
    customer_phone = Column(String, nullable=True)

    service = Column(String, nullable=False)
    price = Column(Float, nullable=False, default=0)

    date = Column(Date, nullable=False, index=True)
    time = Column(String, nullable=False)  # display form, e.g. "2:00 PM"
    notes = Column(String, nullable=True)

    status = Column(String, nullable=False, default="pending")
    points_awarded = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # relationships
    user = relationship("User", back_populates="appointments")
    technician = relationship("Technician", back_populates="appointments")
    claim = relationship(
        "SlotClaim",
        back_populates="appointment",
        uselist=False,
        cascade="all, delete-orphan",
    )
