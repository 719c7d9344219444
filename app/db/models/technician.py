# app/db/models/technician.py
from datetime import datetime

from sqlalchemy import JSON, Boolean, Column, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.db.base import Base


class Technician(Base):
    """
    A nail technician with their own service menu, calendar and appointments.
    id is a readable slug (e.g. "studio-default").
    """
    __tablename__ = "technicians"

    id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    email = Column(String, nullable=False, index=True)
    business_name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    specialties = Column(JSON, nullable=False, default=list)

    address = Column(String, nullable=True)
    city = Column(String, nullable=True)
    state = Column(String, nullable=True)
    zip_code = Column(String, nullable=True)

    phone = Column(String, nullable=True)
    instagram = Column(String, nullable=True)
    website = Column(String, nullable=True)

    is_active = Column(Boolean, nullable=False, default=True)
    is_owner = Column(Boolean, nullable=False, default=False)  # can manage other technicians
    joined_date = Column(DateTime, default=datetime.utcnow)

    rating = Column(Float, nullable=False, default=0)
    total_reviews = Column(Integer, nullable=False, default=0)

    services = relationship(
        "StudioService",
        back_populates="technician",
        cascade="all, delete-orphan",
        order_by="StudioService.price",
        lazy="selectin",
    )
    appointments = relationship("Appointment", back_populates="technician")


class StudioService(Base):
    __tablename__ = "studio_services"

    # technician_id NULL means the studio-wide menu (single-technician setup)
    pk = Column(Integer, primary_key=True, index=True)
    id = Column(String, nullable=False, index=True)
    technician_id = Column(String, ForeignKey("technicians.id", ondelete="CASCADE"), nullable=True, index=True)

    name = Column(String, nullable=False)
    price = Column(Float, nullable=False)
    duration_minutes = Column(Integer, nullable=False, default=60)
    category = Column(String, nullable=False, default="Other")  # Design / GELX / Other
    tier = Column(Integer, nullable=True)
    description = Column(String, nullable=True)

    technician = relationship("Technician", back_populates="services")
