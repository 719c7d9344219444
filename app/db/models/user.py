# app/db/models/user.py
from sqlalchemy import Boolean, Column, DateTime, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    password_hash = Column(String, nullable=False)
    role = Column(String, nullable=False, default="customer", server_default="customer")  # customer/technician/admin

    phone = Column(String, nullable=True)

    # waitlist approval and signed terms gate the booking flow
    is_approved = Column(Boolean, nullable=False, default=False)
    has_signed_terms = Column(Boolean, nullable=False, default=False)
    terms_signed_at = Column(DateTime(timezone=True), nullable=True)
    digital_signature = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    appointments = relationship("Appointment", back_populates="user", lazy="selectin")
    loyalty = relationship("LoyaltyAccount", back_populates="user", uselist=False)
