# app/db/models/loyalty.py
from datetime import datetime

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.db.base import Base


class LoyaltyAccount(Base):
    __tablename__ = "loyalty_accounts"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    points = Column(Integer, nullable=False, default=0)
    total_spent = Column(Float, nullable=False, default=0)
    appointments_completed = Column(Integer, nullable=False, default=0)
    tier_level = Column(String, nullable=False, default="Welcome")
    last_updated = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="loyalty")
