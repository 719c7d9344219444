# app/db/models/review.py
from sqlalchemy import JSON, Boolean, Column, DateTime, Float, ForeignKey, Integer, String, UniqueConstraint, func

from app.db.base import Base


class Review(Base):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    appointment_id = Column(Integer, ForeignKey("appointments.id", ondelete="SET NULL"), nullable=True)
    technician_id = Column(String, ForeignKey("technicians.id", ondelete="SET NULL"), nullable=True, index=True)

    customer_name = Column(String, nullable=False)
    service = Column(String, nullable=False, index=True)
    rating = Column(Integer, nullable=False)   # 1..5
    comment = Column(String, nullable=False, default="")
    verified = Column(Boolean, nullable=False, default=False)  # linked to the reviewer's own appointment

    created_at = Column(DateTime(timezone=True), server_default=func.now())


class RatingStats(Base):
    """Running rating aggregate for one service or technician."""
    __tablename__ = "rating_stats"
    __table_args__ = (
        UniqueConstraint("subject_type", "subject_key", name="uq_rating_stats_subject"),
    )

    id = Column(Integer, primary_key=True, index=True)
    subject_type = Column(String, nullable=False)  # service / technician
    subject_key = Column(String, nullable=False)

    average_rating = Column(Float, nullable=False, default=0)
    total_reviews = Column(Integer, nullable=False, default=0)
    rating_distribution = Column(JSON, nullable=False, default=dict)  # {"5": 10, "4": 2}

    last_updated = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
