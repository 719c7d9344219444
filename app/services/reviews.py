# app/services/reviews.py
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.errors import NotFound, PermissionDenied, ValidationFailed
from app.core.security import SessionContext
from app.db.models.appointment import Appointment
from app.db.models.review import RatingStats, Review
from app.db.models.technician import Technician

logger = logging.getLogger(__name__)

SERVICE = "service"
TECHNICIAN = "technician"


@dataclass
class ReviewStatsView:
    subject: str
    average_rating: float
    total_reviews: int
    rating_distribution: dict


def _stats_row(db: Session, subject_type: str, subject_key: str) -> Optional[RatingStats]:
    return (
        db.query(RatingStats)
        .filter(RatingStats.subject_type == subject_type, RatingStats.subject_key == subject_key)
        .first()
    )


def _add_rating(db: Session, subject_type: str, subject_key: str, rating: int) -> RatingStats:
    # running average, same as recomputing when nothing was deleted
    stats = _stats_row(db, subject_type, subject_key)
    if stats is None:
        stats = RatingStats(
            subject_type=subject_type,
            subject_key=subject_key,
            average_rating=float(rating),
            total_reviews=1,
            rating_distribution={str(rating): 1},
        )
        db.add(stats)
        return stats

    total = (stats.total_reviews or 0) + 1
    stats.average_rating = ((stats.average_rating or 0) * (stats.total_reviews or 0) + rating) / total
    stats.total_reviews = total
    distribution = dict(stats.rating_distribution or {})
    distribution[str(rating)] = distribution.get(str(rating), 0) + 1
    stats.rating_distribution = distribution
    stats.last_updated = datetime.utcnow()
    return stats


def _sync_technician(db: Session, technician_id: str) -> None:
    technician = db.query(Technician).filter(Technician.id == technician_id).first()
    if not technician:
        return
    stats = _stats_row(db, TECHNICIAN, technician_id)
    technician.rating = stats.average_rating if stats else 0.0
    technician.total_reviews = stats.total_reviews if stats else 0


def submit_review(
    db: Session,
    ctx: SessionContext,
    service: str,
    rating: int,
    comment: str = "",
    technician_id: Optional[str] = None,
    appointment_id: Optional[int] = None,
) -> Review:
    if not 1 <= rating <= 5:
        raise ValidationFailed("rating must be between 1 and 5", field="rating")
    verified = False
    if appointment_id is not None:
        appointment = db.query(Appointment).filter(Appointment.id == appointment_id).first()
        if not appointment:
            raise NotFound("Appointment not found")
        if appointment.user_id != ctx.user_id:
            raise PermissionDenied("You can only review your own appointments")
        verified = True
        technician_id = technician_id or appointment.technician_id

    review = Review(
        user_id=ctx.user_id,
        customer_name=ctx.name,
        service=service,
        technician_id=technician_id,
        rating=rating,
        comment=comment or "",
        appointment_id=appointment_id,
        verified=verified,
    )
    db.add(review)
    db.flush()

    _add_rating(db, SERVICE, service, rating)
    if technician_id:
        _add_rating(db, TECHNICIAN, technician_id, rating)
        db.flush()
        _sync_technician(db, technician_id)

    db.commit()
    db.refresh(review)
    logger.info(f"Review {review.id} ({rating}/5) for {service} submitted by {ctx.email}")
    return review


def _recalculate(db: Session, subject_type: str, subject_key: str) -> None:
    column = Review.service if subject_type == SERVICE else Review.technician_id
    rows = db.query(Review).filter(column == subject_key).all()
    stats = _stats_row(db, subject_type, subject_key)
    if not rows:
        if stats is not None:
            db.delete(stats)
        return
    if stats is None:
        stats = RatingStats(subject_type=subject_type, subject_key=subject_key)
        db.add(stats)
    distribution = {}
    for r in rows:
        distribution[str(r.rating)] = distribution.get(str(r.rating), 0) + 1
    stats.total_reviews = len(rows)
    stats.average_rating = float(sum(r.rating for r in rows)) / len(rows)
    stats.rating_distribution = distribution
    stats.last_updated = datetime.utcnow()


def delete_review(db: Session, review_id: int) -> None:
    review = db.query(Review).filter(Review.id == review_id).first()
    if not review:
        raise NotFound("Review not found")
    service, technician_id = review.service, review.technician_id
    db.delete(review)
    db.flush()

    _recalculate(db, SERVICE, service)
    if technician_id:
        _recalculate(db, TECHNICIAN, technician_id)
        db.flush()
        _sync_technician(db, technician_id)
    db.commit()
    logger.info(f"Review {review_id} deleted, stats recalculated")


def list_reviews(
    db: Session,
    service: Optional[str] = None,
    technician_id: Optional[str] = None,
    user_id: Optional[int] = None,
) -> List[Review]:
    q = db.query(Review)
    if service:
        q = q.filter(Review.service == service)
    if technician_id:
        q = q.filter(Review.technician_id == technician_id)
    if user_id is not None:
        q = q.filter(Review.user_id == user_id)
    return q.order_by(Review.created_at.desc(), Review.id.desc()).all()


def get_stats(db: Session, subject_type: str, subject_key: str) -> ReviewStatsView:
    stats = _stats_row(db, subject_type, subject_key)
    if stats is None:
        return ReviewStatsView(subject=subject_key, average_rating=0.0, total_reviews=0, rating_distribution={})
    return ReviewStatsView(
        subject=subject_key,
        average_rating=stats.average_rating,
        total_reviews=stats.total_reviews,
        rating_distribution=dict(stats.rating_distribution or {}),
    )
