# app/api/routes/review.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from app.db.base import get_db
from app.schemas.review import ReviewCreate, ReviewResponse, ReviewStatsResponse
from app.core.security import SessionContext, get_session_context, require_admin
from app.services import reviews

router = APIRouter(prefix="/reviews", tags=["reviews"])

# Create review (signed-in customer)
@router.post("", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
def create_review(review_in: ReviewCreate, db: Session = Depends(get_db), ctx: SessionContext = Depends(get_session_context)):
    return reviews.submit_review(
        db,
        ctx,
        service=review_in.service,
        rating=review_in.rating,
        comment=review_in.comment or "",
        technician_id=review_in.technician_id,
        appointment_id=review_in.appointment_id,
    )

# Public listings
@router.get("/service/{service_name}", response_model=List[ReviewResponse])
def list_service_reviews(service_name: str, db: Session = Depends(get_db)):
    return reviews.list_reviews(db, service=service_name)

@router.get("/technician/{technician_id}", response_model=List[ReviewResponse])
def list_technician_reviews(technician_id: str, db: Session = Depends(get_db)):
    return reviews.list_reviews(db, technician_id=technician_id)

@router.get("/service/{service_name}/stats", response_model=ReviewStatsResponse)
def service_stats(service_name: str, db: Session = Depends(get_db)):
    return reviews.get_stats(db, reviews.SERVICE, service_name)

@router.get("/technician/{technician_id}/stats", response_model=ReviewStatsResponse)
def technician_stats(technician_id: str, db: Session = Depends(get_db)):
    return reviews.get_stats(db, reviews.TECHNICIAN, technician_id)

# Reviews written by the caller
@router.get("/me", response_model=List[ReviewResponse])
def my_reviews(db: Session = Depends(get_db), ctx: SessionContext = Depends(get_session_context)):
    return reviews.list_reviews(db, user_id=ctx.user_id)

# Admin: all reviews
@router.get("", response_model=List[ReviewResponse])
def all_reviews(db: Session = Depends(get_db), admin: SessionContext = Depends(require_admin)):
    return reviews.list_reviews(db)

# Admin: delete a review (and recalc)
@router.delete("/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
def admin_delete_review(review_id: int, db: Session = Depends(get_db), admin: SessionContext = Depends(require_admin)):
    reviews.delete_review(db, review_id)
    return
