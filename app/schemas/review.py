# app/schemas/review.py
from pydantic import BaseModel, Field, conint
from typing import Dict, Optional
from datetime import datetime

class ReviewCreate(BaseModel):
    service: str = Field(..., min_length=1)
    rating: conint(ge=1, le=5) = Field(..., description="Rating 1-5")
    comment: Optional[str] = ""
    technician_id: Optional[str] = None
    appointment_id: Optional[int] = None

class ReviewResponse(BaseModel):
    id: int
    user_id: int
    customer_name: str
    service: str
    technician_id: Optional[str]
    appointment_id: Optional[int]
    rating: int
    comment: str
    verified: bool
    created_at: Optional[datetime]

    class Config:
        from_attributes = True

class ReviewStatsResponse(BaseModel):
    subject: str
    average_rating: float
    total_reviews: int
    rating_distribution: Dict[str, int]

    class Config:
        from_attributes = True
