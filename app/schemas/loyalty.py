# app/schemas/loyalty.py
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

class LoyaltyResponse(BaseModel):
    user_id: int
    points: int
    total_spent: float
    appointments_completed: int
    tier_level: str
    tier_discount: int = 0
    last_updated: Optional[datetime] = None

    class Config:
        from_attributes = True

class AwardRequest(BaseModel):
    appointment_id: int

class AwardResponse(BaseModel):
    appointment_id: int
    user_id: int
    points_awarded: int

class RedeemRequest(BaseModel):
    points: int = Field(..., gt=0)

class RedeemResponse(BaseModel):
    redeemed: bool
    points: int
