# app/schemas/technician.py
from pydantic import BaseModel, EmailStr, Field
from typing import List, Literal, Optional
from datetime import datetime


# Shared fields
class StudioServiceBase(BaseModel):
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    duration_minutes: int = Field(60, ge=1)
    category: Literal["Design", "GELX", "Other"] = "Other"
    tier: Optional[int] = None
    description: Optional[str] = None


class StudioServiceResponse(StudioServiceBase):
    class Config:
        from_attributes = True


class TechnicianBase(BaseModel):
    name: str
    email: EmailStr
    business_name: str
    description: Optional[str] = None
    specialties: List[str] = []
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    phone: Optional[str] = None
    instagram: Optional[str] = None
    website: Optional[str] = None
    is_active: bool = True
    is_owner: bool = False


# Admin creates technician
class TechnicianCreate(TechnicianBase):
    id: str = Field(..., min_length=1, pattern=r"^[a-z0-9-]+$")
    services: List[StudioServiceBase] = []


# Admin updates technician
class TechnicianUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    business_name: Optional[str] = None
    description: Optional[str] = None
    specialties: Optional[List[str]] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    phone: Optional[str] = None
    instagram: Optional[str] = None
    website: Optional[str] = None
    is_active: Optional[bool] = None
    is_owner: Optional[bool] = None
    services: Optional[List[StudioServiceBase]] = None


# What API returns
class TechnicianResponse(TechnicianBase):
    id: str
    joined_date: Optional[datetime] = None
    rating: float
    total_reviews: int
    services: List[StudioServiceResponse] = []

    class Config:
        from_attributes = True
