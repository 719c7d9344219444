from pydantic import BaseModel, EmailStr, Field
from datetime import date, datetime
from typing import Literal, Optional

# --- CREATE ---
class AppointmentCreate(BaseModel):
    name: str
    email: EmailStr
    phone: Optional[str] = None
    service: str
    technician_id: Optional[str] = None
    date: date
    time: str
    notes: Optional[str] = None


# --- UPDATE (Admin) ---
class AppointmentStatusUpdate(BaseModel):
    status: Literal["pending", "confirmed", "cancelled", "completed"] = Field(
        ..., description="Allowed values: pending, confirmed, cancelled, completed"
    )


# --- RESPONSE ---
class AppointmentResponse(BaseModel):
    id: int
    user_id: int
    technician_id: Optional[str]
    customer_name: str
    customer_email: str
    customer_phone: Optional[str]
    service: str
    price: float
    date: date
    time: str
    notes: Optional[str]
    status: str
    points_awarded: bool
    created_at: datetime
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class AppointmentCreated(BaseModel):
    id: int
    status: str = "pending"
