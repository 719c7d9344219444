# app/schemas/admin_dashboard.py
from pydantic import BaseModel
from typing import Dict, List, Optional
from datetime import date

class KPIItem(BaseModel):
    total_users: int
    pending_approvals: int
    total_technicians: int
    total_appointments: int
    appointments_today: int
    appointments_last_7_days: int

    class Config:
        from_attributes = True

class UpcomingAppointment(BaseModel):
    id: int
    customer_name: str
    service: str
    technician_id: Optional[str]
    date: date
    time: str
    status: str

    class Config:
        from_attributes = True

class ReviewSummary(BaseModel):
    total_reviews: int
    average_rating: Optional[float]

class AdminDashboardResponse(BaseModel):
    kpis: KPIItem
    appointments_by_status: Dict[str, int]
    upcoming_appointments: List[UpcomingAppointment]
    reviews: ReviewSummary

    class Config:
        from_attributes = True
