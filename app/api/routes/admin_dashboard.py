# app/api/routes/admin_dashboard.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import func
from datetime import datetime, timedelta

from app.db.base import get_db
from app.db.models.user import User
from app.db.models.appointment import Appointment
from app.db.models.technician import Technician
from app.db.models.review import Review
from app.schemas.admin_dashboard import (
    AdminDashboardResponse,
    KPIItem,
    ReviewSummary,
    UpcomingAppointment,
)
from app.core.security import SessionContext, require_admin
from app.services.booking import CANCELLED, COMPLETED
from app.services.timefmt import canonical_time

router = APIRouter(prefix="/admin/dashboard", tags=["admin-dashboard"])


@router.get("", response_model=AdminDashboardResponse)
def admin_dashboard(db: Session = Depends(get_db), admin: SessionContext = Depends(require_admin)):
    now = datetime.utcnow()
    today = now.date()
    day_start = datetime.combine(today, datetime.min.time())
    last_7 = now - timedelta(days=7)

    # KPIs
    total_users = db.query(func.count(User.id)).scalar() or 0
    pending_approvals = db.query(func.count(User.id)).filter(User.is_approved == False).scalar() or 0  # noqa: E712
    total_technicians = db.query(func.count(Technician.id)).filter(Technician.is_active == True).scalar() or 0  # noqa: E712
    total_appointments = db.query(func.count(Appointment.id)).scalar() or 0
    appointments_today = db.query(func.count(Appointment.id)).filter(Appointment.created_at >= day_start).scalar() or 0
    appointments_last_7_days = db.query(func.count(Appointment.id)).filter(Appointment.created_at >= last_7).scalar() or 0

    kpis = KPIItem(
        total_users=int(total_users),
        pending_approvals=int(pending_approvals),
        total_technicians=int(total_technicians),
        total_appointments=int(total_appointments),
        appointments_today=int(appointments_today),
        appointments_last_7_days=int(appointments_last_7_days),
    )

    # appointments by status
    status_counts_q = db.query(Appointment.status, func.count(Appointment.id)).group_by(Appointment.status).all()
    appointments_by_status = {row[0]: int(row[1]) for row in status_counts_q}

    # upcoming week, still active
    upcoming_rows = (
        db.query(Appointment)
        .filter(Appointment.date >= today, Appointment.date <= today + timedelta(days=7))
        .filter(Appointment.status.notin_([CANCELLED, COMPLETED]))
        .all()
    )
    # display times do not sort as text
    upcoming_rows.sort(key=lambda a: (a.date, canonical_time(a.time)))
    upcoming = [UpcomingAppointment.model_validate(a) for a in upcoming_rows[:20]]

    total_reviews = db.query(func.count(Review.id)).scalar() or 0
    avg_rating = db.query(func.avg(Review.rating)).scalar()

    return AdminDashboardResponse(
        kpis=kpis,
        appointments_by_status=appointments_by_status,
        upcoming_appointments=upcoming,
        reviews=ReviewSummary(
            total_reviews=int(total_reviews),
            average_rating=float(avg_rating) if avg_rating is not None else None,
        ),
    )
