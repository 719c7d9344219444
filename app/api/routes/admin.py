# app/api/routes/admin.py
import logging
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import Optional, List

from app.core.config import settings
from app.db.base import get_db
from app.db.models.technician import Technician
from app.db.models.user import User
from app.schemas.admin import CleanupResponse, UserListItem
from app.schemas.technician import TechnicianResponse
from app.core.security import SessionContext, require_admin
from app.services import technicians

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])

ROLES = ("customer", "technician", "admin")


# -------------------------
# 1. List users (filterable)
# -------------------------
@router.get("/users", response_model=List[UserListItem])
def list_users(
    role: Optional[str] = Query(None, description="customer/technician/admin"),
    approved: Optional[bool] = Query(None, description="false lists the waitlist"),
    page: int = Query(1, ge=1),
    per_page: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
    admin: SessionContext = Depends(require_admin),
):
    q = db.query(User)
    if role:
        q = q.filter(User.role == role)
    if approved is not None:
        q = q.filter(User.is_approved == approved)

    offset = (page - 1) * per_page
    users = q.order_by(User.id).offset(offset).limit(per_page).all()
    return users


# --------------------------------------------------
# 2. Approve / revoke a waitlisted user
# --------------------------------------------------
@router.put("/users/{user_id}/approve")
def approve_user(
    user_id: int,
    approve: bool = True,
    db: Session = Depends(get_db),
    admin: SessionContext = Depends(require_admin),
):
    u = db.query(User).filter(User.id == user_id).first()
    if not u:
        raise HTTPException(status_code=404, detail="User not found")
    u.is_approved = bool(approve)
    db.commit()
    db.refresh(u)
    logger.info(f"{admin.email} set approval of {u.email} to {u.is_approved}")
    return {"ok": True, "user_id": u.id, "is_approved": u.is_approved}


# --------------------------------------------------
# 3. Change a user's role
# --------------------------------------------------
@router.put("/users/{user_id}/role")
def set_user_role(
    user_id: int,
    role: str,
    db: Session = Depends(get_db),
    admin: SessionContext = Depends(require_admin),
):
    if role not in ROLES:
        raise HTTPException(status_code=400, detail=f"role must be one of {', '.join(ROLES)}")
    u = db.query(User).filter(User.id == user_id).first()
    if not u:
        raise HTTPException(status_code=404, detail="User not found")
    u.role = role
    db.commit()
    db.refresh(u)
    logger.info(f"{admin.email} set role of {u.email} to {role}")
    return {"ok": True, "user_id": u.id, "role": u.role}


# --------------------------------------------------
# 4. Setup: default technician and studio menu
# --------------------------------------------------
@router.post("/setup/default-technician", response_model=TechnicianResponse)
def setup_default_technician(db: Session = Depends(get_db), admin: SessionContext = Depends(require_admin)):
    technician = technicians.seed_default_technician(db)
    technicians.seed_studio_menu(db)
    return technician


# --------------------------------------------------
# 5. Cleanup: make sure staff accounts can use every flow
# --------------------------------------------------
@router.post("/cleanup", response_model=CleanupResponse)
def cleanup_staff_accounts(db: Session = Depends(get_db), admin: SessionContext = Depends(require_admin)):
    admin_emails = set(settings.admin_emails)
    technician_emails = {t.email.lower() for t in db.query(Technician).all() if t.email}
    messages = []
    fixed = 0

    for u in db.query(User).order_by(User.id).all():
        email = u.email.lower()
        if email not in admin_emails and email not in technician_emails:
            continue
        changed = False
        if email in admin_emails and u.role != "admin":
            u.role = "admin"
            messages.append(f"Added admin role for: {u.email}")
            changed = True
        elif email in technician_emails and u.role == "customer":
            u.role = "technician"
            messages.append(f"Added technician role for: {u.email}")
            changed = True
        if not u.is_approved or not u.has_signed_terms:
            u.is_approved = True
            u.has_signed_terms = True
            messages.append(f"Auto-approved staff account: {u.email}")
            changed = True
        if changed:
            fixed += 1

    db.commit()
    logger.info(f"Staff cleanup fixed {fixed} account(s)")
    return CleanupResponse(accounts_fixed=fixed, messages=messages)
