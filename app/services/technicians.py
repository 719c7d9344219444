# app/services/technicians.py
import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import AlreadyExists, NotFound, PermissionDenied
from app.core.security import SessionContext
from app.db.models.technician import StudioService, Technician

logger = logging.getLogger(__name__)

DEFAULT_TECHNICIAN_ID = "studio-default"

DEFAULT_SERVICES = [
    {"id": "design-tier-1", "name": "Design Tier 1", "price": 70, "duration_minutes": 90, "category": "Design", "tier": 1,
     "description": "Basic nail art and simple designs"},
    {"id": "design-tier-2", "name": "Design Tier 2", "price": 80, "duration_minutes": 105, "category": "Design", "tier": 2,
     "description": "Intermediate nail art with more detailed designs"},
    {"id": "design-tier-3", "name": "Design Tier 3", "price": 90, "duration_minutes": 120, "category": "Design", "tier": 3,
     "description": "Advanced nail art with complex patterns"},
    {"id": "design-tier-4", "name": "Design Tier 4", "price": 100, "duration_minutes": 135, "category": "Design", "tier": 4,
     "description": "Premium nail art with intricate details and 3D elements"},
    {"id": "gelx-tier-1", "name": "GELX Tier 1", "price": 85, "duration_minutes": 120, "category": "GELX", "tier": 1,
     "description": "Basic gel extension with simple finish"},
    {"id": "gelx-tier-2", "name": "GELX Tier 2", "price": 95, "duration_minutes": 135, "category": "GELX", "tier": 2,
     "description": "Gel extension with moderate design work"},
    {"id": "gelx-tier-3", "name": "GELX Tier 3", "price": 105, "duration_minutes": 150, "category": "GELX", "tier": 3,
     "description": "Advanced gel extension with detailed artwork"},
    {"id": "gelx-tier-4", "name": "GELX Tier 4", "price": 115, "duration_minutes": 165, "category": "GELX", "tier": 4,
     "description": "Premium gel extension with complex designs"},
    {"id": "soak-off", "name": "Soak Off", "price": 20, "duration_minutes": 30, "category": "Other",
     "description": "Safe removal of existing nail enhancements"},
    {"id": "removals", "name": "Removals", "price": 0, "duration_minutes": 15, "category": "Other",
     "description": "Quick removal service"},
]


def list_active_technicians(db: Session) -> List[Technician]:
    return (
        db.query(Technician)
        .filter(Technician.is_active == True)  # noqa: E712
        .order_by(Technician.name)
        .all()
    )


def get_technician(db: Session, technician_id: str) -> Technician:
    technician = db.query(Technician).filter(Technician.id == technician_id).first()
    if not technician:
        raise NotFound("Technician not found")
    return technician


def find_service(db: Session, technician_id: Optional[str], name: str) -> Optional[StudioService]:
    """Look a service up by name in a technician's menu, or the studio menu."""
    q = db.query(StudioService).filter(StudioService.name == name)
    if technician_id:
        q = q.filter(StudioService.technician_id == technician_id)
    else:
        q = q.filter(StudioService.technician_id.is_(None))
    return q.first()


def _service_rows(services: List[dict]) -> List[StudioService]:
    return [StudioService(**data) for data in services]


def create_technician(db: Session, technician_id: str, services: List[dict], **fields) -> Technician:
    if db.query(Technician).filter(Technician.id == technician_id).first():
        raise AlreadyExists(f"Technician {technician_id!r} already exists")
    technician = Technician(id=technician_id, rating=0, total_reviews=0, **fields)
    technician.services = _service_rows(services)
    db.add(technician)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise AlreadyExists(f"Technician {technician_id!r} already exists")
    db.refresh(technician)
    logger.info(f"Created technician {technician.id} ({technician.name}) with {len(services)} service(s)")
    return technician


def update_technician(db: Session, technician_id: str, services: Optional[List[dict]] = None, **updates) -> Technician:
    technician = get_technician(db, technician_id)
    for field, value in updates.items():
        setattr(technician, field, value)
    if services is not None:
        technician.services = _service_rows(services)
    db.commit()
    db.refresh(technician)
    logger.info(f"Updated technician {technician.id}")
    return technician


def seed_default_technician(db: Session) -> Technician:
    """Create the default studio technician and its menu; no-op when present."""
    existing = db.query(Technician).filter(Technician.id == DEFAULT_TECHNICIAN_ID).first()
    if existing:
        return existing
    return create_technician(
        db,
        DEFAULT_TECHNICIAN_ID,
        DEFAULT_SERVICES,
        name=settings.studio_name,
        email=settings.admin_emails[0] if settings.admin_emails else "admin@example.com",
        business_name=f"{settings.studio_name} Professional Nail Studio",
        description="Professional nail artistry with a focus on creative designs and quality gel extensions.",
        specialties=["Gel Extensions", "Nail Art & Design", "French Manicures", "Ombre Designs", "3D Nail Art"],
        is_active=True,
        is_owner=True,
    )


def can_manage_calendar(db: Session, ctx: SessionContext, technician_id: Optional[str]) -> bool:
    if ctx.is_admin:
        return True
    if technician_id is None or ctx.role != "technician":
        return False
    technician = db.query(Technician).filter(Technician.id == technician_id).first()
    return bool(technician and technician.is_active and technician.email.lower() == ctx.email.lower())


def require_calendar_manager(db: Session, ctx: SessionContext, technician_id: Optional[str]) -> None:
    if not can_manage_calendar(db, ctx, technician_id):
        logger.warning(f"{ctx.email} may not manage the calendar of {technician_id or 'the studio'}")
        raise PermissionDenied("You cannot manage this calendar")


def seed_studio_menu(db: Session) -> List[StudioService]:
    """Studio-wide menu used when bookings are made without a technician."""
    existing = db.query(StudioService).filter(StudioService.technician_id.is_(None)).all()
    if existing:
        return existing
    rows = _service_rows(DEFAULT_SERVICES)
    db.add_all(rows)
    db.commit()
    logger.info(f"Seeded studio menu with {len(rows)} service(s)")
    return rows
