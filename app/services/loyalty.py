# app/services/loyalty.py
import logging
import math
from datetime import datetime

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import ValidationFailed
from app.db.models.appointment import Appointment
from app.db.models.loyalty import LoyaltyAccount
from app.services.booking import COMPLETED, CONFIRMED

logger = logging.getLogger(__name__)

# (minimum points, tier), highest first
TIERS = [
    (1000, "Platinum"),
    (500, "Gold"),
    (250, "Silver"),
    (100, "Bronze"),
    (0, "Welcome"),
]

TIER_DISCOUNTS = {
    "Welcome": 0,
    "Bronze": 5,
    "Silver": 10,
    "Gold": 15,
    "Platinum": 20,
}


def points_for_price(price: float) -> int:
    return int(math.floor(price * settings.loyalty_points_per_dollar))


def completion_bonus() -> int:
    return settings.loyalty_completion_bonus


def tier_for_points(points: int) -> str:
    for minimum, tier in TIERS:
        if points >= minimum:
            return tier
    return "Welcome"


def tier_discount(tier_level: str) -> int:
    return TIER_DISCOUNTS.get(tier_level, 0)


def get_account(db: Session, user_id: int) -> LoyaltyAccount:
    """Loyalty account for ``user_id``, created with zero balance on first use."""
    account = db.query(LoyaltyAccount).filter(LoyaltyAccount.user_id == user_id).first()
    if account is None:
        account = LoyaltyAccount(
            user_id=user_id,
            points=0,
            total_spent=0.0,
            appointments_completed=0,
            tier_level="Welcome",
            last_updated=datetime.utcnow(),
        )
        db.add(account)
        db.commit()
        db.refresh(account)
    return account


def award_points_for_appointment(db: Session, appointment: Appointment) -> int:
    if appointment.points_awarded:
        raise ValidationFailed("Points were already awarded for this appointment", field="appointment_id")
    if appointment.status not in (CONFIRMED, COMPLETED):
        raise ValidationFailed(
            f"Points are only awarded for confirmed or completed appointments, not {appointment.status}",
            field="appointment_id",
        )

    price = appointment.price or 0.0
    earned = points_for_price(price) + completion_bonus()

    account = get_account(db, appointment.user_id)
    account.points += earned
    account.total_spent += price
    account.appointments_completed += 1
    account.tier_level = tier_for_points(account.points)
    account.last_updated = datetime.utcnow()
    appointment.points_awarded = True
    db.commit()
    logger.info(
        f"Awarded {earned} points to user {appointment.user_id} for appointment {appointment.id} "
        f"(tier {account.tier_level})"
    )
    return earned


def redeem_points(db: Session, user_id: int, points: int) -> bool:
    if points <= 0:
        raise ValidationFailed("points must be positive", field="points")
    account = get_account(db, user_id)
    if account.points < points:
        logger.info(f"User {user_id} tried to redeem {points} with only {account.points} points")
        return False
    account.points -= points
    account.last_updated = datetime.utcnow()
    db.commit()
    logger.info(f"User {user_id} redeemed {points} points")
    return True
