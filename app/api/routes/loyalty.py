# app/api/routes/loyalty.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.security import SessionContext, get_session_context, require_admin
from app.core.errors import NotFound
from app.db.base import get_db
from app.db.models.user import User
from app.schemas.loyalty import AwardRequest, AwardResponse, LoyaltyResponse, RedeemRequest, RedeemResponse
from app.services import booking, loyalty

router = APIRouter(prefix="/loyalty", tags=["loyalty"])


def _response(account) -> LoyaltyResponse:
    result = LoyaltyResponse.model_validate(account)
    result.tier_discount = loyalty.tier_discount(account.tier_level)
    return result


@router.get("/me", response_model=LoyaltyResponse)
def my_loyalty(db: Session = Depends(get_db), ctx: SessionContext = Depends(get_session_context)):
    return _response(loyalty.get_account(db, ctx.user_id))


@router.post("/me/redeem", response_model=RedeemResponse)
def redeem(payload: RedeemRequest, db: Session = Depends(get_db), ctx: SessionContext = Depends(get_session_context)):
    redeemed = loyalty.redeem_points(db, ctx.user_id, payload.points)
    account = loyalty.get_account(db, ctx.user_id)
    return RedeemResponse(redeemed=redeemed, points=account.points)


# Admin: award points once an appointment has been done
@router.post("/award", response_model=AwardResponse)
def award(payload: AwardRequest, db: Session = Depends(get_db), admin: SessionContext = Depends(require_admin)):
    appointment = booking.get_appointment(db, payload.appointment_id)
    earned = loyalty.award_points_for_appointment(db, appointment)
    return AwardResponse(appointment_id=appointment.id, user_id=appointment.user_id, points_awarded=earned)


@router.get("/users/{user_id}", response_model=LoyaltyResponse)
def user_loyalty(user_id: int, db: Session = Depends(get_db), admin: SessionContext = Depends(require_admin)):
    if not db.query(User).filter(User.id == user_id).first():
        raise NotFound("User not found")
    return _response(loyalty.get_account(db, user_id))
