from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.schemas.base import ActionResponse
from app.schemas.billing import SubscriptionResponse, SubscriptionStatusUpdate
from app.services.subscription_service import get_status, set_status

router = APIRouter(prefix="/subscriptions", tags=["Subscriptions"])


# ✅ SUBSCRIPTION STATUS
@router.get("/{user_id}", status_code=status.HTTP_200_OK, response_model=SubscriptionResponse)
def read_subscription(user_id: int, db: Session = Depends(get_db)):
    return get_status(db, user_id)


# ✅ ADMIN STATUS OVERRIDE (does not touch the profile flag)
@router.put("/{user_id}", status_code=status.HTTP_200_OK, response_model=ActionResponse)
def update_subscription(user_id: int, payload: SubscriptionStatusUpdate, db: Session = Depends(get_db)):
    set_status(db, user_id, payload.status)
    return ActionResponse(message="Subscription updated successfully")
