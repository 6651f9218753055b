"""
Checkout and Stripe webhook endpoints.
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Header, Request, status
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_payment_service
from app.schemas.billing import (
    CreatePaymentSessionRequest,
    CreatePaymentSessionResponse,
    WebhookAck,
)
from app.services.billing_service import dispatch_webhook_event
from app.services.stripe_service import StripeService
from app.services.subscription_service import MalformedEventError, create_checkout

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payments", tags=["Payments"])


# ✅ CREATE CHECKOUT SESSION
@router.post("/create-session", status_code=status.HTTP_200_OK, response_model=CreatePaymentSessionResponse)
def create_session(
    payload: CreatePaymentSessionRequest,
    db: Session = Depends(get_db),
    payments: StripeService = Depends(get_payment_service),
):
    """
    Create a Stripe Checkout session for the user's plan.

    Parents must choose the annual plan, doulas the monthly plan.
    """
    session = create_checkout(
        db,
        payments,
        user_id=payload.user_id,
        user_type=payload.user_type,
        plan_type=payload.plan_type,
        email=payload.email,
    )
    return CreatePaymentSessionResponse(
        session_id=session["session_id"],
        checkout_url=session["checkout_url"],
    )


# ✅ STRIPE WEBHOOK
@router.post("/webhook", status_code=status.HTTP_200_OK, response_model=WebhookAck)
async def stripe_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(None),
    db: Session = Depends(get_db),
    payments: StripeService = Depends(get_payment_service),
):
    """
    Apply a signed Stripe event.

    Bad signatures are rejected with 400. Events that can never be applied
    are logged and acknowledged so Stripe stops redelivering them; database
    failures surface as 500 so Stripe retries.
    """
    payload = await request.body()
    event = payments.verify_webhook(payload, stripe_signature)

    try:
        dispatch_webhook_event(event, db)
    except MalformedEventError as e:
        logger.error(f"Unprocessable webhook event acknowledged: type={event.get('type')}, id={event.get('id')}, error={e.message}")

    return WebhookAck()
