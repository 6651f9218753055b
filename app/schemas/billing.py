"""
Pydantic schemas for payment and subscription endpoints.
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, EmailStr, Field

from app.core.enums import PlanType, SubscriptionStatus, UserType
from app.schemas.base import CamelModel


class CreatePaymentSessionRequest(CamelModel):
    """Request schema for creating checkout session."""
    user_id: int = Field(..., gt=0)
    user_type: UserType
    plan_type: PlanType = Field(..., description="Plan type: 'annual' for parents or 'monthly' for doulas")
    email: EmailStr

    class Config:
        json_schema_extra = {
            "example": {
                "userId": 42,
                "userType": "parent",
                "planType": "annual",
                "email": "jane.doe@example.com"
            }
        }


class CreatePaymentSessionResponse(CamelModel):
    """Response schema for checkout session creation."""
    success: bool = True
    session_id: str = Field(..., description="Stripe checkout session ID")
    checkout_url: str = Field(..., description="Stripe checkout session URL")

    class Config:
        json_schema_extra = {
            "example": {
                "success": True,
                "sessionId": "cs_test_...",
                "checkoutUrl": "https://checkout.stripe.com/c/pay/cs_test_..."
            }
        }


class WebhookAck(BaseModel):
    received: bool = True


class SubscriptionResponse(CamelModel):
    id: int
    user_id: int
    plan_type: str
    status: str
    amount: Decimal
    provider_customer_id: Optional[str] = None
    provider_subscription_id: Optional[str] = None
    current_period_start: Optional[datetime] = None
    current_period_end: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SubscriptionStatusUpdate(CamelModel):
    status: SubscriptionStatus
