"""
Subscription plan catalog.

Single source of truth for which plan each user type must buy, what it
costs and how long one paid period lasts.
"""
from datetime import timedelta
from decimal import Decimal
from typing import Dict

from app.core.enums import PlanType, UserType

# Each user type may only buy one plan
MANDATED_PLAN: Dict[UserType, PlanType] = {
    UserType.PARENT: PlanType.ANNUAL,
    UserType.DOULA: PlanType.MONTHLY,
}

# Price per period, USD
PLAN_PRICES: Dict[PlanType, Decimal] = {
    PlanType.ANNUAL: Decimal("99.00"),
    PlanType.MONTHLY: Decimal("99.00"),
}

PLAN_PERIOD_DAYS: Dict[PlanType, int] = {
    PlanType.ANNUAL: 365,
    PlanType.MONTHLY: 30,
}

PLAN_NAMES: Dict[PlanType, str] = {
    PlanType.ANNUAL: "Parent Annual Plan ($99/year)",
    PlanType.MONTHLY: "Doula Monthly Plan ($99/month)",
}


def get_mandated_plan(user_type: UserType) -> PlanType:
    """Plan a user of the given type is required to purchase."""
    return MANDATED_PLAN[UserType(user_type)]


def get_plan_price(plan_type: PlanType) -> Decimal:
    return PLAN_PRICES[PlanType(plan_type)]


def get_plan_period(plan_type: PlanType) -> timedelta:
    """Length of one paid period for the plan."""
    return timedelta(days=PLAN_PERIOD_DAYS[PlanType(plan_type)])
