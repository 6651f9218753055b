"""
Subscription lifecycle.

    NONE -> (checkout created) -> ACTIVE -> CANCELLED | EXPIRED

CANCELLED and EXPIRED are terminal for a given checkout; a new checkout
reactivates the same row (one row per user). Every webhook-driven transition
updates the subscription row and the owner's profile `subscription_active`
flag in a single transaction.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional
from sqlalchemy.orm import Session

from app.core.enums import PlanType, SubscriptionStatus, UserType
from app.core.errors import NotFoundError, ValidationError, InvalidPlanError
from app.core.plans import get_mandated_plan, get_plan_period, get_plan_price
from app.db.base import utcnow
from app.db.models.user import User
from app.db.models.parent_profile import ParentProfile
from app.db.models.doula_profile import DoulaProfile
from app.db.models.subscription import Subscription
from app.services.stripe_service import StripeService

logger = logging.getLogger(__name__)


class MalformedEventError(ValidationError):
    """Webhook event that can never be applied, however often it is redelivered."""
    code = "malformed_event"
    default_message = "Malformed webhook event"


@dataclass
class CheckoutCompletion:
    """The parts of a completed checkout needed to activate a subscription."""
    user_id: int
    user_type: UserType
    plan_type: PlanType
    email: Optional[str] = None
    provider_customer_id: Optional[str] = None
    provider_subscription_id: Optional[str] = None
    checkout_id: Optional[str] = None


def validate_plan(user_type: UserType, plan_type: PlanType) -> None:
    """
    Parents must buy the annual plan and doulas the monthly plan.

    Raises:
        InvalidPlanError: plan does not match the user type
    """
    required = get_mandated_plan(user_type)
    if PlanType(plan_type) != required:
        noun = "Parents" if UserType(user_type) == UserType.PARENT else "Doulas"
        raise InvalidPlanError(f"{noun} must choose {required.value} plan")


def _profile_model(user: User):
    if user.user_type == UserType.PARENT.value:
        return ParentProfile
    elif user.user_type == UserType.DOULA.value:
        return DoulaProfile
    raise MalformedEventError(f"Unknown user type for user_id={user.id}: {user.user_type}")


def _set_profile_subscription_flag(db: Session, user: User, active: bool) -> None:
    """Update the owner's profile flag inside the caller's transaction."""
    model = _profile_model(user)
    updated = (
        db.query(model)
        .filter(model.user_id == user.id)
        .update({model.subscription_active: active}, synchronize_session=False)
    )
    if not updated:
        raise MalformedEventError(f"Profile not found for user_id={user.id}")


def create_checkout(
    db: Session,
    payments: StripeService,
    user_id: int,
    user_type: UserType,
    plan_type: PlanType,
    email: str,
) -> Dict[str, str]:
    """
    Start a checkout for the user's mandated plan. Nothing is stored; the
    subscription is only created once the provider confirms payment.

    Raises:
        InvalidPlanError: plan does not match the user type
        NotFoundError: unknown user or missing profile
        ValidationError: user type mismatch or terms not accepted
        UnavailableError: payment provider unavailable or failing
    """
    validate_plan(user_type, plan_type)

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")

    if user.user_type != UserType(user_type).value:
        raise ValidationError(f"User {user_id} is not a {UserType(user_type).value}")

    model = _profile_model(user)
    profile = db.query(model).filter(model.user_id == user.id).first()
    if not profile:
        raise NotFoundError("Profile not found")

    if not profile.accepted_terms:
        raise ValidationError("Terms and conditions must be accepted before subscribing")

    return payments.create_checkout_session(user.id, user_type, plan_type, email)


def on_checkout_completed(db: Session, completion: CheckoutCompletion, now: Optional[datetime] = None) -> Subscription:
    """
    Activate (insert or update) the user's subscription after payment.

    Redelivery of the same checkout is detected through provider_checkout_id
    and changes nothing, even if the subscription was cancelled since.

    Raises:
        MalformedEventError: unknown user, mismatched user type or missing profile
    """
    now = now or utcnow()

    user = db.query(User).filter(User.id == completion.user_id).first()
    if not user:
        raise MalformedEventError(f"User not found for checkout: user_id={completion.user_id}")

    if user.user_type != UserType(completion.user_type).value:
        raise MalformedEventError(
            f"Checkout user type {completion.user_type.value} does not match user_id={user.id}"
        )

    try:
        validate_plan(completion.user_type, completion.plan_type)
    except InvalidPlanError as e:
        raise MalformedEventError(e.message) from e

    try:
        subscription = db.query(Subscription).filter(Subscription.user_id == user.id).first()

        if subscription and completion.checkout_id and subscription.provider_checkout_id == completion.checkout_id:
            logger.info(f"Checkout already applied: user_id={user.id}, checkout_id={completion.checkout_id}")
            return subscription

        if not subscription:
            logger.info(f"Creating new subscription: user_id={user.id}")
            subscription = Subscription(user_id=user.id)
            db.add(subscription)
        else:
            logger.info(f"Updating existing subscription: user_id={user.id}, subscription_id={subscription.id}")

        plan_type = PlanType(completion.plan_type)
        subscription.status = SubscriptionStatus.ACTIVE.value
        subscription.plan_type = plan_type.value
        subscription.amount = get_plan_price(plan_type)
        subscription.provider_customer_id = completion.provider_customer_id or subscription.provider_customer_id
        subscription.provider_subscription_id = completion.provider_subscription_id
        subscription.provider_checkout_id = completion.checkout_id
        subscription.current_period_start = now
        subscription.current_period_end = now + get_plan_period(plan_type)

        _set_profile_subscription_flag(db, user, True)

        db.commit()
    except Exception:
        db.rollback()
        logger.error(f"Failed to activate subscription: user_id={user.id}", exc_info=True)
        raise

    db.refresh(subscription)
    logger.info(
        f"Subscription activated: user_id={user.id}, plan={subscription.plan_type}, "
        f"period_end={subscription.current_period_end.isoformat()}"
    )
    return subscription


def on_subscription_cancelled(db: Session, provider_subscription_id: str) -> Optional[Subscription]:
    """
    Cancel the subscription the provider id refers to.

    Returns:
        The cancelled subscription, or None when the id is unknown (no-op)
    """
    subscription = db.query(Subscription).filter(
        Subscription.provider_subscription_id == provider_subscription_id
    ).first()

    if not subscription:
        logger.warning(f"No subscription found for cancellation event: provider_subscription_id={provider_subscription_id}")
        return None

    if subscription.status != SubscriptionStatus.ACTIVE.value:
        logger.info(f"Subscription already {subscription.status}: user_id={subscription.user_id}")
        return subscription

    user = db.query(User).filter(User.id == subscription.user_id).first()

    try:
        subscription.status = SubscriptionStatus.CANCELLED.value
        _set_profile_subscription_flag(db, user, False)
        db.commit()
    except Exception:
        db.rollback()
        logger.error(f"Failed to cancel subscription: user_id={subscription.user_id}", exc_info=True)
        raise

    db.refresh(subscription)
    logger.info(f"Subscription cancelled: user_id={subscription.user_id}, provider_subscription_id={provider_subscription_id}")
    return subscription


def renew_subscription(
    db: Session,
    provider_subscription_id: str,
    period_end: Optional[datetime] = None,
    now: Optional[datetime] = None,
) -> Optional[Subscription]:
    """
    Extend an active subscription after a renewal payment.

    The new end is the provider's period end when given, otherwise one plan
    period from now. The end never moves backwards, so redelivery is harmless.
    Cancelled and expired subscriptions are left alone.
    """
    now = now or utcnow()

    subscription = db.query(Subscription).filter(
        Subscription.provider_subscription_id == provider_subscription_id
    ).first()

    if not subscription:
        logger.warning(f"Renewal for unknown subscription: provider_subscription_id={provider_subscription_id}")
        return None

    if subscription.status != SubscriptionStatus.ACTIVE.value:
        logger.warning(f"Renewal ignored for {subscription.status} subscription: user_id={subscription.user_id}")
        return subscription

    new_end = period_end or now + get_plan_period(PlanType(subscription.plan_type))
    if subscription.current_period_end and subscription.current_period_end >= new_end:
        logger.info(f"Renewal already applied: user_id={subscription.user_id}")
        return subscription

    try:
        subscription.current_period_start = now
        subscription.current_period_end = new_end
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(subscription)
    logger.info(f"Subscription renewed: user_id={subscription.user_id}, period_end={new_end.isoformat()}")
    return subscription


def expire_lapsed_subscriptions(db: Session, now: Optional[datetime] = None) -> List[int]:
    """
    Move active subscriptions whose period has ended to EXPIRED.

    Each subscription is expired in its own transaction together with its
    profile flag.

    Returns:
        User IDs whose subscriptions were expired
    """
    now = now or utcnow()

    lapsed = (
        db.query(Subscription)
        .filter(
            Subscription.status == SubscriptionStatus.ACTIVE.value,
            Subscription.current_period_end.isnot(None),
            Subscription.current_period_end < now,
        )
        .order_by(Subscription.id)
        .all()
    )

    expired_user_ids = []
    for subscription in lapsed:
        user_id = subscription.user_id
        user = db.query(User).filter(User.id == user_id).first()
        try:
            subscription.status = SubscriptionStatus.EXPIRED.value
            _set_profile_subscription_flag(db, user, False)
            db.commit()
        except Exception:
            db.rollback()
            logger.error(f"Failed to expire subscription: user_id={user_id}", exc_info=True)
            continue
        expired_user_ids.append(user_id)
        logger.info(f"Subscription expired: user_id={user_id}")

    logger.info(f"Expiry sweep complete: expired={len(expired_user_ids)}, checked={len(lapsed)}")
    return expired_user_ids


def get_status(db: Session, user_id: int) -> Subscription:
    """
    Raises:
        NotFoundError: the user has never completed a checkout
    """
    subscription = db.query(Subscription).filter(Subscription.user_id == user_id).first()
    if not subscription:
        raise NotFoundError("Subscription not found")
    return subscription


def set_status(db: Session, user_id: int, status: SubscriptionStatus) -> Subscription:
    """
    Administrative override of the subscription status.

    Unlike the webhook transitions this does not touch the profile's
    subscription_active flag.
    """
    subscription = get_status(db, user_id)
    old_status = subscription.status
    new_status = SubscriptionStatus(status).value

    subscription.status = new_status
    db.commit()
    db.refresh(subscription)

    logger.info(f"Subscription status overridden: user_id={user_id}, old_status={old_status}, new_status={new_status}")
    if old_status != new_status:
        logger.warning(f"Profile subscription flag not updated by status override: user_id={user_id}")

    return subscription
