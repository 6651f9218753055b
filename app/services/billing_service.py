"""
Billing service for Stripe webhook event processing.

Translates verified Stripe events into subscription lifecycle transitions.
"""
import logging
from typing import Callable, Dict
from sqlalchemy.orm import Session

from app.core.enums import PlanType, UserType
from app.services.billing_invoice_handlers import handle_invoice_payment_succeeded
from app.services.subscription_service import (
    CheckoutCompletion,
    MalformedEventError,
    on_checkout_completed,
    on_subscription_cancelled,
)

logger = logging.getLogger(__name__)


def parse_checkout_session(session_data: Dict) -> CheckoutCompletion:
    """
    Extract the activation details from a checkout.session object.

    Raises:
        MalformedEventError: metadata is missing or invalid
    """
    metadata = session_data.get("metadata") or {}
    user_id_str = metadata.get("user_id") or session_data.get("client_reference_id")

    try:
        user_id = int(user_id_str)
    except (TypeError, ValueError):
        raise MalformedEventError(f"Cannot identify user from checkout session: user_id={user_id_str!r}")

    try:
        user_type = UserType(metadata.get("user_type"))
        plan_type = PlanType(metadata.get("plan_type"))
    except ValueError:
        raise MalformedEventError(
            f"Invalid plan metadata: user_type={metadata.get('user_type')!r}, plan_type={metadata.get('plan_type')!r}"
        )

    return CheckoutCompletion(
        user_id=user_id,
        user_type=user_type,
        plan_type=plan_type,
        email=metadata.get("email") or session_data.get("customer_email"),
        provider_customer_id=session_data.get("customer"),
        provider_subscription_id=session_data.get("subscription"),
        checkout_id=session_data.get("id"),
    )


def handle_checkout_session_completed(event_data: Dict, db: Session) -> None:
    """Handle checkout.session.completed webhook event."""
    session_data = event_data.get("object", {})
    completion = parse_checkout_session(session_data)

    logger.info(
        f"Processing checkout completion: user_id={completion.user_id}, "
        f"plan={completion.plan_type.value}, session_id={completion.checkout_id}"
    )
    on_checkout_completed(db, completion)


def handle_subscription_deleted(event_data: Dict, db: Session) -> None:
    """Handle customer.subscription.deleted webhook event."""
    subscription_data = event_data.get("object", {})
    subscription_id = subscription_data.get("id")

    if not subscription_id:
        raise MalformedEventError("Subscription cancellation event without subscription id")

    logger.info(f"Processing subscription cancellation: subscription_id={subscription_id}")
    on_subscription_cancelled(db, subscription_id)


EVENT_HANDLERS: Dict[str, Callable[[Dict, Session], None]] = {
    "checkout.session.completed": handle_checkout_session_completed,
    "customer.subscription.deleted": handle_subscription_deleted,
    "invoice.payment_succeeded": handle_invoice_payment_succeeded,
}


def dispatch_webhook_event(event: Dict, db: Session) -> bool:
    """
    Route a verified event to its handler.

    Returns:
        True if the event type is handled, False if it was ignored

    Raises:
        MalformedEventError: event can never be applied
        Exception: anything else (e.g. database errors) - worth a provider retry
    """
    event_type = event.get("type")
    handler = EVENT_HANDLERS.get(event_type)

    if not handler:
        logger.info(f"Ignoring webhook event: type={event_type}, id={event.get('id')}")
        return False

    handler(event.get("data") or {}, db)
    return True
