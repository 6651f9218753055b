"""
Invoice event handlers for Stripe webhooks.

Handles invoice.payment_succeeded for subscription renewals.
"""
import logging
from datetime import datetime, timezone
from typing import Dict, Optional
from sqlalchemy.orm import Session

from app.services.subscription_service import renew_subscription

logger = logging.getLogger(__name__)

# The first invoice of a subscription is covered by checkout.session.completed
RENEWAL_BILLING_REASONS = {"subscription_cycle"}


def _invoice_period_end(invoice_data: Dict) -> Optional[datetime]:
    """Period end of the first invoice line, as naive UTC."""
    lines = (invoice_data.get("lines") or {}).get("data") or []
    if not lines:
        return None
    period_end = (lines[0].get("period") or {}).get("end")
    if not period_end:
        return None
    return datetime.fromtimestamp(period_end, tz=timezone.utc).replace(tzinfo=None)


def handle_invoice_payment_succeeded(event_data: Dict, db: Session) -> None:
    """
    Handle invoice.payment_succeeded webhook event.

    Extends the current period of an active subscription on renewal.
    """
    invoice_data = event_data.get("object", {})
    subscription_id = invoice_data.get("subscription")
    if not subscription_id:
        # Newer API versions nest it under parent.subscription_details
        parent = invoice_data.get("parent") or {}
        subscription_id = (parent.get("subscription_details") or {}).get("subscription")
    billing_reason = invoice_data.get("billing_reason")

    if not subscription_id:
        logger.warning("invoice.payment_succeeded: No subscription ID in invoice")
        return

    if billing_reason not in RENEWAL_BILLING_REASONS:
        logger.info(f"invoice.payment_succeeded: skipping billing_reason={billing_reason}, subscription_id={subscription_id}")
        return

    renew_subscription(db, subscription_id, period_end=_invoice_period_end(invoice_data))

    logger.info(f"Invoice payment succeeded: subscription_id={subscription_id}")
