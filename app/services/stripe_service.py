"""
Stripe service for checkout sessions and webhook verification.

StripeService is built once at application start-up, initialized, and handed
to route handlers through a dependency. It holds its own API key and passes
it per request instead of setting the global stripe.api_key.
"""
import json
import logging
from typing import Dict, Optional
import stripe

from app.core import config
from app.core.enums import PlanType, UserType
from app.core.errors import UnavailableError, ValidationError
from app.core.plans import PLAN_NAMES, get_plan_price

logger = logging.getLogger(__name__)

WEBHOOK_TOLERANCE_SECONDS = 300


class StripeService:
    def __init__(
        self,
        secret_key: Optional[str],
        webhook_secret: Optional[str],
        price_ids: Optional[Dict[PlanType, Optional[str]]] = None,
        frontend_url: str = "http://localhost:8081",
        app_env: str = "development",
    ):
        self.secret_key = secret_key
        self.webhook_secret = webhook_secret
        self.price_ids = price_ids or {}
        self.frontend_url = frontend_url.rstrip("/")
        self.app_env = app_env

        self._initialized = False
        self._available = False
        self._error: Optional[str] = None

    @classmethod
    def from_config(cls) -> "StripeService":
        return cls(
            secret_key=config.STRIPE_SECRET_KEY,
            webhook_secret=config.STRIPE_WEBHOOK_SECRET,
            price_ids={
                PlanType.ANNUAL: config.STRIPE_PRICE_ID_PARENT_ANNUAL,
                PlanType.MONTHLY: config.STRIPE_PRICE_ID_DOULA_MONTHLY,
            },
            frontend_url=config.FRONTEND_URL,
            app_env=config.APP_ENV,
        )

    def initialize(self) -> Dict:
        """
        Validate configuration. Safe to call more than once; only the first
        call does any work.
        """
        if self._initialized:
            return self.status()

        self._initialized = True

        if not self.secret_key:
            self._error = "STRIPE_SECRET_KEY environment variable is not set"
        elif not self.webhook_secret and self.app_env == "production":
            self._error = "STRIPE_WEBHOOK_SECRET environment variable is required in production"
        else:
            self._available = True

        if self._available:
            logger.info("Stripe service initialized")
        else:
            logger.warning(f"Stripe features disabled: {self._error}")

        return self.status()

    def status(self) -> Dict:
        return {
            "initialized": self._initialized,
            "available": self._available,
            "error": self._error,
        }

    @property
    def available(self) -> bool:
        return self._initialized and self._available

    def _line_item(self, plan_type: PlanType) -> Dict:
        price_id = self.price_ids.get(plan_type)
        if price_id and not price_id.startswith("price_your_"):
            return {"price": price_id, "quantity": 1}

        # No catalog price configured: describe the plan inline
        return {
            "price_data": {
                "currency": "usd",
                "unit_amount": int(get_plan_price(plan_type) * 100),
                "product_data": {"name": PLAN_NAMES[plan_type]},
                "recurring": {"interval": "year" if plan_type == PlanType.ANNUAL else "month"},
            },
            "quantity": 1,
        }

    def create_checkout_session(
        self,
        user_id: int,
        user_type: UserType,
        plan_type: PlanType,
        email: str,
    ) -> Dict[str, str]:
        """
        Create a Stripe Checkout session for the user's subscription.

        Returns:
            Dictionary with 'session_id' and 'checkout_url'

        Raises:
            UnavailableError: Stripe is not configured or the API call failed
        """
        if not self.available:
            raise UnavailableError(
                "Payment processing is currently unavailable. Stripe credentials not configured."
            )

        metadata = {
            "user_id": str(user_id),
            "user_type": UserType(user_type).value,
            "plan_type": PlanType(plan_type).value,
            "email": email,
        }

        try:
            session = stripe.checkout.Session.create(
                api_key=self.secret_key,
                mode="subscription",
                customer_email=email,
                client_reference_id=str(user_id),
                line_items=[self._line_item(PlanType(plan_type))],
                success_url=f"{self.frontend_url}/payment-success?session_id={{CHECKOUT_SESSION_ID}}",
                cancel_url=f"{self.frontend_url}/payment-cancelled",
                metadata=metadata,
                subscription_data={"metadata": metadata},
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe error creating checkout session: user_id={user_id}, error={e}")
            raise UnavailableError("Failed to create payment session") from e

        logger.info(f"Created checkout session: user_id={user_id}, plan={metadata['plan_type']}, session_id={session.id}")
        return {"session_id": session.id, "checkout_url": session.url}

    def verify_webhook(self, payload: bytes, signature: Optional[str]) -> Dict:
        """
        Verify the Stripe-Signature header and parse the event body.

        Returns:
            Event as a plain dictionary

        Raises:
            UnavailableError: no webhook secret configured
            ValidationError: missing or bad signature, or unparsable body
        """
        if not self.webhook_secret:
            logger.error("Webhook received but STRIPE_WEBHOOK_SECRET is not configured")
            raise UnavailableError("Webhook verification is not configured")

        if not signature:
            raise ValidationError("Missing Stripe-Signature header")

        try:
            body = payload.decode("utf-8")
            stripe.WebhookSignature.verify_header(
                body, signature, self.webhook_secret, WEBHOOK_TOLERANCE_SECONDS
            )
            event = json.loads(body)
        except stripe.SignatureVerificationError as e:
            logger.error(f"Webhook signature verification failed: {e}")
            raise ValidationError("Invalid signature") from e
        except ValueError as e:
            logger.error(f"Invalid webhook payload: {e}")
            raise ValidationError("Invalid webhook payload") from e

        if not isinstance(event, dict) or "type" not in event:
            raise ValidationError("Invalid webhook payload")

        logger.info(f"Verified webhook event: {event['type']}, id={event.get('id')}")
        return event
