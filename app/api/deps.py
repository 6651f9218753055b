"""
Shared route dependencies.

The payment service and email sender are built once in the application
lifespan and stored on app.state; tests override these dependencies.
"""
from fastapi import Request

from app.core.errors import UnavailableError
from app.db.session import get_db
from app.services.email_service import EmailSender
from app.services.stripe_service import StripeService

__all__ = ["get_db", "get_payment_service", "get_email_sender"]


def get_payment_service(request: Request) -> StripeService:
    service = getattr(request.app.state, "payments", None)
    if service is None:
        raise UnavailableError("Payment processing is currently unavailable")
    return service


def get_email_sender(request: Request) -> EmailSender:
    sender = getattr(request.app.state, "mailer", None)
    if sender is None:
        raise UnavailableError("Email delivery is not configured")
    return sender
