"""
Unit tests for StripeService configuration and webhook verification.
"""
import json

import pytest

from app.core.enums import PlanType
from app.core.errors import UnavailableError, ValidationError
from app.services.stripe_service import StripeService
from tests.conftest import WEBHOOK_SECRET, sign_payload


def test_initialize_without_key():
    service = StripeService(secret_key=None, webhook_secret=None)

    status = service.initialize()

    assert status == {
        "initialized": True,
        "available": False,
        "error": "STRIPE_SECRET_KEY environment variable is not set",
    }
    assert service.available is False


def test_production_requires_webhook_secret():
    service = StripeService(secret_key="sk_live_x", webhook_secret=None, app_env="production")

    assert service.initialize()["available"] is False


def test_not_available_before_initialize():
    service = StripeService(secret_key="sk_test", webhook_secret=WEBHOOK_SECRET)

    assert service.status()["initialized"] is False
    assert service.available is False

    with pytest.raises(UnavailableError):
        service.create_checkout_session(1, "parent", "annual", "a@example.com")


def test_initialize_is_idempotent():
    service = StripeService(secret_key="sk_test", webhook_secret=WEBHOOK_SECRET)

    first = service.initialize()
    service.secret_key = None

    assert service.initialize() == first
    assert service.available is True


def test_line_item_uses_configured_price():
    service = StripeService(
        secret_key="sk_test",
        webhook_secret=WEBHOOK_SECRET,
        price_ids={PlanType.ANNUAL: "price_123", PlanType.MONTHLY: None},
    )

    assert service._line_item(PlanType.ANNUAL) == {"price": "price_123", "quantity": 1}
    monthly = service._line_item(PlanType.MONTHLY)
    assert monthly["price_data"]["recurring"] == {"interval": "month"}
    assert monthly["price_data"]["unit_amount"] == 9900


def test_verify_webhook(payments):
    payload = json.dumps({"id": "evt_1", "type": "customer.created", "data": {"object": {}}})

    event = payments.verify_webhook(payload.encode("utf-8"), sign_payload(payload))

    assert event["type"] == "customer.created"


def test_verify_webhook_rejects_stale_timestamp(payments):
    payload = json.dumps({"id": "evt_1", "type": "customer.created"})

    with pytest.raises(ValidationError):
        payments.verify_webhook(payload.encode("utf-8"), sign_payload(payload, timestamp=1000000000))


def test_verify_webhook_requires_type(payments):
    payload = json.dumps({"id": "evt_1"})

    with pytest.raises(ValidationError):
        payments.verify_webhook(payload.encode("utf-8"), sign_payload(payload))


def test_verify_webhook_without_secret():
    service = StripeService(secret_key="sk_test", webhook_secret=None)
    service.initialize()

    with pytest.raises(UnavailableError):
        service.verify_webhook(b"{}", "t=1,v1=abc")
