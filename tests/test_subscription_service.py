"""
Unit tests for the subscription lifecycle.
Tests activation, idempotent redelivery, cancellation, renewal and expiry.
"""
from datetime import timedelta
from decimal import Decimal

import pytest

from app.core.enums import PlanType, SubscriptionStatus, UserType
from app.core.errors import InvalidPlanError, NotFoundError, UnavailableError, ValidationError
from app.db.base import utcnow
from app.db.models.subscription import Subscription
from app.services.stripe_service import StripeService
from app.services.subscription_service import (
    CheckoutCompletion,
    MalformedEventError,
    create_checkout,
    expire_lapsed_subscriptions,
    get_status,
    on_checkout_completed,
    on_subscription_cancelled,
    renew_subscription,
    set_status,
    validate_plan,
)


def completion(profile, user_type=UserType.PARENT, plan_type=PlanType.ANNUAL, checkout_id="cs_test_1", sub_id="sub_1"):
    return CheckoutCompletion(
        user_id=profile.user_id,
        user_type=user_type,
        plan_type=plan_type,
        provider_customer_id="cus_1",
        provider_subscription_id=sub_id,
        checkout_id=checkout_id,
    )


def snapshot(subscription):
    return (
        subscription.status,
        subscription.plan_type,
        subscription.amount,
        subscription.provider_subscription_id,
        subscription.provider_checkout_id,
        subscription.current_period_start,
        subscription.current_period_end,
    )


def test_validate_plan():
    validate_plan(UserType.PARENT, PlanType.ANNUAL)
    validate_plan(UserType.DOULA, PlanType.MONTHLY)

    with pytest.raises(InvalidPlanError, match="Parents must choose annual plan"):
        validate_plan(UserType.PARENT, PlanType.MONTHLY)

    with pytest.raises(InvalidPlanError, match="Doulas must choose monthly plan"):
        validate_plan(UserType.DOULA, PlanType.ANNUAL)


def test_activation_sets_period_and_flag(db, make_parent):
    parent = make_parent()
    now = utcnow()

    subscription = on_checkout_completed(db, completion(parent), now=now)

    assert subscription.status == SubscriptionStatus.ACTIVE.value
    assert subscription.plan_type == "annual"
    assert subscription.amount == Decimal("99.00")
    assert subscription.current_period_end - subscription.current_period_start == timedelta(days=365)
    db.refresh(parent)
    assert parent.subscription_active is True


def test_doula_monthly_period(db, make_doula):
    doula = make_doula(subscription_active=False)

    subscription = on_checkout_completed(
        db, completion(doula, user_type=UserType.DOULA, plan_type=PlanType.MONTHLY)
    )

    assert subscription.current_period_end - subscription.current_period_start == timedelta(days=30)
    db.refresh(doula)
    assert doula.subscription_active is True


def test_redelivery_is_idempotent(db, make_parent):
    parent = make_parent()
    event = completion(parent)

    first = snapshot(on_checkout_completed(db, event))
    second = snapshot(on_checkout_completed(db, event, now=utcnow() + timedelta(hours=1)))

    assert first == second
    assert db.query(Subscription).filter(Subscription.user_id == parent.user_id).count() == 1


def test_redelivery_after_cancellation_does_not_reactivate(db, make_parent):
    parent = make_parent()
    event = completion(parent)
    on_checkout_completed(db, event)
    on_subscription_cancelled(db, "sub_1")

    on_checkout_completed(db, event)

    assert get_status(db, parent.user_id).status == SubscriptionStatus.CANCELLED.value
    db.refresh(parent)
    assert parent.subscription_active is False


def test_new_checkout_reactivates_same_row(db, make_parent):
    parent = make_parent()
    first = on_checkout_completed(db, completion(parent))
    on_subscription_cancelled(db, "sub_1")

    second = on_checkout_completed(db, completion(parent, checkout_id="cs_test_2", sub_id="sub_2"))

    assert second.id == first.id
    assert second.status == SubscriptionStatus.ACTIVE.value
    assert second.provider_subscription_id == "sub_2"


def test_checkout_then_cancel(db, make_parent):
    parent = make_parent()
    on_checkout_completed(db, completion(parent))

    cancelled = on_subscription_cancelled(db, "sub_1")

    assert cancelled.status == SubscriptionStatus.CANCELLED.value
    db.refresh(parent)
    assert parent.subscription_active is False


def test_cancel_unknown_subscription_is_noop(db):
    assert on_subscription_cancelled(db, "sub_unknown") is None


def test_activation_rejects_bad_events(db, make_parent, make_doula):
    parent = make_parent()
    doula = make_doula()

    with pytest.raises(MalformedEventError):
        on_checkout_completed(db, CheckoutCompletion(user_id=9999, user_type=UserType.PARENT, plan_type=PlanType.ANNUAL))

    with pytest.raises(MalformedEventError):
        on_checkout_completed(db, completion(parent, plan_type=PlanType.MONTHLY))

    # Metadata claims a parent but the user is a doula
    with pytest.raises(MalformedEventError):
        on_checkout_completed(db, completion(doula, user_type=UserType.PARENT))

    assert db.query(Subscription).count() == 0


def test_activation_is_atomic_when_profile_missing(db):
    from app.db.models.user import User

    user = User(email="orphan@example.com", user_type="parent")
    db.add(user)
    db.commit()

    with pytest.raises(MalformedEventError):
        on_checkout_completed(db, CheckoutCompletion(user_id=user.id, user_type=UserType.PARENT, plan_type=PlanType.ANNUAL))

    assert db.query(Subscription).count() == 0


def test_renewal_extends_period(db, make_parent):
    parent = make_parent()
    start = utcnow()
    on_checkout_completed(db, completion(parent), now=start)
    new_end = start + timedelta(days=730)

    renewed = renew_subscription(db, "sub_1", period_end=new_end)
    again = renew_subscription(db, "sub_1", period_end=new_end)

    assert renewed.current_period_end == new_end
    assert again.current_period_end == new_end


def test_renewal_ignores_cancelled(db, make_parent):
    parent = make_parent()
    subscription = on_checkout_completed(db, completion(parent))
    end = subscription.current_period_end
    on_subscription_cancelled(db, "sub_1")

    result = renew_subscription(db, "sub_1", period_end=end + timedelta(days=365))

    assert result.status == SubscriptionStatus.CANCELLED.value
    assert result.current_period_end == end


def test_expiry_sweep(db, make_parent, make_doula):
    parent = make_parent()
    doula = make_doula(subscription_active=False)
    long_ago = utcnow() - timedelta(days=400)
    on_checkout_completed(db, completion(parent), now=long_ago)
    on_checkout_completed(db, completion(doula, user_type=UserType.DOULA, plan_type=PlanType.MONTHLY, checkout_id="cs_d", sub_id="sub_d"))

    expired = expire_lapsed_subscriptions(db)

    assert expired == [parent.user_id]
    assert get_status(db, parent.user_id).status == SubscriptionStatus.EXPIRED.value
    assert get_status(db, doula.user_id).status == SubscriptionStatus.ACTIVE.value
    db.refresh(parent)
    assert parent.subscription_active is False
    assert expire_lapsed_subscriptions(db) == []


def test_get_status_not_found(db):
    with pytest.raises(NotFoundError):
        get_status(db, 1)


def test_set_status_leaves_profile_flag(db, make_parent):
    parent = make_parent()
    on_checkout_completed(db, completion(parent))

    updated = set_status(db, parent.user_id, SubscriptionStatus.CANCELLED)

    assert updated.status == SubscriptionStatus.CANCELLED.value
    db.refresh(parent)
    assert parent.subscription_active is True


# Checkout creation

class RecordingPayments(StripeService):
    def __init__(self):
        super().__init__(secret_key="sk_test", webhook_secret="whsec_test")
        self.initialize()
        self.calls = []

    def create_checkout_session(self, user_id, user_type, plan_type, email):
        self.calls.append((user_id, user_type, plan_type, email))
        return {"session_id": "cs_test_new", "checkout_url": "https://checkout.stripe.com/c/pay/cs_test_new"}


def test_create_checkout(db, make_parent):
    parent = make_parent()
    payments = RecordingPayments()

    session = create_checkout(db, payments, parent.user_id, UserType.PARENT, PlanType.ANNUAL, "parent@example.com")

    assert session["session_id"] == "cs_test_new"
    assert payments.calls == [(parent.user_id, UserType.PARENT, PlanType.ANNUAL, "parent@example.com")]
    assert db.query(Subscription).count() == 0


def test_create_checkout_rejections(db, make_parent):
    payments = RecordingPayments()
    parent = make_parent(accepted_terms=False)

    with pytest.raises(InvalidPlanError):
        create_checkout(db, payments, parent.user_id, UserType.PARENT, PlanType.MONTHLY, "parent@example.com")

    with pytest.raises(NotFoundError):
        create_checkout(db, payments, 9999, UserType.PARENT, PlanType.ANNUAL, "x@example.com")

    with pytest.raises(ValidationError, match="Terms"):
        create_checkout(db, payments, parent.user_id, UserType.PARENT, PlanType.ANNUAL, "parent@example.com")

    assert payments.calls == []


def test_create_checkout_provider_unavailable(db, make_parent):
    parent = make_parent()
    payments = StripeService(secret_key=None, webhook_secret=None)
    payments.initialize()

    with pytest.raises(UnavailableError):
        create_checkout(db, payments, parent.user_id, UserType.PARENT, PlanType.ANNUAL, "parent@example.com")
