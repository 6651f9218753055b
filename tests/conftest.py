"""
Shared fixtures: in-memory SQLite database, test client with dependency
overrides, fake email sender and Stripe webhook signing.
"""
import hashlib
import hmac
import json
import time
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.api.deps import get_db, get_email_sender, get_payment_service
from app.core.errors import DeliveryError
from app.core.rate_limit import reset_rate_limits
from app.db.base import Base
from app.db import models  # noqa: F401 - registers every table
from app.db.models.user import User
from app.db.models.parent_profile import ParentProfile
from app.db.models.doula_profile import DoulaProfile
from app.services.stripe_service import StripeService


# Setup in-memory SQLite database for testing
TEST_DATABASE_URL = "sqlite:///:memory:"
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

WEBHOOK_SECRET = "whsec_test_secret"


class FakeMailer:
    """Records sent codes instead of talking to SMTP."""
    configured = True

    def __init__(self):
        self.sent = []

    def send_otp(self, to_email, otp_code, expires_minutes=10):
        self.sent.append((to_email, otp_code))


class FailingMailer(FakeMailer):
    def send_otp(self, to_email, otp_code, expires_minutes=10):
        raise DeliveryError()


class UnconfiguredMailer(FakeMailer):
    configured = False


def sign_payload(payload: str, secret: str = WEBHOOK_SECRET, timestamp: int = None) -> str:
    """Build a Stripe-Signature header for the payload."""
    timestamp = timestamp or int(time.time())
    signature = hmac.new(
        secret.encode("utf-8"),
        f"{timestamp}.{payload}".encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()
    return f"t={timestamp},v1={signature}"


@pytest.fixture(scope="function")
def db():
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=test_engine)
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def payments():
    service = StripeService(
        secret_key="sk_test_123",
        webhook_secret=WEBHOOK_SECRET,
        frontend_url="http://localhost:8081",
    )
    service.initialize()
    return service


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def client(db, payments, mailer):
    """Test client sharing the test session; lifespan is not run."""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_payment_service] = lambda: payments
    app.dependency_overrides[get_email_sender] = lambda: mailer
    reset_rate_limits()

    yield TestClient(app)

    app.dependency_overrides.clear()
    reset_rate_limits()


@pytest.fixture
def post_webhook(client):
    """POST a signed event to the webhook endpoint."""
    def _post(event: dict, signature: str = None):
        payload = json.dumps(event)
        return client.post(
            "/payments/webhook",
            content=payload,
            headers={
                "Content-Type": "application/json",
                "Stripe-Signature": signature or sign_payload(payload),
            },
        )
    return _post


@pytest.fixture
def make_parent(db):
    """Create a parent user with a profile."""
    def _make(email="parent@example.com", subscription_active=False, **fields):
        user = User(email=email, user_type="parent")
        db.add(user)
        db.flush()
        values = {
            "first_name": "Jane",
            "last_name": "Doe",
            "state": "California",
            "town": "Los Angeles",
            "zip_code": "90001",
            "service_categories": ["birth"],
            "financing_type": ["carrot"],
            "preferred_languages": [],
            "desired_days": [],
            "accepted_terms": True,
        }
        values.update(fields)
        profile = ParentProfile(user_id=user.id, subscription_active=subscription_active, **values)
        db.add(profile)
        db.commit()
        db.refresh(profile)
        return profile
    return _make


@pytest.fixture
def make_doula(db):
    """Create a doula user with a profile."""
    def _make(email="doula@example.com", subscription_active=True, **fields):
        user = User(email=email, user_type="doula")
        db.add(user)
        db.flush()
        values = {
            "first_name": "Maria",
            "last_name": "Lopez",
            "state": "California",
            "town": "San Diego",
            "zip_code": "92101",
            "drive_distance": 25,
            "payment_preferences": ["carrot"],
            "spoken_languages": ["English"],
            "hourly_rate_min": Decimal("40.00"),
            "hourly_rate_max": Decimal("80.00"),
            "service_categories": ["birth"],
            "certifications": ["doula_certification"],
            "certification_documents": [],
            "referees": [],
            "accepted_terms": True,
        }
        values.update(fields)
        profile = DoulaProfile(user_id=user.id, subscription_active=subscription_active, **values)
        db.add(profile)
        db.commit()
        db.refresh(profile)
        return profile
    return _make
