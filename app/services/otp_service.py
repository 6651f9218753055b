"""
Email one-time passcode service.

Lifecycle of a code: issued -> verified | expired | attempts exhausted.
Only one code per email exists at a time; issuing a new one deletes the old one.
"""
import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional
from sqlalchemy.orm import Session

from app.core.errors import (
    UnavailableError,
    OtpNotFoundError,
    OtpAlreadyVerifiedError,
    OtpExpiredError,
    TooManyAttemptsError,
    InvalidOtpCodeError,
)
from app.db.base import utcnow
from app.db.models.email_otp import EmailOtp
from app.services.email_service import EmailSender

logger = logging.getLogger(__name__)

OTP_EXPIRATION_MINUTES = 10
OTP_MAX_ATTEMPTS = 5
OTP_LENGTH = 6


def normalize_email(email: str) -> str:
    return email.strip().lower()


def generate_otp_code() -> str:
    """Uniformly random zero-padded code in 000000-999999."""
    return f"{secrets.randbelow(10 ** OTP_LENGTH):0{OTP_LENGTH}d}"


def issue_otp(db: Session, email: str, mailer: EmailSender, now: Optional[datetime] = None) -> EmailOtp:
    """
    Replace any existing code for the email with a fresh one and send it.

    The new record is committed before delivery, so a failed send leaves the
    new (undelivered) code in place rather than reviving the previous one.

    Args:
        db: Database session
        email: Recipient address
        mailer: Outbound email channel
        now: Override for the current time

    Returns:
        The stored EmailOtp

    Raises:
        UnavailableError: email channel not configured (nothing is stored)
        DeliveryError: sending failed after the record was stored
    """
    if not mailer.configured:
        logger.error("OTP requested but email delivery is not configured")
        raise UnavailableError("Email delivery is not configured")

    email = normalize_email(email)
    now = now or utcnow()

    try:
        db.query(EmailOtp).filter(EmailOtp.email == email).delete(synchronize_session=False)

        otp = EmailOtp(
            email=email,
            otp_code=generate_otp_code(),
            created_at=now,
            expires_at=now + timedelta(minutes=OTP_EXPIRATION_MINUTES),
            verified=False,
            attempt_count=0,
        )
        db.add(otp)
        db.commit()
        db.refresh(otp)
    except Exception:
        db.rollback()
        logger.error(f"Failed to store OTP: email={email}", exc_info=True)
        raise

    mailer.send_otp(email, otp.otp_code, OTP_EXPIRATION_MINUTES)

    logger.info(f"OTP issued: email={email}, otp_id={otp.id}, expires_at={otp.expires_at.isoformat()}")
    return otp


def verify_otp(db: Session, email: str, code: str, now: Optional[datetime] = None) -> EmailOtp:
    """
    Check a submitted code.

    Every attempt that reaches the comparison is counted, including the
    successful one.

    Raises:
        OtpNotFoundError: no code issued for this email
        OtpAlreadyVerifiedError: code already used
        OtpExpiredError: past expires_at, regardless of the code
        TooManyAttemptsError: attempt limit already reached
        InvalidOtpCodeError: code does not match
    """
    email = normalize_email(email)
    now = now or utcnow()

    otp = db.query(EmailOtp).filter(EmailOtp.email == email).order_by(EmailOtp.id.desc()).first()

    if not otp:
        logger.warning(f"OTP not found: email={email}")
        raise OtpNotFoundError()

    if otp.verified:
        raise OtpAlreadyVerifiedError()

    if now > otp.expires_at:
        logger.warning(f"OTP expired: email={email}")
        raise OtpExpiredError()

    if otp.attempt_count >= OTP_MAX_ATTEMPTS:
        logger.warning(f"OTP max attempts exceeded: email={email}")
        raise TooManyAttemptsError()

    # Conditional increment so concurrent attempts cannot exceed the limit
    consumed = (
        db.query(EmailOtp)
        .filter(EmailOtp.id == otp.id, EmailOtp.attempt_count < OTP_MAX_ATTEMPTS)
        .update({EmailOtp.attempt_count: EmailOtp.attempt_count + 1}, synchronize_session=False)
    )
    db.commit()
    if not consumed:
        logger.warning(f"OTP max attempts exceeded: email={email}")
        raise TooManyAttemptsError()

    db.refresh(otp)

    if code.strip() != otp.otp_code:
        logger.warning(f"Invalid OTP code: email={email}, attempts={otp.attempt_count}")
        raise InvalidOtpCodeError()

    otp.verified = True
    db.commit()

    logger.info(f"OTP verified: email={email}")
    return otp


def cleanup_expired_otps(db: Session, now: Optional[datetime] = None) -> int:
    """Delete every code whose expiry has passed. Returns the number removed."""
    now = now or utcnow()
    try:
        deleted = (
            db.query(EmailOtp)
            .filter(EmailOtp.expires_at < now)
            .delete(synchronize_session=False)
        )
        db.commit()
    except Exception:
        db.rollback()
        logger.error("OTP cleanup failed", exc_info=True)
        raise

    logger.info(f"Cleaned up expired OTP records: deleted={deleted}")
    return deleted
