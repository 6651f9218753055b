"""
Registration and profile maintenance for parents and doulas.

A user and its profile are created together in one transaction. The user
type is fixed at registration; a user never owns both profile kinds.
"""
import logging
from typing import Dict, Iterable, List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.enums import UserType
from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.db.models.user import User
from app.db.models.parent_profile import ParentProfile
from app.db.models.doula_profile import DoulaProfile
from app.schemas.profile import (
    DoulaProfileUpdate,
    DoulaRegisterRequest,
    ParentProfileUpdate,
    ParentRegisterRequest,
    check_hourly_rates,
    check_service_period,
    check_time_window,
)
from app.services.otp_service import normalize_email

logger = logging.getLogger(__name__)

# JSON list columns holding enum members
PARENT_ENUM_LISTS = ("service_categories", "financing_type", "desired_days")
DOULA_ENUM_LISTS = ("payment_preferences", "service_categories", "certifications")
NULLABLE_FIELDS = {
    "service_period_start", "service_period_end",
    "desired_start_time", "desired_end_time",
    "profile_picture_url",
}


def _enum_values(values: Optional[Iterable]) -> List:
    return [getattr(v, "value", v) for v in values or []]


def _column_values(data: Dict, enum_lists: Iterable[str]) -> Dict:
    """Convert validated request data into plain column values."""
    values = dict(data)
    for field in enum_lists:
        if field in values and values[field] is not None:
            values[field] = _enum_values(values[field])
    if values.get("referees") is not None:
        values["referees"] = [
            {"firstName": r["first_name"], "lastName": r["last_name"], "email": r["email"]}
            for r in values["referees"]
        ]
    return values


def _create_user_with_profile(db: Session, email: str, user_type: UserType, profile) -> User:
    email = normalize_email(email)

    if db.query(User).filter(User.email == email).first():
        raise ConflictError("Email already registered")

    user = User(email=email, user_type=user_type.value)
    try:
        db.add(user)
        db.flush()
        profile.user_id = user.id
        db.add(profile)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Registration conflict: email={email}, error={e.orig}")
        raise ConflictError("Email already registered") from e
    except Exception:
        db.rollback()
        raise

    db.refresh(user)
    logger.info(f"User registered: user_id={user.id}, user_type={user.user_type}")
    return user


def register_parent(db: Session, data: ParentRegisterRequest) -> User:
    """
    Create a parent user and profile.

    Raises:
        ConflictError: email already registered
    """
    values = _column_values(data.model_dump(exclude={"email"}), PARENT_ENUM_LISTS)
    profile = ParentProfile(subscription_active=False, **values)
    return _create_user_with_profile(db, data.email, UserType.PARENT, profile)


def register_doula(db: Session, data: DoulaRegisterRequest) -> User:
    """
    Create a doula user and profile.

    Raises:
        ConflictError: email already registered
    """
    values = _column_values(data.model_dump(exclude={"email"}), DOULA_ENUM_LISTS)
    profile = DoulaProfile(subscription_active=False, rating=0, review_count=0, **values)
    return _create_user_with_profile(db, data.email, UserType.DOULA, profile)


def get_parent_profile(db: Session, user_id: int) -> ParentProfile:
    profile = db.query(ParentProfile).filter(ParentProfile.user_id == user_id).first()
    if not profile:
        raise NotFoundError("Parent profile not found")
    return profile


def get_doula_profile(db: Session, user_id: int) -> DoulaProfile:
    profile = db.query(DoulaProfile).filter(DoulaProfile.user_id == user_id).first()
    if not profile:
        raise NotFoundError("Doula profile not found")
    return profile


def _apply_update(db: Session, profile, values: Dict) -> None:
    # Explicit nulls only clear optional columns
    values = {k: v for k, v in values.items() if v is not None or k in NULLABLE_FIELDS}
    try:
        for field, value in values.items():
            setattr(profile, field, value)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(profile)


def update_parent_profile(db: Session, user_id: int, data: ParentProfileUpdate) -> ParentProfile:
    """
    Apply a partial update. Range checks run on the merged values, so a new
    end date is validated against the stored start date.

    Subscription state and user type cannot be changed here.
    """
    profile = get_parent_profile(db, user_id)
    values = _column_values(data.model_dump(exclude_unset=True), PARENT_ENUM_LISTS)

    try:
        check_service_period(
            values.get("service_period_start", profile.service_period_start),
            values.get("service_period_end", profile.service_period_end),
        )
        check_time_window(
            values.get("desired_start_time", profile.desired_start_time),
            values.get("desired_end_time", profile.desired_end_time),
        )
    except ValueError as e:
        raise ValidationError(str(e)) from e

    _apply_update(db, profile, values)
    logger.info(f"Parent profile updated: user_id={user_id}, fields={sorted(values)}")
    return profile


def update_doula_profile(db: Session, user_id: int, data: DoulaProfileUpdate) -> DoulaProfile:
    """
    Apply a partial update. Rating and review count are maintained by
    comments and cannot be set here.
    """
    profile = get_doula_profile(db, user_id)
    values = _column_values(data.model_dump(exclude_unset=True), DOULA_ENUM_LISTS)

    try:
        check_hourly_rates(
            values.get("hourly_rate_min", profile.hourly_rate_min),
            values.get("hourly_rate_max", profile.hourly_rate_max),
        )
    except ValueError as e:
        raise ValidationError(str(e)) from e

    _apply_update(db, profile, values)
    logger.info(f"Doula profile updated: user_id={user_id}, fields={sorted(values)}")
    return profile
