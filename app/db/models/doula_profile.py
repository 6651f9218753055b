"""
Doula profile model - services a certified doula offers.
"""
from sqlalchemy import (
    Column, Integer, String, Boolean, Numeric, DateTime, ForeignKey, JSON, CheckConstraint
)
from sqlalchemy.sql import func
from app.db.base import Base


class DoulaProfile(Base):
    __tablename__ = "doula_profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False, index=True)

    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)

    # Location
    state = Column(String, nullable=False, index=True)
    town = Column(String, nullable=False)
    zip_code = Column(String, nullable=False)
    drive_distance = Column(Integer, nullable=False)  # miles, 1-70

    # Offer
    payment_preferences = Column(JSON, nullable=False, default=list)  # self | carrot | medicaid
    spoken_languages = Column(JSON, nullable=False, default=list)
    hourly_rate_min = Column(Numeric(10, 2), nullable=False)
    hourly_rate_max = Column(Numeric(10, 2), nullable=False)
    service_categories = Column(JSON, nullable=False, default=list)
    certifications = Column(JSON, nullable=False, default=list)

    # Document references (uploads live outside this service)
    profile_picture_url = Column(String, nullable=True)
    certification_documents = Column(JSON, nullable=False, default=list)  # up to 7
    referees = Column(JSON, nullable=False, default=list)  # up to 3 {firstName, lastName, email}

    accepted_terms = Column(Boolean, nullable=False, default=False)
    subscription_active = Column(Boolean, nullable=False, default=False, index=True)

    # Reviews
    rating = Column(Numeric(3, 2), nullable=False, default=0)
    review_count = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint("drive_distance BETWEEN 1 AND 70", name="ck_doula_drive_distance"),
        CheckConstraint(
            "hourly_rate_min >= 0 AND hourly_rate_max >= hourly_rate_min",
            name="ck_doula_hourly_rates",
        ),
        CheckConstraint("rating >= 0 AND rating <= 5", name="ck_doula_rating"),
        CheckConstraint("review_count >= 0", name="ck_doula_review_count"),
    )

    def __repr__(self):
        return f"<DoulaProfile(user_id={self.user_id}, state='{self.state}')>"
