"""
Parent profile model - what a new parent is looking for in a doula.
"""
from sqlalchemy import (
    Column, Integer, String, Boolean, Date, Time, DateTime, ForeignKey, JSON, CheckConstraint
)
from sqlalchemy.sql import func
from app.db.base import Base


class ParentProfile(Base):
    __tablename__ = "parent_profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False, index=True)

    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)

    # Location
    state = Column(String, nullable=False, index=True)
    town = Column(String, nullable=False)
    zip_code = Column(String, nullable=False)

    # Needs
    service_categories = Column(JSON, nullable=False, default=list)  # birth | postpartum
    financing_type = Column(JSON, nullable=False, default=list)  # self | carrot | medicaid
    service_period_start = Column(Date, nullable=True)
    service_period_end = Column(Date, nullable=True)
    preferred_languages = Column(JSON, nullable=False, default=list)
    desired_days = Column(JSON, nullable=False, default=list)
    desired_start_time = Column(Time, nullable=True)
    desired_end_time = Column(Time, nullable=True)

    accepted_terms = Column(Boolean, nullable=False, default=False)
    subscription_active = Column(Boolean, nullable=False, default=False, index=True)

    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint(
            "service_period_end IS NULL OR service_period_start IS NULL "
            "OR service_period_end >= service_period_start",
            name="ck_parent_service_period",
        ),
    )

    def __repr__(self):
        return f"<ParentProfile(user_id={self.user_id}, state='{self.state}')>"
