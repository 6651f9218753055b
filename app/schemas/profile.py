"""
Pydantic schemas for registration, profile and matching endpoints.
"""
from datetime import date, time, datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import EmailStr, Field, field_validator, model_validator

from app.core.enums import CertificationType, DayOfWeek, FinancingType, ServiceCategory
from app.schemas.base import CamelModel

MAX_CERTIFICATION_DOCUMENTS = 7
MAX_REFEREES = 3
MIN_DRIVE_DISTANCE = 1
MAX_DRIVE_DISTANCE = 70


def _unique(values):
    """Drop duplicates, keeping first occurrence order."""
    if values is None:
        return values
    seen = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return seen


def _lower_days(values):
    if isinstance(values, list):
        return [v.lower() if isinstance(v, str) else v for v in values]
    return values


class Referee(CamelModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr


class LocationFields(CamelModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    town: str = Field(..., min_length=1, max_length=100)
    zip_code: str = Field(..., min_length=1, max_length=20)


class ParentRegisterRequest(LocationFields):
    """Request schema for parent registration."""
    email: EmailStr
    service_categories: List[ServiceCategory] = Field(..., min_length=1)
    financing_type: List[FinancingType] = Field(..., min_length=1)
    preferred_languages: List[str] = Field(default_factory=list)
    service_period_start: Optional[date] = None
    service_period_end: Optional[date] = None
    desired_days: List[DayOfWeek] = Field(default_factory=list)
    desired_start_time: Optional[time] = None
    desired_end_time: Optional[time] = None
    accepted_terms: bool = False

    @field_validator(
        "service_categories", "financing_type", "preferred_languages", "desired_days"
    )
    @classmethod
    def dedupe(cls, v):
        return _unique(v)

    @field_validator("desired_days", mode="before")
    @classmethod
    def normalize_days(cls, v):
        return _lower_days(v)

    @model_validator(mode="after")
    def check_ranges(self):
        check_service_period(self.service_period_start, self.service_period_end)
        check_time_window(self.desired_start_time, self.desired_end_time)
        return self

    class Config:
        json_schema_extra = {
            "example": {
                "email": "jane.doe@example.com",
                "firstName": "Jane",
                "lastName": "Doe",
                "state": "California",
                "town": "Los Angeles",
                "zipCode": "90001",
                "serviceCategories": ["birth"],
                "financingType": ["carrot"],
                "preferredLanguages": [],
                "acceptedTerms": True
            }
        }


class DoulaRegisterRequest(LocationFields):
    """Request schema for doula registration."""
    email: EmailStr
    payment_preferences: List[FinancingType] = Field(..., min_length=1)
    drive_distance: int = Field(..., ge=MIN_DRIVE_DISTANCE, le=MAX_DRIVE_DISTANCE, description="Miles")
    spoken_languages: List[str] = Field(..., min_length=1)
    hourly_rate_min: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    hourly_rate_max: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    service_categories: List[ServiceCategory] = Field(..., min_length=1)
    certifications: List[CertificationType] = Field(..., min_length=1)
    profile_picture_url: Optional[str] = None
    certification_documents: List[str] = Field(default_factory=list, max_length=MAX_CERTIFICATION_DOCUMENTS)
    referees: List[Referee] = Field(default_factory=list, max_length=MAX_REFEREES)
    accepted_terms: bool = False

    @field_validator(
        "payment_preferences", "spoken_languages", "service_categories", "certifications"
    )
    @classmethod
    def dedupe(cls, v):
        return _unique(v)

    @model_validator(mode="after")
    def check_rates(self):
        check_hourly_rates(self.hourly_rate_min, self.hourly_rate_max)
        return self


class RegisterResponse(CamelModel):
    success: bool = True
    message: str
    user_id: int


class ParentProfileUpdate(CamelModel):
    """Partial update; omitted fields are left unchanged."""
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    state: Optional[str] = Field(None, min_length=1, max_length=100)
    town: Optional[str] = Field(None, min_length=1, max_length=100)
    zip_code: Optional[str] = Field(None, min_length=1, max_length=20)
    service_categories: Optional[List[ServiceCategory]] = Field(None, min_length=1)
    financing_type: Optional[List[FinancingType]] = Field(None, min_length=1)
    preferred_languages: Optional[List[str]] = None
    service_period_start: Optional[date] = None
    service_period_end: Optional[date] = None
    desired_days: Optional[List[DayOfWeek]] = None
    desired_start_time: Optional[time] = None
    desired_end_time: Optional[time] = None
    accepted_terms: Optional[bool] = None

    @field_validator(
        "service_categories", "financing_type", "preferred_languages", "desired_days"
    )
    @classmethod
    def dedupe(cls, v):
        return _unique(v)

    @field_validator("desired_days", mode="before")
    @classmethod
    def normalize_days(cls, v):
        return _lower_days(v)


class DoulaProfileUpdate(CamelModel):
    """Partial update; omitted fields are left unchanged."""
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    state: Optional[str] = Field(None, min_length=1, max_length=100)
    town: Optional[str] = Field(None, min_length=1, max_length=100)
    zip_code: Optional[str] = Field(None, min_length=1, max_length=20)
    payment_preferences: Optional[List[FinancingType]] = Field(None, min_length=1)
    drive_distance: Optional[int] = Field(None, ge=MIN_DRIVE_DISTANCE, le=MAX_DRIVE_DISTANCE)
    spoken_languages: Optional[List[str]] = Field(None, min_length=1)
    hourly_rate_min: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    hourly_rate_max: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    service_categories: Optional[List[ServiceCategory]] = Field(None, min_length=1)
    certifications: Optional[List[CertificationType]] = Field(None, min_length=1)
    profile_picture_url: Optional[str] = None
    certification_documents: Optional[List[str]] = Field(None, max_length=MAX_CERTIFICATION_DOCUMENTS)
    referees: Optional[List[Referee]] = Field(None, max_length=MAX_REFEREES)
    accepted_terms: Optional[bool] = None

    @field_validator(
        "payment_preferences", "spoken_languages", "service_categories", "certifications"
    )
    @classmethod
    def dedupe(cls, v):
        return _unique(v)


class ParentProfileResponse(CamelModel):
    id: int
    user_id: int
    first_name: str
    last_name: str
    state: str
    town: str
    zip_code: str
    service_categories: List[str]
    financing_type: List[str]
    preferred_languages: List[str]
    service_period_start: Optional[date] = None
    service_period_end: Optional[date] = None
    desired_days: List[str]
    desired_start_time: Optional[time] = None
    desired_end_time: Optional[time] = None
    accepted_terms: bool
    subscription_active: bool
    created_at: Optional[datetime] = None


class DoulaProfileResponse(CamelModel):
    id: int
    user_id: int
    first_name: str
    last_name: str
    state: str
    town: str
    zip_code: str
    drive_distance: int
    payment_preferences: List[str]
    spoken_languages: List[str]
    hourly_rate_min: Decimal
    hourly_rate_max: Decimal
    service_categories: List[str]
    certifications: List[str]
    profile_picture_url: Optional[str] = None
    certification_documents: List[str]
    referees: List[Referee]
    accepted_terms: bool
    subscription_active: bool
    rating: Decimal
    review_count: int
    created_at: Optional[datetime] = None


class DoulaMatchResponse(CamelModel):
    """Doula card shown to a parent."""
    id: int
    user_id: int
    first_name: str
    last_name: str
    state: str
    town: str
    rating: Decimal
    review_count: int
    hourly_rate_min: Decimal
    hourly_rate_max: Decimal
    service_categories: List[str]
    spoken_languages: List[str]
    certifications: List[str]
    profile_picture_url: Optional[str] = None


class ParentMatchResponse(CamelModel):
    """Parent card shown to a doula."""
    id: int
    user_id: int
    first_name: str
    last_name: str
    state: str
    town: str
    service_categories: List[str]
    financing_type: List[str]


def check_service_period(start: Optional[date], end: Optional[date]) -> None:
    if start and end and end < start:
        raise ValueError("Service period end must not be before its start")


def check_time_window(start: Optional[time], end: Optional[time]) -> None:
    if start and end and not start < end:
        raise ValueError("Desired start time must be before end time")


def check_hourly_rates(rate_min: Optional[Decimal], rate_max: Optional[Decimal]) -> None:
    if rate_min is not None and rate_max is not None and rate_max < rate_min:
        raise ValueError("Invalid hourly rates: minimum exceeds maximum")
