"""
Enumerations shared by models, schemas and services.
"""
from enum import Enum


class UserType(str, Enum):
    PARENT = "parent"
    DOULA = "doula"


class ServiceCategory(str, Enum):
    BIRTH = "birth"
    POSTPARTUM = "postpartum"


class FinancingType(str, Enum):
    SELF = "self"
    CARROT = "carrot"
    MEDICAID = "medicaid"


class DayOfWeek(str, Enum):
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"


class CertificationType(str, Enum):
    DOULA_CERTIFICATION = "doula_certification"
    BASIC_LIFE_SUPPORT = "basic_life_support"
    LIABILITY_INSURANCE = "liability_insurance"
    COVID_IMMUNIZATION = "covid_immunization"
    INFANT_SLEEP = "infant_sleep"
    OTHER = "other"


class ContractStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class SubscriptionStatus(str, Enum):
    ACTIVE = "active"
    CANCELLED = "cancelled"
    EXPIRED = "expired"


class PlanType(str, Enum):
    ANNUAL = "annual"
    MONTHLY = "monthly"
