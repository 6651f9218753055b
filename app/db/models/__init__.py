"""
Database models module.

This module imports all database models to ensure they are registered with SQLAlchemy's Base.metadata
before table creation.

All models must be imported here to be included in database migrations and table creation.
"""
from app.db.models.user import User
from app.db.models.parent_profile import ParentProfile
from app.db.models.doula_profile import DoulaProfile
from app.db.models.contract import Contract
from app.db.models.comment import Comment
from app.db.models.subscription import Subscription
from app.db.models.email_otp import EmailOtp

__all__ = [
    "User",
    "ParentProfile",
    "DoulaProfile",
    "Contract",
    "Comment",
    "Subscription",
    "EmailOtp",
]
