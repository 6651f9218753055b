from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey
from sqlalchemy.sql import func
from app.db.base import Base

class Subscription(Base):
    __tablename__ = "subscriptions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)

    plan_type = Column(String, nullable=False)  # annual | monthly
    status = Column(String, nullable=False, default="active")  # active | cancelled | expired
    amount = Column(Numeric(10, 2), nullable=False)

    provider_customer_id = Column(String, nullable=True)
    provider_subscription_id = Column(String, nullable=True, index=True)
    provider_checkout_id = Column(String, nullable=True)  # checkout session that last activated this row

    current_period_start = Column(DateTime, nullable=True)
    current_period_end = Column(DateTime, nullable=True)

    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)
