from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from app.db.base import Base

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    user_type = Column(String, nullable=False)  # parent | doula, fixed at registration
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
