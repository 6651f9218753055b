from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from app.db.base import Base


class Comment(Base):
    """Review left by a parent on a completed contract."""
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, index=True)
    contract_id = Column(Integer, ForeignKey("contracts.id"), nullable=False, index=True)
    parent_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    doula_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    parent_name = Column(String, nullable=False)
    comment = Column(String(160), nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False, index=True)

    # One review per parent per contract
    __table_args__ = (
        UniqueConstraint("contract_id", "parent_id", name="uq_comment_contract_parent"),
    )
