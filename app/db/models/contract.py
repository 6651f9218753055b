from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index
from sqlalchemy.sql import func
from app.db.base import Base


class Contract(Base):
    """
    An agreed engagement between one parent and one doula.

    Status only moves forward: active -> completed or active -> cancelled.
    """
    __tablename__ = "contracts"

    id = Column(Integer, primary_key=True, index=True)
    parent_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    doula_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=True)
    status = Column(String, nullable=False, default="active")  # active | completed | cancelled

    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        Index("idx_contract_parent_doula", "parent_id", "doula_id"),
    )

    def __repr__(self):
        return f"<Contract(id={self.id}, parent_id={self.parent_id}, doula_id={self.doula_id}, status='{self.status}')>"
