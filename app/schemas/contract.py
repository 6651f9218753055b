"""
Pydantic schemas for contract and comment endpoints.
"""
from datetime import datetime, timezone
from typing import Optional
from pydantic import Field, field_validator, model_validator

from app.core.enums import ContractStatus
from app.schemas.base import CamelModel

MAX_COMMENT_LENGTH = 160


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Contract dates are stored as naive UTC, like app.db.base.utcnow."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class ContractCreate(CamelModel):
    parent_id: int = Field(..., gt=0)
    doula_id: int = Field(..., gt=0)
    start_date: datetime
    end_date: Optional[datetime] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_dates(cls, v):
        return to_naive_utc(v)

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date and self.end_date < self.start_date:
            raise ValueError("Contract end date must not be before its start date")
        return self


class ContractUpdate(CamelModel):
    """Only status and end date may change after creation."""
    status: Optional[ContractStatus] = None
    end_date: Optional[datetime] = None

    @field_validator("end_date")
    @classmethod
    def normalize_end_date(cls, v):
        return to_naive_utc(v)


class ContractCreateResponse(CamelModel):
    success: bool = True
    message: str
    contract_id: int


class ContractResponse(CamelModel):
    id: int
    parent_id: int
    doula_id: int
    start_date: datetime
    end_date: Optional[datetime] = None
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CommentEligibilityResponse(CamelModel):
    can_comment: bool
    contract_id: Optional[int] = None
    has_existing_comment: bool = False
    message: str


class CommentCreate(CamelModel):
    contract_id: int = Field(..., gt=0)
    parent_id: int = Field(..., gt=0)
    doula_id: int = Field(..., gt=0)
    comment: str = Field(..., min_length=1, max_length=MAX_COMMENT_LENGTH)

    class Config:
        json_schema_extra = {
            "example": {
                "contractId": 7,
                "parentId": 42,
                "doulaId": 51,
                "comment": "Calm, kind and always on time."
            }
        }


class CommentCreateResponse(CamelModel):
    success: bool = True
    message: str
    comment_id: int


class CommentResponse(CamelModel):
    id: int
    contract_id: int
    parent_id: int
    doula_id: int
    parent_name: str
    comment: str
    created_at: Optional[datetime] = None
