"""
Reviews parents leave for doulas on completed contracts.
"""
import logging
from typing import List
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.enums import ContractStatus
from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.db.models.contract import Contract
from app.db.models.comment import Comment
from app.db.models.parent_profile import ParentProfile
from app.db.models.doula_profile import DoulaProfile
from app.schemas.contract import CommentCreate

logger = logging.getLogger(__name__)


def display_name(profile: ParentProfile) -> str:
    """Public author name, e.g. 'Jennifer S.'"""
    initial = (profile.last_name or "")[:1].upper()
    return f"{profile.first_name} {initial}." if initial else profile.first_name


def create_comment(db: Session, data: CommentCreate) -> Comment:
    """
    Add a review and refresh the doula's review count in one transaction.

    Raises:
        NotFoundError: contract, parent profile or doula profile missing
        ValidationError: parties do not match the contract, or it is not completed
        ConflictError: the parent already reviewed this contract
    """
    contract = db.query(Contract).filter(Contract.id == data.contract_id).first()
    if not contract:
        raise NotFoundError("Contract not found")

    if contract.parent_id != data.parent_id or contract.doula_id != data.doula_id:
        raise ValidationError("Contract does not belong to this parent and doula")

    if contract.status != ContractStatus.COMPLETED.value:
        raise ValidationError("Comments are only allowed on completed contracts")

    parent = db.query(ParentProfile).filter(ParentProfile.user_id == data.parent_id).first()
    if not parent:
        raise NotFoundError("Parent profile not found")

    doula = db.query(DoulaProfile).filter(DoulaProfile.user_id == data.doula_id).first()
    if not doula:
        raise NotFoundError("Doula profile not found")

    existing = db.query(Comment).filter(
        Comment.contract_id == data.contract_id,
        Comment.parent_id == data.parent_id,
    ).first()
    if existing:
        raise ConflictError("You have already commented on this contract")

    comment = Comment(
        contract_id=data.contract_id,
        parent_id=data.parent_id,
        doula_id=data.doula_id,
        parent_name=display_name(parent),
        comment=data.comment.strip(),
    )
    try:
        db.add(comment)
        db.flush()
        doula.review_count = (
            db.query(func.count(Comment.id)).filter(Comment.doula_id == data.doula_id).scalar()
        )
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ConflictError("You have already commented on this contract") from e
    except Exception:
        db.rollback()
        raise

    db.refresh(comment)
    logger.info(
        f"Comment created: comment_id={comment.id}, contract_id={comment.contract_id}, "
        f"doula_id={comment.doula_id}, review_count={doula.review_count}"
    )
    return comment


def list_doula_comments(db: Session, doula_id: int) -> List[Comment]:
    """Reviews for a doula, newest first."""
    return (
        db.query(Comment)
        .filter(Comment.doula_id == doula_id)
        .order_by(Comment.created_at.desc(), Comment.id.desc())
        .all()
    )
