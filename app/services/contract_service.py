"""
Contracts between a parent and a doula.

Status only moves forward (active -> completed | cancelled). Completed
contracts are what make a parent eligible to review a doula.
"""
import logging
from typing import Dict, List, Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.core.enums import ContractStatus, UserType
from app.core.errors import NotFoundError, ValidationError
from app.db.models.user import User
from app.db.models.contract import Contract
from app.db.models.comment import Comment
from app.schemas.contract import ContractCreate, ContractUpdate

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS = {
    ContractStatus.ACTIVE.value: {ContractStatus.COMPLETED.value, ContractStatus.CANCELLED.value},
    ContractStatus.COMPLETED.value: set(),
    ContractStatus.CANCELLED.value: set(),
}


def _require_user(db: Session, user_id: int, user_type: UserType) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError(f"{user_type.value.capitalize()} not found")
    if user.user_type != user_type.value:
        raise ValidationError(f"User {user_id} is not a {user_type.value}")
    return user


def create_contract(db: Session, data: ContractCreate) -> Contract:
    """
    Raises:
        NotFoundError: parent or doula does not exist
        ValidationError: a party has the wrong user type
    """
    _require_user(db, data.parent_id, UserType.PARENT)
    _require_user(db, data.doula_id, UserType.DOULA)

    contract = Contract(
        parent_id=data.parent_id,
        doula_id=data.doula_id,
        start_date=data.start_date,
        end_date=data.end_date,
        status=ContractStatus.ACTIVE.value,
    )
    try:
        db.add(contract)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(contract)
    logger.info(f"Contract created: contract_id={contract.id}, parent_id={contract.parent_id}, doula_id={contract.doula_id}")
    return contract


def get_contract(db: Session, contract_id: int) -> Contract:
    contract = db.query(Contract).filter(Contract.id == contract_id).first()
    if not contract:
        raise NotFoundError("Contract not found")
    return contract


def list_user_contracts(db: Session, user_id: int) -> List[Contract]:
    """Contracts where the user is either party, newest first."""
    return (
        db.query(Contract)
        .filter(or_(Contract.parent_id == user_id, Contract.doula_id == user_id))
        .order_by(Contract.start_date.desc(), Contract.id.desc())
        .all()
    )


def update_contract(db: Session, contract_id: int, data: ContractUpdate) -> Contract:
    """
    Change status and/or end date.

    Setting the current status again is a no-op; any other move out of a
    terminal status is rejected.

    Raises:
        NotFoundError: unknown contract
        ValidationError: disallowed status transition or end date before start
    """
    contract = get_contract(db, contract_id)

    new_status = ContractStatus(data.status).value if data.status else None
    if new_status and new_status != contract.status:
        if new_status not in ALLOWED_TRANSITIONS.get(contract.status, set()):
            raise ValidationError(f"Cannot change contract status from {contract.status} to {new_status}")

    if data.end_date and data.end_date < contract.start_date:
        raise ValidationError("Contract end date must not be before its start date")

    old_status = contract.status
    try:
        if new_status:
            contract.status = new_status
        if data.end_date:
            contract.end_date = data.end_date
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(contract)
    logger.info(f"Contract updated: contract_id={contract_id}, old_status={old_status}, new_status={contract.status}")
    return contract


def get_comment_eligibility(db: Session, parent_id: int, doula_id: int) -> Dict:
    """
    Find a completed contract between the pair that has not been reviewed yet.

    Returns:
        Dictionary with can_comment, contract_id, has_existing_comment and message
    """
    completed = (
        db.query(Contract)
        .filter(
            Contract.parent_id == parent_id,
            Contract.doula_id == doula_id,
            Contract.status == ContractStatus.COMPLETED.value,
        )
        .order_by(Contract.id)
        .all()
    )

    if not completed:
        return {
            "can_comment": False,
            "contract_id": None,
            "has_existing_comment": False,
            "message": "A completed contract with this doula is required to leave a comment",
        }

    commented_ids = {
        row.contract_id
        for row in db.query(Comment.contract_id).filter(
            Comment.parent_id == parent_id,
            Comment.contract_id.in_([c.id for c in completed]),
        )
    }

    open_contract: Optional[Contract] = next((c for c in completed if c.id not in commented_ids), None)
    if open_contract:
        return {
            "can_comment": True,
            "contract_id": open_contract.id,
            "has_existing_comment": False,
            "message": "You can leave a comment for this doula",
        }

    return {
        "can_comment": False,
        "contract_id": completed[-1].id,
        "has_existing_comment": True,
        "message": "You have already commented on your contracts with this doula",
    }
