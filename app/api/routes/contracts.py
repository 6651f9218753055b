"""
Contract endpoints.
"""
from typing import List
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.schemas.base import ActionResponse
from app.schemas.contract import (
    CommentEligibilityResponse,
    ContractCreate,
    ContractCreateResponse,
    ContractResponse,
    ContractUpdate,
)
from app.services.contract_service import (
    create_contract,
    get_comment_eligibility,
    get_contract,
    list_user_contracts,
    update_contract,
)

router = APIRouter(prefix="/contracts", tags=["Contracts"])
users_router = APIRouter(prefix="/users", tags=["Contracts"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ContractCreateResponse)
def create(payload: ContractCreate, db: Session = Depends(get_db)):
    contract = create_contract(db, payload)
    return ContractCreateResponse(message="Contract created successfully", contract_id=contract.id)


# Declared before /{contract_id} so the path is not parsed as an id
@router.get("/comment-eligibility", status_code=status.HTTP_200_OK, response_model=CommentEligibilityResponse)
def comment_eligibility(
    parent_id: int = Query(..., alias="parentId"),
    doula_id: int = Query(..., alias="doulaId"),
    db: Session = Depends(get_db),
):
    """Whether the parent may review the doula, and on which contract."""
    return get_comment_eligibility(db, parent_id, doula_id)


@router.get("/{contract_id}", status_code=status.HTTP_200_OK, response_model=ContractResponse)
def read(contract_id: int, db: Session = Depends(get_db)):
    return get_contract(db, contract_id)


@router.put("/{contract_id}", status_code=status.HTTP_200_OK, response_model=ActionResponse)
def update(contract_id: int, payload: ContractUpdate, db: Session = Depends(get_db)):
    update_contract(db, contract_id, payload)
    return ActionResponse(message="Contract updated successfully")


@users_router.get("/{user_id}/contracts", status_code=status.HTTP_200_OK, response_model=List[ContractResponse])
def list_for_user(user_id: int, db: Session = Depends(get_db)):
    return list_user_contracts(db, user_id)
