"""
Matching endpoints.

Both directions return the compatible, subscribed counterparts of the
given user in insertion order.
"""
from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.schemas.profile import DoulaMatchResponse, ParentMatchResponse
from app.services.matching_service import find_doulas_for_parent, find_parents_for_doula

router = APIRouter(prefix="/matching", tags=["Matching"])


@router.get("/doulas/{user_id}", status_code=status.HTTP_200_OK, response_model=List[DoulaMatchResponse])
def doulas_for_parent(user_id: int, db: Session = Depends(get_db)):
    """Doulas a parent can connect with."""
    return find_doulas_for_parent(db, user_id)


@router.get("/parents/{user_id}", status_code=status.HTTP_200_OK, response_model=List[ParentMatchResponse])
def parents_for_doula(user_id: int, db: Session = Depends(get_db)):
    """Parents a doula can connect with."""
    return find_parents_for_doula(db, user_id)
