"""
Profile read/update endpoints, one resource per user type.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.schemas.base import ActionResponse
from app.schemas.profile import (
    DoulaProfileResponse,
    DoulaProfileUpdate,
    ParentProfileResponse,
    ParentProfileUpdate,
)
from app.services.profile_service import (
    get_doula_profile,
    get_parent_profile,
    update_doula_profile,
    update_parent_profile,
)

parents_router = APIRouter(prefix="/parents", tags=["Parents"])
doulas_router = APIRouter(prefix="/doulas", tags=["Doulas"])


@parents_router.get("/{user_id}", status_code=status.HTTP_200_OK, response_model=ParentProfileResponse)
def read_parent(user_id: int, db: Session = Depends(get_db)):
    return get_parent_profile(db, user_id)


@parents_router.put("/{user_id}", status_code=status.HTTP_200_OK, response_model=ActionResponse)
def edit_parent(user_id: int, payload: ParentProfileUpdate, db: Session = Depends(get_db)):
    update_parent_profile(db, user_id, payload)
    return ActionResponse(message="Profile updated successfully")


@doulas_router.get("/{user_id}", status_code=status.HTTP_200_OK, response_model=DoulaProfileResponse)
def read_doula(user_id: int, db: Session = Depends(get_db)):
    return get_doula_profile(db, user_id)


@doulas_router.put("/{user_id}", status_code=status.HTTP_200_OK, response_model=ActionResponse)
def edit_doula(user_id: int, payload: DoulaProfileUpdate, db: Session = Depends(get_db)):
    update_doula_profile(db, user_id, payload)
    return ActionResponse(message="Profile updated successfully")
