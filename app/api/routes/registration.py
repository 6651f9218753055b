from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.schemas.profile import DoulaRegisterRequest, ParentRegisterRequest, RegisterResponse
from app.services.profile_service import register_doula, register_parent

router = APIRouter(prefix="/auth", tags=["Registration"])


# ✅ PARENT SIGNUP
@router.post("/register-parent", status_code=status.HTTP_201_CREATED, response_model=RegisterResponse)
def create_parent(payload: ParentRegisterRequest, db: Session = Depends(get_db)):
    user = register_parent(db, payload)
    return RegisterResponse(message="Parent registered successfully", user_id=user.id)


# ✅ DOULA SIGNUP
@router.post("/register-doula", status_code=status.HTTP_201_CREATED, response_model=RegisterResponse)
def create_doula(payload: DoulaRegisterRequest, db: Session = Depends(get_db)):
    user = register_doula(db, payload)
    return RegisterResponse(message="Doula registered successfully", user_id=user.id)
