from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.schemas.contract import CommentCreate, CommentCreateResponse, CommentResponse
from app.services.comment_service import create_comment, list_doula_comments

router = APIRouter(tags=["Comments"])


# ✅ LEAVE A REVIEW
@router.post("/comments", status_code=status.HTTP_201_CREATED, response_model=CommentCreateResponse)
def create(payload: CommentCreate, db: Session = Depends(get_db)):
    comment = create_comment(db, payload)
    return CommentCreateResponse(message="Comment created successfully", comment_id=comment.id)


# ✅ REVIEWS FOR A DOULA (newest first)
@router.get("/doulas/{doula_id}/comments", status_code=status.HTTP_200_OK, response_model=List[CommentResponse])
def list_for_doula(doula_id: int, db: Session = Depends(get_db)):
    return list_doula_comments(db, doula_id)
