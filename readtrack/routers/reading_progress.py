from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from readtrack.db import get_db
from readtrack.deps import get_current_user
from readtrack.domain.reading import queries
from readtrack.domain.reading.progress import update_progress
from readtrack.models.reading_progress import ReadingStatus
from readtrack.models.user import User
from readtrack.schemas.common import dump
from readtrack.schemas.progress import ProgressIn, ProgressOut

router = APIRouter(prefix="/reading-progress", tags=["reading-progress"])

@router.get("")
def list_progress(
    bookId: Optional[int] = None,
    status: Optional[ReadingStatus] = None,
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    rows = queries.list_user_progress(db, me.id, book_id=bookId, status=status)
    return {"success": True, "data": [dump(ProgressOut.model_validate(r)) for r in rows]}

@router.post("")
def submit_progress(body: ProgressIn, db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    result = update_progress(
        db,
        me,
        book_id=body.book_id,
        status=body.status,
        current_page=body.current_page,
        total_pages=body.total_pages,
    )
    message = "Reading progress updated successfully"
    if result.points_awarded:
        message += f". You earned {result.points_awarded} points!"
    return {
        "success": True,
        "data": dump(ProgressOut.model_validate(result.progress)),
        "message": message,
    }
