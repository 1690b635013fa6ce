import logging
from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from readtrack.core.exceptions import InternalError, NotFound, ValidationError
from readtrack.core.timeutils import utcnow
from readtrack.db import get_db, transaction
from readtrack.deps import get_current_user
from readtrack.models.book import Book
from readtrack.models.comment import Comment, CommentKind
from readtrack.models.summary import Summary
from readtrack.models.user import User
from readtrack.schemas.comment import CommentIn, CommentOut
from readtrack.schemas.common import dump

router = APIRouter(prefix="/comments", tags=["comments"])
log = logging.getLogger("comments")

@router.post("", status_code=201)
def create_comment(body: CommentIn, db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    content = (body.content or "").strip()
    if not content:
        raise ValidationError("Content is required")
    # exactamente un destino: libro o resumen
    if (body.book_id is None) == (body.summary_id is None):
        raise ValidationError("Provide either bookId or summaryId")
    if body.book_id is not None and db.get(Book, body.book_id) is None:
        raise NotFound("Book not found")
    if body.summary_id is not None and db.get(Summary, body.summary_id) is None:
        raise NotFound("Summary not found")

    comment = Comment(
        content=content,
        kind=CommentKind.comment.value,
        author_id=me.id,
        book_id=body.book_id,
        summary_id=body.summary_id,
        created_at=utcnow(),
    )
    try:
        with transaction(db):
            db.add(comment)
    except SQLAlchemyError as e:
        log.exception("create_comment failed: %s", e)
        raise InternalError("Failed to create comment") from e
    db.refresh(comment)
    return {"success": True, "data": dump(CommentOut.model_validate(comment))}
