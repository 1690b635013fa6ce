import logging
from typing import NamedTuple, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from readtrack.core.exceptions import (
    AuthenticationRequired,
    Conflict,
    InsufficientPermissions,
    InternalError,
    NotFound,
    ValidationError,
)
from readtrack.core.roles import Role, STAFF_ROLES, require_role
from readtrack.core.timeutils import utcnow
from readtrack.db import transaction
from readtrack.domain.points.service import POINTS_SUMMARY_CREATED, award_points, rating_bonus
from readtrack.models.book import Book
from readtrack.models.comment import Comment, CommentKind
from readtrack.models.summary import Summary
from readtrack.models.user import User

log = logging.getLogger("summaries")

FEEDBACK_PREFIX = "Teacher Feedback: "
MIN_RATING, MAX_RATING = 1, 5

class RatingResult(NamedTuple):
    summary: Summary
    points_awarded: int
    feedback: Optional[Comment]

def validate_rating(value) -> int:
    """Entero entre 1 y 5 (3.0 se acepta como 3; 3.5, True o '3' no)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError("Rating must be a number between 1 and 5")
    if isinstance(value, float) and not value.is_integer():
        raise ValidationError("Rating must be a whole number between 1 and 5")
    rating = int(value)
    if not (MIN_RATING <= rating <= MAX_RATING):
        raise ValidationError("Rating must be a number between 1 and 5")
    return rating

def get_summary(db: Session, summary_id: int) -> Summary:
    summary = db.get(Summary, summary_id)
    if summary is None:
        raise NotFound("Summary not found")
    return summary

def create_summary(
    db: Session,
    actor: Optional[User],
    *,
    book_id: Optional[int],
    content: Optional[str],
    title: Optional[str] = None,
    is_public: bool = True,
) -> Summary:
    if actor is None:
        raise AuthenticationRequired()
    if not content or not content.strip() or book_id is None:
        raise ValidationError("Content and book ID are required")

    book = db.get(Book, book_id)
    if book is None:
        raise NotFound("Book not found")

    # un resumen por (autor, libro): chequeo a nivel aplicación
    existing = db.execute(
        select(Summary.id).where(Summary.author_id == actor.id, Summary.book_id == book_id)
    ).first()
    if existing:
        raise Conflict("You have already submitted a summary for this book")

    now = utcnow()
    summary = Summary(
        title=(title or "").strip() or f'Summary of "{book.title}" by {actor.name}',
        content=content,
        is_public=is_public,
        author_id=actor.id,
        book_id=book_id,
        created_at=now,
        updated_at=now,
    )
    try:
        with transaction(db):
            db.add(summary)
            db.flush()
            award_points(db, actor.id, POINTS_SUMMARY_CREATED, reason=f"summary={summary.id}")
    except SQLAlchemyError as e:
        log.exception("create_summary failed: %s", e)
        raise InternalError("Failed to create summary") from e

    db.refresh(summary)
    return summary

def rate_summary(
    db: Session,
    actor: Optional[User],
    summary_id: int,
    *,
    rating,
    feedback: Optional[str] = None,
) -> RatingResult:
    """
    Califica un resumen (TEACHER/ADMIN). La calificación se sobreescribe si ya
    existía, pero el bono al autor (rating x 10) se paga solo la primera vez.
    """
    require_role(actor, *STAFF_ROLES)
    value = validate_rating(rating)
    summary = get_summary(db, summary_id)

    now = utcnow()
    bonus = 0
    comment = None
    try:
        with transaction(db):
            # el primer rating se decide en la base (rating IS NULL), no con
            # el objeto cargado: dos calificaciones simultáneas pagan una sola vez
            first = db.execute(
                update(Summary)
                .where(Summary.id == summary.id, Summary.rating.is_(None))
                .values(rating=value, rated_at=now, updated_at=now)
                .execution_options(synchronize_session=False)
            )
            first_rating = first.rowcount == 1
            if not first_rating:
                db.execute(
                    update(Summary)
                    .where(Summary.id == summary.id)
                    .values(rating=value, rated_at=now, updated_at=now)
                    .execution_options(synchronize_session=False)
                )
            if feedback and feedback.strip():
                comment = Comment(
                    content=f"{FEEDBACK_PREFIX}{feedback}",
                    kind=CommentKind.feedback.value,
                    author_id=actor.id,
                    summary_id=summary.id,
                    created_at=now,
                )
                db.add(comment)
            if first_rating:
                bonus = rating_bonus(value)
                award_points(db, summary.author_id, bonus, reason=f"summary={summary.id} rated {value}")
    except SQLAlchemyError as e:
        log.exception("rate_summary failed: %s", e)
        raise InternalError("Failed to rate summary") from e

    db.refresh(summary)
    if not first_rating:
        log.info("summary=%s re-rated to %s by user=%s; no bonus", summary.id, value, actor.id)
    return RatingResult(summary=summary, points_awarded=bonus, feedback=comment)

def delete_summary(db: Session, actor: Optional[User], summary_id: int) -> None:
    if actor is None:
        raise AuthenticationRequired()
    summary = get_summary(db, summary_id)
    if summary.author_id != actor.id and actor.role != Role.ADMIN.value:
        raise InsufficientPermissions()
    try:
        with transaction(db):
            db.delete(summary)
    except SQLAlchemyError as e:
        log.exception("delete_summary failed: %s", e)
        raise InternalError("Failed to delete summary") from e
