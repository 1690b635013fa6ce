import logging
from typing import NamedTuple, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from readtrack.core.exceptions import AuthenticationRequired, Conflict, InternalError, NotFound, ValidationError
from readtrack.core.timeutils import utcnow
from readtrack.db import transaction
from readtrack.domain.points.service import (
    HALFWAY_THRESHOLD_PCT,
    POINTS_BOOK_COMPLETED,
    POINTS_HALFWAY,
    award_points,
)
from readtrack.domain.reading import queries
from readtrack.domain.reading.stats import progress_percentage
from readtrack.models.reading_progress import ReadingProgress, ReadingStatus
from readtrack.models.user import User

log = logging.getLogger("progress")

ACTIVE_STATUSES = (ReadingStatus.READING, ReadingStatus.PAUSED, ReadingStatus.COMPLETED)

class ProgressResult(NamedTuple):
    progress: ReadingProgress
    points_awarded: int

def _apply_awards(db: Session, row: ReadingProgress) -> int:
    """Bonos una sola vez por (usuario, libro), usando los marcadores de la fila."""
    if row.status == ReadingStatus.COMPLETED and not row.completion_awarded:
        award_points(db, row.user_id, POINTS_BOOK_COMPLETED, reason=f"completed book={row.book_id}")
        row.completion_awarded = True
        return POINTS_BOOK_COMPLETED
    if (
        row.status == ReadingStatus.READING
        and row.progress_percentage >= HALFWAY_THRESHOLD_PCT
        and not row.halfway_awarded
    ):
        award_points(db, row.user_id, POINTS_HALFWAY, reason=f"halfway book={row.book_id}")
        row.halfway_awarded = True
        return POINTS_HALFWAY
    return 0

def update_progress(
    db: Session,
    actor: Optional[User],
    *,
    book_id: Optional[int],
    status: Optional[ReadingStatus] = None,
    current_page: Optional[int] = 0,
    total_pages: Optional[int] = None,
) -> ProgressResult:
    """
    Crea o actualiza (por clave usuario+libro) el progreso del actor.
    El porcentaje siempre se recalcula; los puntos se otorgan en la misma transacción.
    """
    if actor is None:
        raise AuthenticationRequired()
    if book_id is None:
        raise ValidationError("Book ID is required")
    current_page = current_page or 0
    if current_page < 0:
        raise ValidationError("currentPage must be a non-negative integer")
    if total_pages is not None and total_pages < 0:
        raise ValidationError("totalPages must be a non-negative integer")

    book = queries.get_book(db, book_id)
    if book is None:
        raise NotFound("Book not found")

    pages = total_pages or book.pages or 0
    pct = progress_percentage(current_page, pages)
    now = utcnow()

    try:
        with transaction(db):
            row = queries.get_progress(db, actor.id, book_id, for_update=True)
            previous_status = None
            if row is None:
                row = ReadingProgress(
                    user_id=actor.id,
                    book_id=book_id,
                    status=status or ReadingStatus.NOT_STARTED,
                    halfway_awarded=False,
                    completion_awarded=False,
                    created_at=now,
                )
                db.add(row)
            else:
                previous_status = row.status
                if status is not None:
                    row.status = status

            row.current_page = current_page
            row.total_pages = pages
            row.progress_percentage = pct
            row.updated_at = now

            if row.status in ACTIVE_STATUSES and row.started_at is None:
                row.started_at = now
            if row.status == ReadingStatus.COMPLETED:
                if previous_status != ReadingStatus.COMPLETED or row.completed_at is None:
                    row.completed_at = now
            else:
                row.completed_at = None

            db.flush()
            awarded = _apply_awards(db, row)
    except IntegrityError as e:
        log.warning("concurrent progress insert user=%s book=%s: %s", actor.id, book_id, e)
        raise Conflict("Reading progress was modified concurrently, please retry") from e
    except SQLAlchemyError as e:
        log.exception("update_progress failed: %s", e)
        raise InternalError("Failed to update reading progress") from e

    db.refresh(row)
    return ProgressResult(progress=row, points_awarded=awarded)
