import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from readtrack.core.exceptions import AuthenticationRequired, InternalError
from readtrack.core.timeutils import utcnow
from readtrack.domain.reading import queries
from readtrack.domain.reading.stats import (
    completion_rate,
    monthly_buckets,
    monthly_window_start,
    reading_streak,
)
from readtrack.models.reading_progress import ReadingStatus
from readtrack.models.user import User

log = logging.getLogger("dashboard")

RECENT_PROGRESS_SIZE = 5

def get_dashboard_stats(db: Session, actor: Optional[User], *, now: Optional[datetime] = None) -> dict:
    """
    Resumen personal: conteos por estado, racha, progreso reciente, buckets
    de los últimos 6 meses y desglose por categoría. Devuelve filas ORM en
    `recentProgress`; el router las serializa.
    """
    if actor is None:
        raise AuthenticationRequired()
    now = now or utcnow()

    try:
        counts = queries.count_by_status(db, actor.id)
        recent = queries.list_user_progress(db, actor.id, limit=RECENT_PROGRESS_SIZE)
        events = queries.activity_since(db, actor.id, monthly_window_start(now))
        timestamps = queries.activity_timestamps(db, actor.id)
        percentages = queries.reading_percentages(db, actor.id)
        categories = queries.category_breakdown(db, actor.id)
    except SQLAlchemyError as e:
        log.exception("dashboard stats failed for user=%s: %s", actor.id, e)
        raise InternalError("Failed to fetch dashboard statistics") from e

    started = sum(n for status, n in counts.items() if status != ReadingStatus.NOT_STARTED)
    completed = counts[ReadingStatus.COMPLETED]
    average_progress = int(sum(percentages) / len(percentages) + 0.5) if percentages else 0

    return {
        "overview": {
            "totalBooksStarted": started,
            "totalBooksCompleted": completed,
            "totalBooksReading": counts[ReadingStatus.READING],
            "totalBooksPaused": counts[ReadingStatus.PAUSED],
            "completionRate": completion_rate(completed, started),
            "averageProgress": average_progress,
            "readingStreak": reading_streak(timestamps, today=now.date()),
        },
        "user": {
            "points": int(actor.points or 0),
            "level": int(actor.level or 1),
            "name": actor.name,
            "role": actor.role,
        },
        "recentProgress": recent,
        "monthlyStats": monthly_buckets(events, now=now),
        "categoryBreakdown": categories,
    }
