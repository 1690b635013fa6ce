"""
Leaderboard: orden por puntos acumulados (histórico) y estadísticas derivadas
calculadas solo con las filas dentro de la ventana de tiempo pedida.
"""
from __future__ import annotations
import logging
from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Iterable, Literal, Optional

from sqlalchemy import select, func, desc, asc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from readtrack.core.exceptions import InternalError
from readtrack.core.roles import Role
from readtrack.core.timeutils import utcnow
from readtrack.domain.reading import queries
from readtrack.domain.reading.stats import average_rating, completion_rate, reading_streak
from readtrack.models.book import Book
from readtrack.models.reading_progress import ReadingProgress, ReadingStatus
from readtrack.models.user import User

log = logging.getLogger("leaderboard")

LeaderboardType = Literal["students", "teachers", "all"]
LeaderboardPeriod = Literal["week", "month", "all"]

STREAK_DISPLAY_CAP = 30
PERIOD_DAYS = {"week": 7, "month": 30}

# Por puntos DESC, luego id ASC (desempate estable, ranks 1..N sin compartir)
ORDERING = (desc(User.points), asc(User.id))

def window_start(period: str, now: Optional[datetime] = None) -> Optional[datetime]:
    days = PERIOD_DAYS.get(period)
    if days is None:
        return None
    return (now or utcnow()) - timedelta(days=days)

def role_filter(kind: str):
    if kind == "students":
        return User.role == Role.STUDENT.value
    if kind == "teachers":
        return User.role.in_([Role.TEACHER.value, Role.ADMIN.value])
    return None

def user_stats(points: int, progress_rows: Iterable, ratings: Iterable[Optional[int]], today: Optional[date] = None) -> dict:
    """
    progress_rows: tuplas (status, updated_at, book_pages) ya filtradas por ventana.
    ratings: calificaciones de los resúmenes del usuario en la ventana (None = sin calificar).
    """
    rows = list(progress_rows)
    ratings = list(ratings)
    completed = [r for r in rows if _status(r[0]) == ReadingStatus.COMPLETED.value]
    reading = [r for r in rows if _status(r[0]) == ReadingStatus.READING.value]
    started = len(rows)
    streak = reading_streak((r[1] for r in rows), today=today)
    return {
        "points": int(points or 0),
        "booksCompleted": len(completed),
        "booksReading": len(reading),
        "totalBooksStarted": started,
        "totalPagesRead": sum(int(r[2] or 0) for r in completed),
        "summariesWritten": len(ratings),
        "averageSummaryRating": average_rating(ratings),
        "readingStreak": min(streak, STREAK_DISPLAY_CAP),
        "completionRate": completion_rate(len(completed), started),
    }

def rank_entries(entries: list[dict], limit: int) -> list[dict]:
    """
    Ordena por stats.points DESC (sort estable: los empates conservan el orden
    de entrada), asigna rank 1..N y recién después trunca a `limit`.
    """
    ordered = sorted(entries, key=lambda e: e["stats"]["points"], reverse=True)
    ranked = [dict(e, rank=i + 1) for i, e in enumerate(ordered)]
    return ranked[:limit]

def _status(value) -> str:
    return getattr(value, "value", value)

def get_leaderboard(
    db: Session,
    *,
    kind: LeaderboardType = "students",
    period: LeaderboardPeriod = "all",
    limit: int = 10,
    now: Optional[datetime] = None,
) -> dict:
    now = now or utcnow()
    since = window_start(period, now)
    cond = role_filter(kind)

    try:
        stmt = select(User).order_by(*ORDERING)
        if cond is not None:
            stmt = stmt.where(cond)
        users = list(db.execute(stmt).unique().scalars().all())

        user_ids = [u.id for u in users]
        progress_by_user: dict[int, list] = defaultdict(list)
        for user_id, status, updated_at, pages in queries.progress_rows_for_users(db, user_ids, since):
            progress_by_user[user_id].append((status, updated_at, pages))
        ratings_by_user: dict[int, list] = defaultdict(list)
        for author_id, rating in queries.summary_rows_for_users(db, user_ids, since):
            ratings_by_user[author_id].append(rating)

        total_books = db.execute(select(func.count(Book.id))).scalar_one() or 0
        progress_count = select(func.count(ReadingProgress.id)).join(User, User.id == ReadingProgress.user_id)
        if cond is not None:
            progress_count = progress_count.where(cond)
        if since is not None:
            progress_count = progress_count.where(ReadingProgress.updated_at >= since)
        total_progress = db.execute(progress_count).scalar_one() or 0
    except SQLAlchemyError as e:
        log.exception("leaderboard query failed: %s", e)
        raise InternalError("Failed to fetch leaderboard") from e

    today = now.date()
    entries = [
        {
            "user": {
                "id": u.id,
                "name": u.name or "Unknown User",
                "email": u.email,
                "role": u.role,
                "avatar": u.avatar_url,
                "level": u.level,
            },
            "stats": user_stats(u.points, progress_by_user[u.id], ratings_by_user[u.id], today=today),
        }
        for u in users
    ]
    leaderboard = [
        {"rank": e["rank"], "user": e["user"], "stats": e["stats"]}
        for e in rank_entries(entries, limit)
    ]
    return {
        "leaderboard": leaderboard,
        "metadata": {
            "type": kind,
            "period": period,
            "totalUsers": len(users),
            "totalBooksInLibrary": int(total_books),
            "totalReadingProgress": int(total_progress),
            "lastUpdated": now.isoformat(),
        },
    }
