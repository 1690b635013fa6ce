"""
Consultas planas sobre reading_progress. Devuelven filas/tuplas simples;
la agregación se compone en los servicios (stats.py).
"""
from __future__ import annotations
from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from readtrack.models.book import Book
from readtrack.models.reading_progress import ReadingProgress, ReadingStatus
from readtrack.models.summary import Summary

def get_book(db: Session, book_id: int) -> Optional[Book]:
    return db.get(Book, book_id)

def get_progress(db: Session, user_id: int, book_id: int, *, for_update: bool = False) -> Optional[ReadingProgress]:
    stmt = select(ReadingProgress).where(
        ReadingProgress.user_id == user_id,
        ReadingProgress.book_id == book_id,
    )
    if for_update:
        stmt = stmt.with_for_update(of=ReadingProgress)
    return db.execute(stmt).unique().scalar_one_or_none()

def list_user_progress(
    db: Session,
    user_id: int,
    *,
    book_id: Optional[int] = None,
    status: Optional[ReadingStatus] = None,
    limit: Optional[int] = None,
) -> list[ReadingProgress]:
    stmt = select(ReadingProgress).where(ReadingProgress.user_id == user_id)
    if book_id is not None:
        stmt = stmt.where(ReadingProgress.book_id == book_id)
    if status is not None:
        stmt = stmt.where(ReadingProgress.status == status)
    stmt = stmt.order_by(ReadingProgress.updated_at.desc(), ReadingProgress.id.desc())
    if limit:
        stmt = stmt.limit(limit)
    return list(db.execute(stmt).unique().scalars().all())

def count_by_status(db: Session, user_id: int) -> dict[ReadingStatus, int]:
    rows = db.execute(
        select(ReadingProgress.status, func.count(ReadingProgress.id))
        .where(ReadingProgress.user_id == user_id)
        .group_by(ReadingProgress.status)
    ).all()
    counts = {s: 0 for s in ReadingStatus}
    for status, n in rows:
        counts[ReadingStatus(status)] = int(n or 0)
    return counts

def activity_timestamps(db: Session, user_id: int) -> list[datetime]:
    return list(db.execute(
        select(ReadingProgress.updated_at)
        .where(ReadingProgress.user_id == user_id)
        .order_by(ReadingProgress.updated_at.desc())
    ).scalars().all())

def activity_since(db: Session, user_id: int, since: datetime) -> list[tuple[datetime, ReadingStatus]]:
    rows = db.execute(
        select(ReadingProgress.updated_at, ReadingProgress.status)
        .where(ReadingProgress.user_id == user_id, ReadingProgress.updated_at >= since)
    ).all()
    return [(r[0], r[1]) for r in rows]

def reading_percentages(db: Session, user_id: int) -> list[float]:
    return [float(p or 0) for p in db.execute(
        select(ReadingProgress.progress_percentage)
        .where(ReadingProgress.user_id == user_id, ReadingProgress.status == ReadingStatus.READING)
    ).scalars().all()]

def category_breakdown(db: Session, user_id: int) -> dict[str, int]:
    """Libros (no NOT_STARTED) del usuario agrupados por categoría."""
    rows = db.execute(
        select(Book.category, func.count(ReadingProgress.id))
        .join(Book, Book.id == ReadingProgress.book_id)
        .where(ReadingProgress.user_id == user_id, ReadingProgress.status != ReadingStatus.NOT_STARTED)
        .group_by(Book.category)
        .order_by(Book.category.asc())
    ).all()
    return {r[0]: int(r[1] or 0) for r in rows}

def progress_rows_for_users(db: Session, user_ids: Iterable[int], since: Optional[datetime] = None):
    """(user_id, status, updated_at, book_pages) por cada fila de progreso."""
    ids = list(user_ids)
    if not ids:
        return []
    stmt = (
        select(ReadingProgress.user_id, ReadingProgress.status, ReadingProgress.updated_at, Book.pages)
        .join(Book, Book.id == ReadingProgress.book_id)
        .where(ReadingProgress.user_id.in_(ids))
    )
    if since is not None:
        stmt = stmt.where(ReadingProgress.updated_at >= since)
    return db.execute(stmt).all()

def summary_rows_for_users(db: Session, user_ids: Iterable[int], since: Optional[datetime] = None):
    """(author_id, rating) por cada resumen."""
    ids = list(user_ids)
    if not ids:
        return []
    stmt = select(Summary.author_id, Summary.rating).where(Summary.author_id.in_(ids))
    if since is not None:
        stmt = stmt.where(Summary.created_at >= since)
    return db.execute(stmt).all()
