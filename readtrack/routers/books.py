import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy import select, func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from readtrack.core.exceptions import Conflict, InternalError, NotFound, ValidationError
from readtrack.core.roles import Role, STAFF_ROLES, require_role
from readtrack.core.timeutils import utcnow
from readtrack.db import get_db, transaction
from readtrack.deps import get_current_user
from readtrack.models.book import Book
from readtrack.models.comment import Comment
from readtrack.models.reading_progress import ReadingProgress
from readtrack.models.summary import Summary
from readtrack.models.user import User
from readtrack.schemas.book import BookIn, BookOut, CategoryIn
from readtrack.schemas.comment import CommentOut
from readtrack.schemas.common import dump, make_pagination
from readtrack.schemas.summary import SummaryOut
from readtrack.schemas.user import UserBrief

router = APIRouter(prefix="/books", tags=["books"])
log = logging.getLogger("books")

def _counts_for(db: Session, book_ids: list[int]) -> dict[int, dict]:
    """{book_id: {readingProgress, summaries, comments}} con un GROUP BY por tabla."""
    counts = {bid: {"readingProgress": 0, "summaries": 0, "comments": 0} for bid in book_ids}
    if not book_ids:
        return counts
    for key, model in (("readingProgress", ReadingProgress), ("summaries", Summary), ("comments", Comment)):
        rows = db.execute(
            select(model.book_id, func.count(model.id))
            .where(model.book_id.in_(book_ids))
            .group_by(model.book_id)
        ).all()
        for book_id, n in rows:
            counts[book_id][key] = int(n or 0)
    return counts

def _isbn_taken(db: Session, isbn: str, exclude_id: Optional[int] = None) -> bool:
    stmt = select(Book.id).where(Book.isbn == isbn)
    if exclude_id is not None:
        stmt = stmt.where(Book.id != exclude_id)
    return db.execute(stmt).first() is not None

def _get_book_or_404(db: Session, book_id: int) -> Book:
    book = db.get(Book, book_id)
    if book is None:
        raise NotFound("Book not found")
    return book

@router.get("")
def list_books(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = None,
    category: Optional[str] = None,
    difficulty: Optional[str] = None,
    author: Optional[str] = None,
    db: Session = Depends(get_db),
):
    conds = []
    if category:
        conds.append(Book.category == category)
    if difficulty:
        conds.append(Book.difficulty == difficulty)
    if author:
        conds.append(Book.author.ilike(f"%{author}%"))
    if search:
        like = f"%{search}%"
        conds.append(or_(Book.title.ilike(like), Book.author.ilike(like), Book.description.ilike(like)))

    total = db.execute(select(func.count(Book.id)).where(*conds)).scalar_one() or 0
    books = db.execute(
        select(Book).where(*conds)
        .order_by(Book.created_at.desc(), Book.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    ).scalars().all()
    counts = _counts_for(db, [b.id for b in books])

    return {
        "success": True,
        "data": {
            "books": [dict(dump(BookOut.model_validate(b)), counts=counts[b.id]) for b in books],
            "pagination": dump(make_pagination(page, limit, int(total))),
        },
    }

@router.get("/categories")
def list_categories(db: Session = Depends(get_db)):
    rows = db.execute(select(Book.category).distinct().order_by(Book.category.asc())).scalars().all()
    return {"success": True, "data": list(rows)}

@router.post("/categories")
def validate_category(body: CategoryIn, db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    require_role(me, *STAFF_ROLES)
    name = (body.category or "").strip()
    if not name:
        raise ValidationError("Category name is required")
    if db.execute(select(Book.id).where(Book.category == name)).first():
        raise Conflict("Category already exists")
    return {"success": True, "message": "Category validated and ready for use", "data": {"category": name}}

@router.post("", status_code=201)
def create_book(body: BookIn, db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    require_role(me, *STAFF_ROLES)
    if not (body.title and body.author and body.category):
        raise ValidationError("Title, author, and category are required")
    if body.isbn and _isbn_taken(db, body.isbn):
        raise Conflict("A book with this ISBN already exists")

    now = utcnow()
    book = Book(
        title=body.title,
        author=body.author,
        description=body.description,
        cover_image=body.cover_image,
        isbn=body.isbn or None,
        category=body.category,
        pages=body.pages or None,
        language=body.language or "en",
        published_at=body.published_at,
        difficulty=body.difficulty,
        created_at=now,
        updated_at=now,
    )
    try:
        with transaction(db):
            db.add(book)
    except SQLAlchemyError as e:
        log.exception("create_book failed: %s", e)
        raise InternalError("Failed to create book") from e
    db.refresh(book)
    log.info("book=%s created by user=%s", book.id, me.id)
    return {
        "success": True,
        "data": dict(dump(BookOut.model_validate(book)), counts=_counts_for(db, [book.id])[book.id]),
        "message": "Book created successfully",
    }

@router.get("/{book_id}")
def get_book(book_id: int, db: Session = Depends(get_db)):
    book = _get_book_or_404(db, book_id)

    progress = [
        {
            "id": p.id,
            "status": p.status.value,
            "progressPercentage": p.progress_percentage,
            "currentPage": p.current_page,
            "startedAt": p.started_at.isoformat() if p.started_at else None,
            "completedAt": p.completed_at.isoformat() if p.completed_at else None,
            "user": dump(UserBrief.model_validate(p.user)),
        }
        for p in book.progress_rows
    ]
    summaries = [
        dict(dump(SummaryOut.model_validate(s)), counts={"comments": len(s.comments)})
        for s in book.summaries
    ]
    comments = sorted(book.comments, key=lambda c: (c.created_at is not None, c.created_at, c.id), reverse=True)

    data = dump(BookOut.model_validate(book))
    data.update(
        readingProgress=progress,
        summaries=summaries,
        comments=[dump(CommentOut.model_validate(c)) for c in comments],
        counts=_counts_for(db, [book.id])[book.id],
    )
    return {"success": True, "data": data}

@router.put("/{book_id}")
def update_book(book_id: int, body: BookIn, db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    require_role(me, *STAFF_ROLES)
    book = _get_book_or_404(db, book_id)
    if body.isbn and body.isbn != book.isbn and _isbn_taken(db, body.isbn, exclude_id=book.id):
        raise Conflict("A book with this ISBN already exists")

    # solo se tocan los campos enviados
    sent = body.model_fields_set
    try:
        with transaction(db):
            for field in ("title", "author", "category", "language"):
                value = getattr(body, field)
                if field in sent and value:
                    setattr(book, field, value)
            for field in ("description", "cover_image", "isbn", "published_at", "difficulty"):
                if field in sent:
                    setattr(book, field, getattr(body, field))
            if "pages" in sent:
                book.pages = body.pages or None
            book.updated_at = utcnow()
    except SQLAlchemyError as e:
        log.exception("update_book failed: %s", e)
        raise InternalError("Failed to update book") from e
    db.refresh(book)
    return {
        "success": True,
        "data": dict(dump(BookOut.model_validate(book)), counts=_counts_for(db, [book.id])[book.id]),
        "message": "Book updated successfully",
    }

@router.delete("/{book_id}")
def delete_book(book_id: int, db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    require_role(me, Role.ADMIN)
    book = _get_book_or_404(db, book_id)
    try:
        with transaction(db):
            db.delete(book)   # cascade: progreso, resúmenes, comentarios
    except SQLAlchemyError as e:
        log.exception("delete_book failed: %s", e)
        raise InternalError("Failed to delete book") from e
    log.info("book=%s deleted by user=%s", book_id, me.id)
    return {"success": True, "message": "Book deleted successfully"}
