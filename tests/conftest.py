import os

# antes de importar la app: DB en memoria y sin create_all sobre el engine global
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["DEV_AUTO_CREATE"] = "0"

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from readtrack.core.timeutils import utcnow
from readtrack.db import Base, get_db
from readtrack.main import app
from readtrack.models import Book, ReadingProgress, ReadingStatus, Summary, User
from readtrack.security import create_access_token


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db):
    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(role="STUDENT", points=0, name=None):
        counter["n"] += 1
        n = counter["n"]
        user = User(
            name=name or f"User {n}",
            email=f"user{n}@example.com",
            password="not-a-real-hash",
            role=role,
            points=points,
            level=points // 500 + 1,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_book(db):
    counter = {"n": 0}

    def _make(pages=300, category="Fiction", title=None, isbn=None):
        counter["n"] += 1
        book = Book(
            title=title or f"Book {counter['n']}",
            author="Some Author",
            category=category,
            pages=pages,
            language="en",
            isbn=isbn,
        )
        db.add(book)
        db.commit()
        db.refresh(book)
        return book

    return _make


@pytest.fixture
def make_progress(db):
    def _make(user, book, status=ReadingStatus.READING, days_ago=0, current_page=0):
        ts = utcnow() - timedelta(days=days_ago)
        row = ReadingProgress(
            user_id=user.id,
            book_id=book.id,
            status=status,
            current_page=current_page,
            total_pages=book.pages or 0,
            progress_percentage=0.0,
            updated_at=ts,
            created_at=ts,
        )
        db.add(row)
        db.commit()
        return row

    return _make


@pytest.fixture
def make_summary(db):
    def _make(user, book, rating=None, days_ago=0):
        ts = utcnow() - timedelta(days=days_ago)
        summary = Summary(
            title="A summary",
            content="Some thoughts about the book.",
            author_id=user.id,
            book_id=book.id,
            rating=rating,
            created_at=ts,
            updated_at=ts,
        )
        db.add(summary)
        db.commit()
        db.refresh(summary)
        return summary

    return _make


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def headers():
    return auth_headers
