# scripts/seed_books.py
import os
import sys
from pathlib import Path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sqlalchemy import select
from readtrack.db import SessionLocal
from readtrack.models.book import Book
from readtrack.models.user import User
from readtrack.core.roles import Role
from readtrack.security import hash_password

SEEDS = [
    # isbn,              title,                               author,               category,     difficulty,     pages
    ("9780061120084",    "To Kill a Mockingbird",             "Harper Lee",         "Fiction",    "INTERMEDIATE", 336),
    ("9780451524935",    "1984",                              "George Orwell",      "Fiction",    "INTERMEDIATE", 328),
    ("9780141439518",    "Pride and Prejudice",               "Jane Austen",        "Classics",   "ADVANCED",     432),
    ("9780547928227",    "The Hobbit",                        "J.R.R. Tolkien",     "Fantasy",    "BEGINNER",     300),
    ("9780553380163",    "A Brief History of Time",           "Stephen Hawking",    "Science",    "ADVANCED",     212),
    ("9780062315007",    "The Alchemist",                     "Paulo Coelho",       "Fiction",    "BEGINNER",     208),
    ("9780743273565",    "The Great Gatsby",                  "F. Scott Fitzgerald","Classics",   "INTERMEDIATE", 180),
    ("9780307474278",    "The Curious Incident of the Dog in the Night-Time", "Mark Haddon", "Fiction", "BEGINNER", 226),
]

def upsert_book(db, isbn, title, author, category, difficulty, pages):
    row = db.execute(select(Book).where(Book.isbn == isbn)).scalar_one_or_none()
    if row:
        row.title = title
        row.author = author
        row.category = category
        row.difficulty = difficulty
        row.pages = pages
    else:
        row = Book(isbn=isbn, title=title, author=author, category=category,
                   difficulty=difficulty, pages=pages, language="en")
        db.add(row)
    db.commit()

def ensure_admin(db):
    """Crea el admin inicial si SEED_ADMIN_EMAIL y SEED_ADMIN_PASSWORD están definidos."""
    email = os.getenv("SEED_ADMIN_EMAIL")
    password = os.getenv("SEED_ADMIN_PASSWORD")
    if not email or not password:
        return
    user = db.execute(select(User).where(User.email == email.lower())).scalar_one_or_none()
    if user:
        user.role = Role.ADMIN.value
    else:
        db.add(User(email=email.lower(), name=os.getenv("SEED_ADMIN_NAME", "Admin"),
                    password=hash_password(password), role=Role.ADMIN.value))
    db.commit()
    print(f"Admin {email} OK")

def main():
    db = SessionLocal()
    try:
        for isbn, title, author, category, difficulty, pages in SEEDS:
            upsert_book(db, isbn, title, author, category, difficulty, pages)
        ensure_admin(db)
        print("Books seed OK")
    finally:
        db.close()

if __name__ == "__main__":
    main()
