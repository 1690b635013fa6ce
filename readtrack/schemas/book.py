from pydantic import field_validator
from typing import Optional, Literal
from datetime import datetime
from readtrack.schemas.common import CamelModel

Difficulty = Literal["BEGINNER", "INTERMEDIATE", "ADVANCED"]

class BookIn(CamelModel):
    """Create y update comparten campos; en create title/author/category se validan en el router."""
    title: Optional[str] = None
    author: Optional[str] = None
    description: Optional[str] = None
    cover_image: Optional[str] = None
    isbn: Optional[str] = None
    category: Optional[str] = None
    pages: Optional[int] = None
    language: Optional[str] = None
    published_at: Optional[datetime] = None
    difficulty: Optional[Difficulty] = None

    @field_validator("pages")
    @classmethod
    def validate_pages(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 0:
            raise ValueError("pages must be >= 0")
        return v

class BookBrief(CamelModel):
    id: int
    title: str
    author: str
    cover_image: Optional[str] = None
    pages: Optional[int] = None
    category: str
    difficulty: Optional[str] = None

class BookOut(BookBrief):
    description: Optional[str] = None
    isbn: Optional[str] = None
    language: str = "en"
    published_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class CategoryIn(CamelModel):
    category: Optional[str] = None
