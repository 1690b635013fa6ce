from typing import Any, Optional
from datetime import datetime
from readtrack.schemas.book import BookBrief
from readtrack.schemas.comment import CommentOut
from readtrack.schemas.common import CamelModel
from readtrack.schemas.user import UserBrief

class SummaryIn(CamelModel):
    book_id: Optional[int] = None
    content: Optional[str] = None
    title: Optional[str] = None
    is_public: bool = True

class RatingIn(CamelModel):
    # se valida en el servicio: entero 1..5
    rating: Any = None
    feedback: Optional[str] = None

class SummaryOut(CamelModel):
    id: int
    title: str
    content: str
    is_public: bool
    rating: Optional[int] = None
    rated_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    author: UserBrief
    book: BookBrief

class SummaryDetail(SummaryOut):
    comments: list[CommentOut] = []
