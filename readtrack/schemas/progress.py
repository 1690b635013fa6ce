from typing import Optional
from datetime import datetime
from readtrack.models.reading_progress import ReadingStatus
from readtrack.schemas.book import BookBrief
from readtrack.schemas.common import CamelModel

class ProgressIn(CamelModel):
    book_id: Optional[int] = None
    status: Optional[ReadingStatus] = None
    current_page: Optional[int] = 0
    total_pages: Optional[int] = None

class ProgressOut(CamelModel):
    id: int
    user_id: int
    book_id: int
    status: ReadingStatus
    current_page: int
    total_pages: int
    progress_percentage: float
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    book: Optional[BookBrief] = None
