from typing import Optional
from datetime import datetime
from readtrack.schemas.common import CamelModel
from readtrack.schemas.user import UserBrief

class CommentIn(CamelModel):
    content: Optional[str] = None
    book_id: Optional[int] = None
    summary_id: Optional[int] = None

class CommentOut(CamelModel):
    id: int
    content: str
    kind: str
    book_id: Optional[int] = None
    summary_id: Optional[int] = None
    created_at: Optional[datetime] = None
    author: UserBrief
