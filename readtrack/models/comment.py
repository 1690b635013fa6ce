from enum import Enum as PyEnum
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from readtrack.db import Base

class CommentKind(str, PyEnum):
    comment = "comment"
    feedback = "feedback"   # feedback de docente al calificar un resumen

class Comment(Base):
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, index=True)
    content = Column(Text, nullable=False)
    kind = Column(String(20), nullable=False, default=CommentKind.comment.value)
    author_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    book_id = Column(Integer, ForeignKey("books.id", ondelete="CASCADE"), index=True, nullable=True)
    summary_id = Column(Integer, ForeignKey("summaries.id", ondelete="CASCADE"), index=True, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    author = relationship("User", lazy="joined")
    book = relationship("Book", back_populates="comments")
    summary = relationship("Summary", back_populates="comments")
