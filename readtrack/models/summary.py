from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from readtrack.db import Base

class Summary(Base):
    __tablename__ = "summaries"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    is_public = Column(Boolean, nullable=False, default=True)
    rating = Column(Integer, nullable=True)            # 1..5, solo TEACHER/ADMIN
    rated_at = Column(DateTime(timezone=True), nullable=True)
    author_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    book_id = Column(Integer, ForeignKey("books.id", ondelete="CASCADE"), index=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    author = relationship("User", back_populates="summaries", lazy="joined")
    book = relationship("Book", back_populates="summaries", lazy="joined")
    comments = relationship("Comment", back_populates="summary", cascade="all, delete-orphan",
                            order_by="Comment.created_at.desc()")
