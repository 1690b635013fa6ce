from enum import Enum as PyEnum
from sqlalchemy import Column, Integer, Float, Boolean, DateTime, Enum, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from readtrack.db import Base

class ReadingStatus(str, PyEnum):
    NOT_STARTED = "NOT_STARTED"
    READING = "READING"
    PAUSED = "PAUSED"
    COMPLETED = "COMPLETED"

class ReadingProgress(Base):
    __tablename__ = "reading_progress"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    book_id = Column(Integer, ForeignKey("books.id", ondelete="CASCADE"), index=True, nullable=False)
    status = Column(Enum(ReadingStatus), nullable=False, default=ReadingStatus.NOT_STARTED)
    current_page = Column(Integer, nullable=False, default=0)
    total_pages = Column(Integer, nullable=False, default=0)
    progress_percentage = Column(Float, nullable=False, default=0.0)   # siempre derivado de current/total
    started_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    # marcadores de idempotencia para los bonos de puntos
    halfway_awarded = Column(Boolean, nullable=False, default=False)
    completion_awarded = Column(Boolean, nullable=False, default=False)

    user = relationship("User", back_populates="progress_rows")
    book = relationship("Book", back_populates="progress_rows", lazy="joined")

    __table_args__ = (UniqueConstraint("user_id", "book_id", name="uq_reading_progress_user_book"),)
