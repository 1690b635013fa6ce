from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from readtrack.db import Base

class Book(Base):
    __tablename__ = "books"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False, index=True)
    author = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    cover_image = Column(String(512), nullable=True)
    isbn = Column(String(32), unique=True, nullable=True)
    category = Column(String(80), nullable=False, index=True)
    difficulty = Column(String(20), nullable=True)   # BEGINNER | INTERMEDIATE | ADVANCED
    pages = Column(Integer, nullable=True)
    language = Column(String(8), nullable=False, default="en")
    published_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # borrar un libro arrastra progreso, resúmenes y comentarios
    progress_rows = relationship("ReadingProgress", back_populates="book", cascade="all, delete-orphan")
    summaries = relationship("Summary", back_populates="book", cascade="all, delete-orphan")
    comments = relationship("Comment", back_populates="book", cascade="all, delete-orphan")
