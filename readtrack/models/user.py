from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from readtrack.db import Base

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)

    role = Column(String(20), nullable=False, default="STUDENT", index=True)  # STUDENT | TEACHER | ADMIN
    points = Column(Integer, nullable=False, default=0, server_default="0")
    level = Column(Integer, nullable=False, default=1, server_default="1")    # points // 500 + 1

    avatar_url = Column(String(512), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    progress_rows = relationship("ReadingProgress", back_populates="user", cascade="all, delete-orphan")
    summaries = relationship("Summary", back_populates="author", cascade="all, delete-orphan")
