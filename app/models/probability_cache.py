"""
ProbabilityCache Model
Memoized probability computation results keyed by the hash of their input data
"""

from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.sql import func
from app.database import Base


class ProbabilityCache(Base):
    __tablename__ = "probability_cache"

    id = Column(Integer, primary_key=True, autoincrement=True)

    data_hash = Column(String(255), unique=True, nullable=False, index=True)  # natural key
    results = Column(JSON, nullable=True)
    # Opaque payload produced by the probability calculation

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = {"sqlite_autoincrement": True}

    def __repr__(self):
        return f"<ProbabilityCache(id={self.id}, data_hash='{self.data_hash}')>"
