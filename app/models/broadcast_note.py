"""
BroadcastNote Model
Free-form notes per broadcast day, one row per date
"""

from sqlalchemy import Column, Integer, String, DateTime, Text
from sqlalchemy.sql import func
from app.database import Base


class BroadcastNote(Base):
    """
    Note attached to one broadcast date.

    ``date`` is the natural key. Writes go through upsert_broadcast_note(),
    which looks the date up first, so the unique index is never the path
    that decides between insert and update.
    """
    __tablename__ = "broadcast_notes"

    id = Column(Integer, primary_key=True, autoincrement=True)

    date = Column(String(10), unique=True, nullable=False, index=True)  # YYYY-MM-DD
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = {"sqlite_autoincrement": True}

    def __repr__(self):
        return f"<BroadcastNote(id={self.id}, date='{self.date}')>"
