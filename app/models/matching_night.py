"""
MatchingNight Model
One show event: the seated pairs and the number of lights they produced
"""

from sqlalchemy import Column, Integer, String, Date, DateTime, JSON
from sqlalchemy.sql import func
from app.database import Base


class MatchingNight(Base):
    __tablename__ = "matching_nights"

    id = Column(Integer, primary_key=True, autoincrement=True)

    name = Column(String(255), nullable=False)
    date = Column(Date, nullable=False, index=True)

    pairs = Column(JSON, nullable=False, default=list)
    # Ordered list of pairing records: [{"woman": "...", "man": "..."}, ...]
    # Stored as delivered, no schema enforced

    total_lights = Column(Integer, nullable=False, default=0)

    # Broadcast date/time as published by the broadcaster
    ausstrahlungsdatum = Column(String(50), nullable=True)
    ausstrahlungszeit = Column(String(50), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = {"sqlite_autoincrement": True}

    def __repr__(self):
        return f"<MatchingNight(id={self.id}, name='{self.name}', date={self.date}, lights={self.total_lights})>"
