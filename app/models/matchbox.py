"""
Matchbox Model
A revealed pairing, optionally sold to a buyer
"""

from sqlalchemy import Column, Integer, String, DateTime, Float
from sqlalchemy.sql import func
from app.database import Base


class Matchbox(Base):
    """
    Outcome of a match box decision between two participants.

    ``woman`` and ``man`` hold participant names (weak references, not
    enforced). Legacy payloads call them womanId/manId; the import path renames
    them before they reach this table.
    """
    __tablename__ = "matchboxes"

    id = Column(Integer, primary_key=True, autoincrement=True)

    woman = Column(String(255), nullable=False, index=True)
    man = Column(String(255), nullable=False, index=True)
    match_type = Column(String(50), nullable=True)
    # e.g. perfect, no-match, sold

    # Sale
    price = Column(Float, nullable=True)
    buyer = Column(String(255), nullable=True)
    sold_date = Column(DateTime(timezone=True), nullable=True)

    ausstrahlungsdatum = Column(String(50), nullable=True)
    ausstrahlungszeit = Column(String(50), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = {"sqlite_autoincrement": True}

    def __repr__(self):
        return f"<Matchbox(id={self.id}, woman='{self.woman}', man='{self.man}', type='{self.match_type}')>"
