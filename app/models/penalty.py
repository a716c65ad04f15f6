"""
Penalty Model
Financial penalties charged to participants
"""

from sqlalchemy import Column, Integer, String, DateTime, Float, Text
from sqlalchemy.sql import func
from app.database import Base


class Penalty(Base):
    __tablename__ = "penalties"

    id = Column(Integer, primary_key=True, autoincrement=True)

    participant_name = Column(String(255), nullable=False, index=True)  # weak reference
    reason = Column(String(255), nullable=False)
    amount = Column(Float, nullable=False)  # Positive, in EUR
    date = Column(String(10), nullable=False, index=True)  # YYYY-MM-DD
    description = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = {"sqlite_autoincrement": True}

    def __repr__(self):
        return f"<Penalty(id={self.id}, participant='{self.participant_name}', amount={self.amount})>"
