"""
Participant Model
Cast members of the show; referenced by name from matchboxes and penalties
"""

from sqlalchemy import Column, Integer, String, DateTime, Text, Boolean
from sqlalchemy.sql import func
from app.database import Base


class Participant(Base):
    """
    A participant of the season.

    Matchbox.woman/man and Penalty.participant_name point at ``name`` without a
    foreign key, so deleting a participant never cascades.
    """
    __tablename__ = "participants"

    # Primary Key (caller-assignable during import)
    id = Column(Integer, primary_key=True, autoincrement=True)

    name = Column(String(255), nullable=False, index=True)
    gender = Column(String(1), nullable=False)  # F or M
    status = Column(String(50), nullable=False, default="Aktiv")
    # Statuses: Aktiv, Inaktiv, Perfekt Match
    active = Column(Boolean, nullable=False, default=True)

    known_from = Column(String(255), nullable=True)
    age = Column(Integer, nullable=True)
    photo_url = Column(Text, nullable=True)
    source = Column(String(255), nullable=True)
    bio = Column(Text, nullable=True)
    social_media_account = Column(String(255), nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = {"sqlite_autoincrement": True}

    def __repr__(self):
        return f"<Participant(id={self.id}, name='{self.name}', gender='{self.gender}')>"
