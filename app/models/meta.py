"""
Meta Model
Generic key/value store for sync watermarks (dbVersion, dataHash, lastUpdateDate)
"""

from sqlalchemy import Column, Integer, String, DateTime, Text
from sqlalchemy.sql import func
from app.database import Base


class Meta(Base):
    __tablename__ = "meta"

    id = Column(Integer, primary_key=True, autoincrement=True)

    key = Column(String(255), unique=True, nullable=False, index=True)
    value = Column(Text, nullable=False)

    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Meta(key='{self.key}', value='{self.value}')>"
