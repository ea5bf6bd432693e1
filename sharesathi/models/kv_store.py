"""
Key/value storage model
Each store (watchlists, settings) keeps exactly one JSON snapshot row
"""
from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.sql import func
from sharesathi.database import Base


class KeyValueEntry(Base):
    """Persisted JSON blob keyed by a fixed store name"""

    __tablename__ = "kv_store"

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<KeyValueEntry(key={self.key}, size={len(self.value or '')})>"
