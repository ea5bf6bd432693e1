"""
Durable key/value storage
Stores read their snapshot once at startup and overwrite it on every mutation
"""
import logging
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.orm import Session

from sharesathi.models.kv_store import KeyValueEntry

logger = logging.getLogger(__name__)


class KeyValueStorage:
    """localStorage-style get/set/remove over the kv_store table"""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def get_item(self, key: str) -> Optional[str]:
        """Read the raw value stored under key, None if absent"""
        db = self.session_factory()
        try:
            entry = db.query(KeyValueEntry).filter_by(key=key).first()
            return entry.value if entry else None
        finally:
            db.close()

    def set_item(self, key: str, value: str) -> None:
        """Overwrite the value stored under key"""
        db = self.session_factory()
        try:
            entry = db.query(KeyValueEntry).filter_by(key=key).first()
            if entry:
                entry.value = value
                entry.updated_at = datetime.utcnow()
            else:
                db.add(KeyValueEntry(key=key, value=value))
            db.commit()
            logger.debug(f"Stored {key} ({len(value)} bytes)")
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def remove_item(self, key: str) -> None:
        """Delete key if present"""
        db = self.session_factory()
        try:
            db.query(KeyValueEntry).filter_by(key=key).delete()
            db.commit()
        finally:
            db.close()
