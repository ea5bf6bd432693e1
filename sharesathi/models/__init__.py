"""
Data models
"""
from sharesathi.models.kv_store import KeyValueEntry

__all__ = [
    "KeyValueEntry",
]
