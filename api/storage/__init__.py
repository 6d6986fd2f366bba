"""
Storage gateway: the only path to persisted users and posts.
"""

from .base import Storage, StorageError, UniquenessViolation
from .memory import MemoryStorage
from .postgres import DatabaseStorage

__all__ = [
    "DatabaseStorage",
    "MemoryStorage",
    "Storage",
    "StorageError",
    "UniquenessViolation",
]
