"""
Storage backends for SlideCreator.

- MemoryContentStore: in-memory (tests, development)
- MongoContentStore: MongoDB via motor (production)
"""

from .base import NAMED_MODELS, ContentStore, NamedRecord
from .memory import MemoryContentStore
from .mongo import MongoContentStore

__all__ = [
    "NAMED_MODELS",
    "ContentStore",
    "MemoryContentStore",
    "MongoContentStore",
    "NamedRecord",
]
