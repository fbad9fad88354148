# Storage package init
"""
API Scaffold — Storage Layer
=============================

Store:        abstract async CRUD interface handed to handlers
MemoryStore:  list-backed implementation (process lifetime only)
"""

from apiscaffold.storage.base import Store
from apiscaffold.storage.memory import MemoryStore

__all__ = ["Store", "MemoryStore"]
