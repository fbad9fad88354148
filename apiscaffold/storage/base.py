"""
API Scaffold — Storage Interface
=================================

What:  Abstract CRUD capability injected into route handlers.
Why:   Handlers talk to a Store, never to a module-level list, so a real
       persistence backend can replace MemoryStore without touching routes.
How:   An ABC with async methods; concrete
       backends live next to it.

Record contract:
    Records are plain dicts keyed by snake_case field names. create()
    assigns `id`, `created_at` and `updated_at`; update() merges the given
    changes and moves `updated_at` forward.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class Store(ABC):
    """Create/read/update/delete by id plus filtered listing."""

    @abstractmethod
    async def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Persist a new record and return it with server-assigned fields."""
        ...

    @abstractmethod
    async def get(self, record_id: Any) -> Optional[Dict[str, Any]]:
        """Return the record with `record_id`, or None."""
        ...

    @abstractmethod
    async def update(self, record_id: Any, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Merge `changes` into the record; None if it does not exist."""
        ...

    @abstractmethod
    async def delete(self, record_id: Any) -> bool:
        """Remove the record; False if it did not exist."""
        ...

    @abstractmethod
    async def list(self, **filters: Any) -> List[Dict[str, Any]]:
        """
        Records whose fields equal every given filter.

        Filters whose value is None are ignored, so optional query
        parameters can be passed straight through.
        """
        ...
