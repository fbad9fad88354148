"""
API Scaffold — In-Memory Store
===============================

What:  Process-lifetime Store backed by a Python list.
Why:   The example modules need somewhere to keep records; durability is
       explicitly not a goal.
How:   Records are dicts in an unordered list. Ids are UUID4 strings and are
       compared as strings, so UUID objects and their text form both match.

Concurrency:
    Safe for single-process asyncio: no await happens between reading and
    mutating the list, so no request can observe a half-applied update.
    NOT shared across workers; each process has its own data.
"""

import copy
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from apiscaffold.storage.base import Store

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MemoryStore(Store):
    """
    List-backed Store.

    Returned records are copies; mutating them does not change the store.
    """

    def __init__(self, name: str = "records"):
        self.name = name
        self._records: List[Dict[str, Any]] = []

    async def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        now = utcnow()
        record = {
            "id": str(uuid4()),
            **{k: v for k, v in data.items() if k != "id"},
            "created_at": now,
            "updated_at": now,
        }
        self._records.append(record)
        logger.debug("Created %s record %s", self.name, record["id"])
        return copy.deepcopy(record)

    async def get(self, record_id: Any) -> Optional[Dict[str, Any]]:
        record = self._find(record_id)
        return copy.deepcopy(record) if record is not None else None

    async def update(self, record_id: Any, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        record = self._find(record_id)
        if record is None:
            return None

        # Server-owned fields cannot be overwritten by a merge
        merged = {k: v for k, v in changes.items() if k not in ("id", "created_at", "updated_at")}
        record.update(merged)

        # updated_at must move strictly forward, even within one clock tick
        previous = record["updated_at"]
        now = utcnow()
        record["updated_at"] = now if now > previous else previous + timedelta(microseconds=1)

        logger.debug("Updated %s record %s (%s)", self.name, record["id"], ", ".join(merged))
        return copy.deepcopy(record)

    async def delete(self, record_id: Any) -> bool:
        record = self._find(record_id)
        if record is None:
            return False
        self._records.remove(record)
        logger.debug("Deleted %s record %s", self.name, record["id"])
        return True

    async def list(self, **filters: Any) -> List[Dict[str, Any]]:
        active = {k: v for k, v in filters.items() if v is not None}
        return [
            copy.deepcopy(record)
            for record in self._records
            if all(_matches(record.get(k), v) for k, v in active.items())
        ]

    def clear(self) -> None:
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)

    def _find(self, record_id: Any) -> Optional[Dict[str, Any]]:
        key = str(record_id)
        for record in self._records:
            if record["id"] == key:
                return record
        return None


def _matches(stored: Any, wanted: Any) -> bool:
    if stored == wanted:
        return True
    # UUIDs may arrive as objects from validated input and as text elsewhere
    return str(stored) == str(wanted) and not isinstance(wanted, bool)
