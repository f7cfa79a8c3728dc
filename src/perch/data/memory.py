"""In-memory data source, for tests, demos and small fixed datasets."""

import threading
from collections.abc import Iterable, Mapping
from typing import Any

from perch.data.source import applicable_filters
from perch.table import record_fields, record_value


def _matches(value: Any, wanted: Any) -> bool:
    return value == wanted or str(value) == str(wanted)


def _sort_key(record: Any) -> tuple[int, Any]:
    ident = record_value(record, "id")
    if ident is None:
        return (1, 0)
    return (0, ident)


class MemorySource:
    """Records held in lists per model, ordered by ``id``.

    Thread safety:
        ``add()`` replaces a model's list under a lock; fetches read
        whichever list is current.
    """

    __slots__ = ("_lock", "_records")

    def __init__(self, records: Mapping[type, Iterable[Any]] | None = None) -> None:
        self._lock = threading.Lock()
        self._records: dict[type, list[Any]] = {}
        for model, items in (records or {}).items():
            self.add(model, *items)

    def add(self, model: type, *records: Any) -> None:
        """Store ``records`` under ``model``, keeping the list sorted by ``id``."""
        with self._lock:
            items = [*self._records.get(model, ()), *records]
            items.sort(key=_sort_key)
            self._records = {**self._records, model: items}

    def records(self, model: type) -> list[Any]:
        return list(self._records.get(model, ()))

    def _select(self, model: type, filters: Mapping[str, Any]) -> list[Any]:
        items = self._records.get(model, [])
        if not items or not filters:
            return list(items)
        wanted = applicable_filters(filters, record_fields(items[0]))
        return [
            r for r in items if all(_matches(record_value(r, k), v) for k, v in wanted.items())
        ]

    async def fetch_page(
        self, model: type, offset: int, limit: int, filters: Mapping[str, Any]
    ) -> list[Any]:
        return self._select(model, filters)[offset : offset + limit]

    async def fetch_one(self, model: type, filters: Mapping[str, Any]) -> Any | None:
        found = self._select(model, filters)
        return found[0] if found else None
