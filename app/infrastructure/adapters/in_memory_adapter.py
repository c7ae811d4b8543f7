"""In-process adapter: records live in dicts keyed by storage name.

For development and tests. Contents are lost when the process exits.
"""

import asyncio
import copy
from collections.abc import Mapping, Sequence
from typing import Any

from app.infrastructure.adapters.abstract_adapter import AbstractAdapter
from app.infrastructure.adapters.model import Property, Resource
from app.infrastructure.adapters.query import Query, sort_and_slice


class InMemoryAdapter(AbstractAdapter):
    """Adapter storing rows as field dicts; serials start at 1 per storage name."""

    def __init__(self, name: str, options: Mapping[str, Any] | None = None, **kwargs: Any) -> None:
        super().__init__(name, options, **kwargs)
        self._tables: dict[str, list[dict[str, Any]]] = {}
        self._serials: dict[str, int] = {}
        self._lock = asyncio.Lock()

    async def create(self, resources: Sequence[Resource]) -> int:
        async with self._lock:
            for resource in resources:
                storage = self.storage_name(resource.model)
                next_id = self._serials.get(storage, 0) + 1
                self._serials[storage] = next_id
                self.initialize_serial(resource, next_id)
                self._tables.setdefault(storage, []).append(
                    copy.deepcopy(self.resource_as_fields(resource))
                )
            return len(resources)

    async def read(self, query: Query) -> list[dict[str, Any]]:
        async with self._lock:
            rows = self._tables.get(self.storage_name(query.model), [])
            matched = [
                row
                for row in rows
                if all(
                    cond.matches(row.get(self.field_name(cond.property)))
                    for cond in query.conditions
                )
            ]
            window = sort_and_slice(matched, query, self.field_name)
            return copy.deepcopy(window)

    async def update(
        self, attributes: Mapping[Property, Any], collection: Sequence[Resource]
    ) -> int:
        if not collection:
            return 0
        fields = self.attributes_as_fields(attributes)
        async with self._lock:
            updated = 0
            for model, keys in self._group_keys(collection).items():
                key_field = self.field_name(model.key)
                for row in self._tables.get(self.storage_name(model), []):
                    if row.get(key_field) in keys:
                        row.update(copy.deepcopy(fields))
                        updated += 1
            return updated

    async def delete(self, collection: Sequence[Resource]) -> int:
        if not collection:
            return 0
        async with self._lock:
            deleted = 0
            for model, keys in self._group_keys(collection).items():
                storage = self.storage_name(model)
                key_field = self.field_name(model.key)
                rows = self._tables.get(storage, [])
                kept = [row for row in rows if row.get(key_field) not in keys]
                deleted += len(rows) - len(kept)
                self._tables[storage] = kept
            return deleted

    def _group_keys(self, collection: Sequence[Resource]) -> dict[Any, set[Any]]:
        grouped: dict[Any, set[Any]] = {}
        for resource in collection:
            if resource.key is not None:
                grouped.setdefault(resource.model, set()).add(resource.key)
        return grouped
