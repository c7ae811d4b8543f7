"""Base repository: entity CRUD over a storage adapter, plus lifecycle hooks."""

from typing import Any, Generic, TypeVar

from app.domain.exceptions import ResourceNotFoundException
from app.infrastructure.adapters.abstract_adapter import AbstractAdapter
from app.infrastructure.adapters.model import ModelSpec, Resource
from app.infrastructure.adapters.query import Query


EntityType = TypeVar("EntityType")


class ResourceRepository(Generic[EntityType]):
    """Base repository with all, first, get, create, update, destroy and hooks.

    Subclasses set ``model`` and implement _to_entity / _to_attributes; they
    may override _on_after_create, _on_after_update, _on_before_delete.
    """

    model: ModelSpec

    def __init__(self, adapter: AbstractAdapter) -> None:
        self.adapter = adapter

    async def all(
        self,
        *,
        order: list[str] | None = None,
        offset: int = 0,
        limit: int | None = None,
        **conditions: Any,
    ) -> list[EntityType]:
        """Return entities matching ``conditions`` (property name -> value)."""
        query = Query.build(self.model, conditions, order=order, offset=offset, limit=limit)
        rows = await self.adapter.read(query)
        return [self._to_entity(self._attributes_from_row(row)) for row in rows]

    async def first(self, *, order: list[str] | None = None, **conditions: Any) -> EntityType | None:
        """Return the first match in ``order`` (serial ascending by default), or None."""
        found = await self.all(order=order, limit=1, **conditions)
        return found[0] if found else None

    async def get(self, key: Any) -> EntityType | None:
        """Return the entity with this serial key, or None."""
        return await self.first(**{self.model.key.name: key})

    async def create(self, entity: EntityType) -> EntityType:
        """Persist a new entity and run _on_after_create hook."""
        resource = Resource(self.model, self._to_attributes(entity))
        await self.adapter.create([resource])
        created = self._to_entity(resource.attributes)
        await self._on_after_create(created)
        return created

    async def update(self, entity: EntityType, **changes: Any) -> EntityType:
        """Write ``changes`` (property name -> value) and run _on_after_update hook.

        Raises:
            ResourceNotFoundException: No stored record has the entity's key.
        """
        resource = Resource(self.model, self._to_attributes(entity))
        attributes = {self.model.property(name): value for name, value in changes.items()}
        if await self.adapter.update(attributes, [resource]) == 0:
            raise ResourceNotFoundException(self.model.name, str(resource.key))
        resource.attributes.update(changes)
        updated = self._to_entity(resource.attributes)
        await self._on_after_update(updated)
        return updated

    async def destroy(self, entity: EntityType) -> bool:
        """Run _on_before_delete hook then delete; False if nothing was stored."""
        await self._on_before_delete(entity)
        resource = Resource(self.model, self._to_attributes(entity))
        return await self.adapter.delete([resource]) > 0

    def _attributes_from_row(self, row: dict[str, Any]) -> dict[str, Any]:
        return {prop.name: row.get(self.adapter.field_name(prop)) for prop in self.model.properties}

    def _to_entity(self, attributes: dict[str, Any]) -> EntityType:
        raise NotImplementedError

    def _to_attributes(self, entity: EntityType) -> dict[str, Any]:
        raise NotImplementedError

    async def _on_after_create(self, entity: EntityType) -> None:
        """Override in subclasses to log or emit events."""

    async def _on_after_update(self, entity: EntityType) -> None:
        """Override in subclasses to log or emit events."""

    async def _on_before_delete(self, entity: EntityType) -> None:
        """Override in subclasses to log or emit events."""
