"""Storage adapter contract.

Specific adapters extend AbstractAdapter and implement the methods for
creating, reading, updating and deleting records.

Adapters may implement only reading or (less common) only writing. A
read-only adapter is useful for legacy data that must not change, or for web
services and feeds that only provide read access. Nothing here is an
abstractmethod: the base class can be instantiated and every CRUD method
raises NotImplementedError until a subclass overrides it.
"""

from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import Any

from app.infrastructure.adapters.model import ModelSpec, Property, Resource
from app.infrastructure.adapters.naming import (
    FieldNamingConvention,
    ResourceNamingConvention,
    field_underscored,
    underscored_and_pluralized,
)
from app.infrastructure.adapters.query import Query


class AbstractAdapter:
    """Base class for storage backends.

    Attributes:
        name: Adapter name, e.g. ``default`` (the repository name it serves).
        options: Read-only copy of the options the adapter was set up with.
        resource_naming_convention: Maps a model name to its storage name.
        field_naming_convention: Maps a property name to its field name.
    """

    def __init__(
        self,
        name: str,
        options: Mapping[str, Any] | None = None,
        *,
        resource_naming_convention: ResourceNamingConvention = underscored_and_pluralized,
        field_naming_convention: FieldNamingConvention = field_underscored,
    ) -> None:
        self._name = name
        self._options: Mapping[str, Any] = MappingProxyType(dict(options or {}))
        self.resource_naming_convention = resource_naming_convention
        self.field_naming_convention = field_naming_convention

    @property
    def name(self) -> str:
        return self._name

    @property
    def options(self) -> Mapping[str, Any]:
        return self._options

    # --- CRUD contract ---

    async def create(self, resources: Sequence[Resource]) -> int:
        """Persist new resources and assign their serial keys.

        Args:
            resources: Unsaved resources (serial unset).

        Returns:
            The number of resources actually persisted.
        """
        raise NotImplementedError(f"{type(self).__name__}.create not implemented")

    async def read(self, query: Query) -> list[dict[str, Any]]:
        """Return raw field-value mappings matching the query.

        Keys are storage field names (after the field naming convention),
        rows are ordered by ``query.effective_order``.
        """
        raise NotImplementedError(f"{type(self).__name__}.read not implemented")

    async def update(
        self, attributes: Mapping[Property, Any], collection: Sequence[Resource]
    ) -> int:
        """Apply ``attributes`` to every resource in ``collection``.

        Returns:
            The number of records updated.
        """
        raise NotImplementedError(f"{type(self).__name__}.update not implemented")

    async def delete(self, collection: Sequence[Resource]) -> int:
        """Remove every resource in ``collection``.

        Returns:
            The number of records deleted.
        """
        raise NotImplementedError(f"{type(self).__name__}.delete not implemented")

    # --- Lifecycle ---

    async def auto_migrate(self, *models: ModelSpec) -> None:
        """Create storage structures for the given models. No-op for schemaless stores."""

    async def close(self) -> None:
        """Release connections and clients held by the adapter."""

    # --- Equality ---

    def equals(self, other: object) -> bool:
        """Strict equality: same object, or same class with equal configuration."""
        if self is other:
            return True
        if type(other) is not type(self) or not isinstance(other, AbstractAdapter):
            return False
        return self._same_configuration(other)

    def equivalent(self, other: object) -> bool:
        """Structural equality: same object, or any adapter with equal configuration."""
        if self is other:
            return True
        if not isinstance(other, AbstractAdapter):
            return False
        return self._same_configuration(other)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AbstractAdapter):
            return NotImplemented
        return self.equivalent(other)

    def __hash__(self) -> int:
        return hash(self._name)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self._name!r}>"

    def _same_configuration(self, other: "AbstractAdapter") -> bool:
        return (
            self.name == other.name
            and dict(self.options) == dict(other.options)
            and self.resource_naming_convention == other.resource_naming_convention
            and self.field_naming_convention == other.field_naming_convention
        )

    # --- Helpers for subclasses ---

    def storage_name(self, model: ModelSpec) -> str:
        """Table / collection name for a model."""
        return model.storage_name_override or self.resource_naming_convention(model.name)

    def field_name(self, prop: Property) -> str:
        """Column / field name for a property."""
        return prop.field_name or self.field_naming_convention(prop.name)

    def initialize_serial(self, resource: Resource, next_id: int) -> None:
        """Set the resource's serial to ``next_id`` unless it has none or it is already set."""
        serial = resource.model.serial
        if serial is None:
            return
        if resource.get(serial) is not None:
            return
        resource.set(serial, next_id)

    def attributes_as_fields(self, attributes: Mapping[Property, Any]) -> dict[str, Any]:
        """Map ``{Property: value}`` to ``{field_name: value}``."""
        return {self.field_name(prop): value for prop, value in attributes.items()}

    def resource_as_fields(self, resource: Resource) -> dict[str, Any]:
        """Field mapping of every property set on the resource."""
        return self.attributes_as_fields(
            {
                prop: resource.attributes[prop.name]
                for prop in resource.model.properties
                if prop.name in resource.attributes
            }
        )
