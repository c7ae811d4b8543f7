"""Resource model descriptions handed to adapters.

A ModelSpec lists the properties of a stored model; a Resource is one record
in flight (model + attribute values keyed by property name). Adapters never
see domain entities, only these.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class PropertyKind(str, Enum):
    """Storage type of a property."""

    SERIAL = "serial"
    STRING = "string"
    TEXT = "text"
    INTEGER = "integer"


@dataclass(frozen=True)
class Property:
    """A model property.

    ``field_name`` overrides the adapter's field naming convention.
    ``length`` applies to STRING columns and ``index`` to lookup columns
    in SQL backends.
    """

    name: str
    kind: PropertyKind
    field_name: str | None = None
    length: int | None = None
    index: bool = False

    @property
    def serial(self) -> bool:
        return self.kind is PropertyKind.SERIAL


@dataclass(frozen=True)
class ModelSpec:
    """A stored model: name, properties, optional explicit storage name."""

    name: str
    properties: tuple[Property, ...]
    storage_name_override: str | None = None

    def __post_init__(self) -> None:
        names = [p.name for p in self.properties]
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate property names on model {self.name}")
        if sum(1 for p in self.properties if p.serial) > 1:
            raise ValueError(f"Model {self.name} declares more than one serial property")

    @property
    def serial(self) -> Property | None:
        """Return the serial (auto-assigned id) property, or None."""
        for prop in self.properties:
            if prop.serial:
                return prop
        return None

    @property
    def key(self) -> Property:
        """Return the property identifying a record (the serial).

        Raises:
            ValueError: If the model has no serial property.
        """
        serial = self.serial
        if serial is None:
            raise ValueError(f"Model {self.name} has no serial key")
        return serial

    def property(self, name: str) -> Property:
        """Return a property by name.

        Raises:
            KeyError: Unknown property name.
        """
        for prop in self.properties:
            if prop.name == name:
                return prop
        raise KeyError(f"{self.name} has no property {name!r}")


@dataclass
class Resource:
    """One record of a model with its attribute values."""

    model: ModelSpec
    attributes: dict[str, Any] = field(default_factory=dict)

    def get(self, prop: Property) -> Any:
        return self.attributes.get(prop.name)

    def set(self, prop: Property, value: Any) -> None:
        self.attributes[prop.name] = value

    @property
    def key(self) -> Any:
        """Return the serial value (None while unsaved)."""
        return self.get(self.model.key)
