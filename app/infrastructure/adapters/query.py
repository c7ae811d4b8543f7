"""Query description passed to AbstractAdapter.read."""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from app.infrastructure.adapters.model import ModelSpec, Property


class Operator(str, Enum):
    """Comparison operators supported by every adapter."""

    EQL = "eql"
    NOT = "not"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"
    IN = "in"


class Direction(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class Condition:
    """``property <operator> value``."""

    property: Property
    operator: Operator
    value: Any

    def matches(self, candidate: Any) -> bool:
        """Evaluate the condition against a stored value (used by non-SQL adapters)."""
        op = self.operator
        if op is Operator.EQL:
            return candidate == self.value
        if op is Operator.NOT:
            return candidate != self.value
        if op is Operator.IN:
            return candidate in self.value
        if candidate is None:
            return False
        if op is Operator.GT:
            return candidate > self.value
        if op is Operator.GTE:
            return candidate >= self.value
        if op is Operator.LT:
            return candidate < self.value
        return candidate <= self.value


@dataclass(frozen=True)
class Ordering:
    property: Property
    direction: Direction = Direction.ASC


@dataclass(frozen=True)
class Query:
    """What to read: model, conditions (ANDed), ordering, offset and limit.

    When ``order`` is empty, adapters order by the model's serial ascending,
    so the first match is always the first record created.
    """

    model: ModelSpec
    conditions: tuple[Condition, ...] = ()
    order: tuple[Ordering, ...] = ()
    offset: int = 0
    limit: int | None = None

    def __post_init__(self) -> None:
        if self.offset < 0:
            raise ValueError("Query offset must be >= 0")
        if self.limit is not None and self.limit < 0:
            raise ValueError("Query limit must be >= 0")

    @property
    def effective_order(self) -> tuple[Ordering, ...]:
        if self.order:
            return self.order
        serial = self.model.serial
        return (Ordering(serial),) if serial is not None else ()

    @classmethod
    def build(
        cls,
        model: ModelSpec,
        conditions: dict[str, Any] | None = None,
        *,
        order: list[str] | None = None,
        offset: int = 0,
        limit: int | None = None,
    ) -> "Query":
        """Build from attribute names.

        ``conditions`` maps a property name to a value (equality) or to an
        ``(Operator, value)`` tuple. ``order`` entries are property names,
        prefixed with ``-`` for descending.
        """
        built: list[Condition] = []
        for name, value in (conditions or {}).items():
            prop = model.property(name)
            if isinstance(value, tuple) and len(value) == 2 and isinstance(value[0], Operator):
                built.append(Condition(prop, value[0], value[1]))
            else:
                built.append(Condition(prop, Operator.EQL, value))
        ordering: list[Ordering] = []
        for name in order or []:
            if name.startswith("-"):
                ordering.append(Ordering(model.property(name[1:]), Direction.DESC))
            else:
                ordering.append(Ordering(model.property(name)))
        return cls(
            model=model,
            conditions=tuple(built),
            order=tuple(ordering),
            offset=offset,
            limit=limit,
        )


def sort_and_slice(
    rows: list[dict[str, Any]],
    query: Query,
    field_of: Callable[[Property], str],
) -> list[dict[str, Any]]:
    """Order rows by ``query.effective_order`` then apply offset and limit.

    For adapters that filter in process. ``field_of`` maps a property to the
    row key (the adapter's field name). None sorts last in both directions.
    """
    ordered = list(rows)
    for ordering in reversed(query.effective_order):
        key = field_of(ordering.property)
        descending = ordering.direction is Direction.DESC
        present = [r for r in ordered if r.get(key) is not None]
        missing = [r for r in ordered if r.get(key) is None]
        present.sort(key=lambda r: r[key], reverse=descending)
        ordered = present + missing
    end = None if query.limit is None else query.offset + query.limit
    return ordered[query.offset:end]
