"""SQL adapter on SQLAlchemy Core (async engine).

Tables are derived from ModelSpecs using the adapter's naming conventions, so
the same model lands in ``file_items`` with the default conventions and in
whatever the configured convention yields otherwise.
"""

import logging
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import Any

from sqlalchemy import (
    Column,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    delete,
    insert,
    select,
    update,
)
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.sql.elements import ColumnElement

from app.infrastructure.adapters.abstract_adapter import AbstractAdapter
from app.infrastructure.adapters.model import ModelSpec, Property, PropertyKind, Resource
from app.infrastructure.adapters.query import Condition, Direction, Operator, Query
from app.infrastructure.exceptions import AdapterException
from app.infrastructure.persistence.database import create_engine_for

logger = logging.getLogger(__name__)


class SqlAlchemyAdapter(AbstractAdapter):
    """Adapter for relational databases reachable through an async SQLAlchemy driver.

    Options:
        url: SQLAlchemy async database URL (required unless ``engine`` is given).
        echo, pool_size, max_overflow: Passed to the engine factory.
    """

    def __init__(
        self,
        name: str,
        options: Mapping[str, Any] | None = None,
        *,
        engine: AsyncEngine | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(name, options, **kwargs)
        if engine is None:
            if "url" not in self.options:
                raise ValueError("SqlAlchemyAdapter needs a 'url' option or an engine")
            engine = create_engine_for(
                self.options["url"],
                echo=bool(self.options.get("echo", False)),
                pool_size=self.options.get("pool_size"),
                max_overflow=self.options.get("max_overflow"),
            )
        self.engine = engine
        self.metadata = MetaData()
        self._tables: dict[str, Table] = {}

    def table_for(self, model: ModelSpec) -> Table:
        """Return (building on first use) the Table for a model."""
        storage = self.storage_name(model)
        table = self._tables.get(storage)
        if table is None:
            columns = [self._column_for(prop) for prop in model.properties]
            table = Table(storage, self.metadata, *columns)
            self._tables[storage] = table
        return table

    def _column_for(self, prop: Property) -> Column:
        name = self.field_name(prop)
        if prop.kind is PropertyKind.SERIAL:
            return Column(name, Integer, primary_key=True, autoincrement=True)
        if prop.kind is PropertyKind.STRING:
            return Column(name, String(prop.length), index=prop.index)
        if prop.kind is PropertyKind.TEXT:
            return Column(name, Text)
        return Column(name, Integer, index=prop.index)

    @contextmanager
    def _translate_errors(self, operation: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as e:
            logger.error("SQL %s failed: %s", operation, e)
            raise AdapterException(self.name, operation, str(e)) from e

    async def auto_migrate(self, *models: ModelSpec) -> None:
        tables = [self.table_for(model) for model in models]
        with self._translate_errors("auto_migrate"):
            async with self.engine.begin() as conn:
                await conn.run_sync(self.metadata.create_all, tables=tables)
        logger.info("Ensured tables: %s", ", ".join(t.name for t in tables))

    async def close(self) -> None:
        await self.engine.dispose()

    async def create(self, resources: Sequence[Resource]) -> int:
        created = 0
        with self._translate_errors("create"):
            async with self.engine.begin() as conn:
                for resource in resources:
                    table = self.table_for(resource.model)
                    result = await conn.execute(
                        insert(table).values(self.resource_as_fields(resource))
                    )
                    primary_key = result.inserted_primary_key
                    if primary_key and primary_key[0] is not None:
                        self.initialize_serial(resource, primary_key[0])
                    created += 1
        return created

    async def read(self, query: Query) -> list[dict[str, Any]]:
        table = self.table_for(query.model)
        stmt = select(table)
        for condition in query.conditions:
            stmt = stmt.where(self._clause(table, condition))
        for ordering in query.effective_order:
            column = table.c[self.field_name(ordering.property)]
            stmt = stmt.order_by(column.desc() if ordering.direction is Direction.DESC else column.asc())
        if query.offset:
            stmt = stmt.offset(query.offset)
        if query.limit is not None:
            stmt = stmt.limit(query.limit)
        with self._translate_errors("read"):
            async with self.engine.connect() as conn:
                result = await conn.execute(stmt)
                return [dict(row._mapping) for row in result]

    async def update(
        self, attributes: Mapping[Property, Any], collection: Sequence[Resource]
    ) -> int:
        fields = self.attributes_as_fields(attributes)
        if not fields or not collection:
            return 0
        updated = 0
        with self._translate_errors("update"):
            async with self.engine.begin() as conn:
                for model, keys in self._keys_by_model(collection).items():
                    table = self.table_for(model)
                    key_column = table.c[self.field_name(model.key)]
                    result = await conn.execute(
                        update(table).where(key_column.in_(keys)).values(fields)
                    )
                    updated += result.rowcount
        return updated

    async def delete(self, collection: Sequence[Resource]) -> int:
        if not collection:
            return 0
        deleted = 0
        with self._translate_errors("delete"):
            async with self.engine.begin() as conn:
                for model, keys in self._keys_by_model(collection).items():
                    table = self.table_for(model)
                    key_column = table.c[self.field_name(model.key)]
                    result = await conn.execute(delete(table).where(key_column.in_(keys)))
                    deleted += result.rowcount
        return deleted

    def _clause(self, table: Table, condition: Condition) -> ColumnElement[bool]:
        column = table.c[self.field_name(condition.property)]
        op = condition.operator
        value = condition.value
        if op is Operator.EQL:
            return column.is_(None) if value is None else column == value
        if op is Operator.NOT:
            return column.is_not(None) if value is None else column != value
        if op is Operator.IN:
            return column.in_(list(value))
        if op is Operator.GT:
            return column > value
        if op is Operator.GTE:
            return column >= value
        if op is Operator.LT:
            return column < value
        return column <= value

    def _keys_by_model(self, collection: Sequence[Resource]) -> dict[ModelSpec, list[Any]]:
        grouped: dict[ModelSpec, list[Any]] = {}
        for resource in collection:
            if resource.key is not None:
                grouped.setdefault(resource.model, []).append(resource.key)
        return grouped
