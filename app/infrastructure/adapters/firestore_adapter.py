"""Hosted datastore adapter on Cloud Firestore (REST).

Each storage name maps to a top-level collection. A record's serial is also
its document ID, so reads by key are single document fetches. Serials are
allocated as ``max + 1`` and claimed with createDocument, which fails with
409 when a concurrent writer took the same ID first; the claim is retried.
"""

import logging
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import Any

import httpx

from app.infrastructure.adapters.abstract_adapter import AbstractAdapter
from app.infrastructure.adapters.model import Property, Resource
from app.infrastructure.adapters.query import Operator, Query, sort_and_slice
from app.infrastructure.exceptions import AdapterException, SerialAllocationError
from app.infrastructure.firebase._rest_client import (
    CollectionReference,
    DocumentExistsError,
    FirestoreRESTClient,
)

logger = logging.getLogger(__name__)

MAX_SERIAL_ATTEMPTS = 5

_OPERATOR_SYMBOLS: dict[Operator, str] = {
    Operator.EQL: "==",
    Operator.NOT: "!=",
    Operator.GT: ">",
    Operator.GTE: ">=",
    Operator.LT: "<",
    Operator.LTE: "<=",
    Operator.IN: "in",
}


class FirestoreAdapter(AbstractAdapter):
    """Adapter storing each record as a Firestore document.

    Filters run server side; ordering, offset and limit are applied in process
    so equality filters never need composite indexes.
    """

    def __init__(
        self,
        name: str,
        options: Mapping[str, Any] | None = None,
        *,
        client: FirestoreRESTClient,
        **kwargs: Any,
    ) -> None:
        super().__init__(name, options, **kwargs)
        self.client = client

    @contextmanager
    def _translate_errors(self, operation: str) -> Iterator[None]:
        try:
            yield
        except httpx.HTTPError as e:
            logger.error("Firestore %s failed: %s", operation, e)
            raise AdapterException(self.name, operation, str(e)) from e

    def _collection(self, storage: str) -> CollectionReference:
        return self.client.collection(storage)

    async def close(self) -> None:
        await self.client.aclose()

    async def create(self, resources: Sequence[Resource]) -> int:
        created = 0
        with self._translate_errors("create"):
            for resource in resources:
                await self._create_one(resource)
                created += 1
        return created

    async def _create_one(self, resource: Resource) -> None:
        storage = self.storage_name(resource.model)
        collection = self._collection(storage)
        serial = resource.model.serial
        if serial is None or resource.get(serial) is not None:
            doc_id = str(resource.key) if serial is not None else None
            if doc_id is None:
                raise AdapterException(self.name, "create", f"{resource.model.name} has no serial key")
            try:
                await collection.create(doc_id, self.resource_as_fields(resource))
            except DocumentExistsError as e:
                raise AdapterException(
                    self.name, "create", f"document {doc_id} already exists in '{storage}'"
                ) from e
            return
        key_field = self.field_name(serial)
        for _ in range(MAX_SERIAL_ATTEMPTS):
            next_id = await self._max_serial(collection, key_field) + 1
            fields = self.resource_as_fields(resource)
            fields[key_field] = next_id
            try:
                await collection.create(str(next_id), fields)
            except DocumentExistsError:
                logger.debug("Serial %s in %s already taken, retrying", next_id, storage)
                continue
            self.initialize_serial(resource, next_id)
            return
        raise SerialAllocationError(self.name, storage, MAX_SERIAL_ATTEMPTS)

    async def _max_serial(self, collection: CollectionReference, key_field: str) -> int:
        query = collection.query().order_by(key_field, "DESCENDING").limit(1)
        async for snapshot in query.stream():
            value = snapshot.to_dict().get(key_field)
            return int(value) if value is not None else 0
        return 0

    async def read(self, query: Query) -> list[dict[str, Any]]:
        request = self._collection(self.storage_name(query.model)).query()
        for condition in query.conditions:
            value = condition.value
            if condition.operator is Operator.IN:
                value = list(value)
            request = request.where(
                self.field_name(condition.property),
                _OPERATOR_SYMBOLS[condition.operator],
                value,
            )
        with self._translate_errors("read"):
            rows = [snapshot.to_dict() async for snapshot in request.stream()]
        return sort_and_slice(rows, query, self.field_name)

    async def update(
        self, attributes: Mapping[Property, Any], collection: Sequence[Resource]
    ) -> int:
        fields = self.attributes_as_fields(attributes)
        if not fields:
            return 0
        updated = 0
        with self._translate_errors("update"):
            for resource in collection:
                if resource.key is None:
                    continue
                document = self._collection(self.storage_name(resource.model)).document(
                    str(resource.key)
                )
                if await document.update(fields):
                    updated += 1
        return updated

    async def delete(self, collection: Sequence[Resource]) -> int:
        deleted = 0
        with self._translate_errors("delete"):
            for resource in collection:
                if resource.key is None:
                    continue
                document = self._collection(self.storage_name(resource.model)).document(
                    str(resource.key)
                )
                if await document.get() is None:
                    continue
                await document.delete()
                deleted += 1
        return deleted
