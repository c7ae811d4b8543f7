"""Adapter selection from DATABASE_URL.

``memory://`` -> InMemoryAdapter
``sqlite+aiosqlite://...``, ``postgresql+asyncpg://...`` -> SqlAlchemyAdapter
``firestore://auto`` or ``firestore://<project-id>`` -> FirestoreAdapter
"""

import logging
from typing import Any
from urllib.parse import urlsplit

from app.core.config import SQL_SCHEMES, Settings
from app.infrastructure.adapters.abstract_adapter import AbstractAdapter
from app.infrastructure.adapters.firestore_adapter import FirestoreAdapter
from app.infrastructure.adapters.in_memory_adapter import InMemoryAdapter
from app.infrastructure.adapters.naming import field_convention, resource_convention
from app.infrastructure.adapters.sqlalchemy_adapter import SqlAlchemyAdapter
from app.infrastructure.firebase.client import create_firestore_client

logger = logging.getLogger(__name__)


def adapter_options(database_url: str) -> dict[str, Any]:
    """Split a database URL into the options an adapter is set up with."""
    parts = urlsplit(database_url)
    return {
        "adapter": parts.scheme.split("+", 1)[0].lower(),
        "host": parts.hostname,
        "path": parts.path,
        "url": database_url,
    }


class AdapterFactory:
    """Build the storage adapter named by settings."""

    @staticmethod
    def create_adapter(settings: Settings) -> AbstractAdapter:
        """Return a new adapter for ``settings.database_url``.

        Raises:
            ValueError: Unknown scheme or naming convention, or missing Firestore credentials.
        """
        options = adapter_options(settings.database_url)
        scheme = options["adapter"]
        conventions = {
            "resource_naming_convention": resource_convention(
                settings.resource_naming_convention
            ),
            "field_naming_convention": field_convention(settings.field_naming_convention),
        }
        name = settings.adapter_name

        if scheme == "memory":
            adapter: AbstractAdapter = InMemoryAdapter(name, options, **conventions)
        elif scheme in SQL_SCHEMES:
            options.update(
                echo=settings.database_echo,
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
            )
            adapter = SqlAlchemyAdapter(name, options, **conventions)
        elif scheme == "firestore":
            host = options["host"]
            project_id = None if host in (None, "", "auto") else host
            client = create_firestore_client(settings, project_id)
            options["project"] = client.project_id
            adapter = FirestoreAdapter(name, options, client=client, **conventions)
        else:
            raise ValueError(f"No adapter for DATABASE_URL scheme {scheme!r}")

        logger.info("Using %s for repository %r", type(adapter).__name__, name)
        return adapter
