"""Application lifespan: startup and shutdown.

The adapter, shared HTTP client and telemetry are built in create_app and
held on app.state; lifespan only prepares storage and releases them.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.infrastructure.persistence.repositories import FILE_ITEM_MODEL

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup: create storage for FileItem when database_auto_migrate is set.
    Shutdown: close the shared HTTP client, close the adapter, flush telemetry.
    """
    settings = app.state.settings
    adapter = app.state.adapter

    # ---- Startup ----
    if settings.database_auto_migrate:
        await adapter.auto_migrate(FILE_ITEM_MODEL)
        logger.info("Storage ready for %s", FILE_ITEM_MODEL.name)

    yield

    # ---- Shutdown ----
    http_client = getattr(app.state, "http_client", None)
    if http_client is not None:
        await http_client.aclose()
        logger.info("Shared HTTP client closed")

    await adapter.close()
    logger.info("Adapter %r closed", adapter.name)

    telemetry = getattr(app.state, "telemetry", None)
    if telemetry is not None:
        telemetry.shutdown()
