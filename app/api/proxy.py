"""Fetch-through proxy: GET /proxy/<absolute-url>. Off unless PROXY_ENABLED."""

import logging
import re
from typing import Annotated

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from app.api.dependencies import SettingsDep, get_http_client
from app.core.limiter import limit_proxy
from app.domain.exceptions import (
    FeatureDisabledException,
    UpstreamFetchException,
    ValidationException,
)

logger = logging.getLogger(__name__)

router = APIRouter()

# Some front proxies collapse "//" in paths, turning http://host into http:/host.
_COLLAPSED_SCHEME = re.compile(r"^(https?):/(?!/)")


def normalize_target(raw: str, query: str = "") -> str:
    """Return the absolute upstream URL for a proxied path.

    Raises:
        ValidationException: Not an absolute http(s) URL.
    """
    url = _COLLAPSED_SCHEME.sub(r"\1://", raw)
    if not url.startswith(("http://", "https://")) or not url.split("://", 1)[1]:
        raise ValidationException("Proxy target must be an absolute http(s) URL", field="url")
    return f"{url}?{query}" if query else url


@router.get("/{url:path}")
@limit_proxy
async def proxy(
    request: Request,
    url: str,
    settings: SettingsDep,
    http_client: Annotated[httpx.AsyncClient, Depends(get_http_client)],
) -> Response:
    """Return the upstream body with the upstream content type."""
    if not settings.proxy_enabled:
        raise FeatureDisabledException("proxy")
    target = normalize_target(url, request.url.query)
    try:
        upstream = await http_client.get(target, follow_redirects=True)
        upstream.raise_for_status()
    except httpx.HTTPError as e:
        logger.warning("Proxy fetch of %s failed: %s", target, e)
        raise UpstreamFetchException(target, str(e)) from e
    return Response(
        content=upstream.content,
        status_code=upstream.status_code,
        media_type=upstream.headers.get("content-type", "application/octet-stream"),
    )
