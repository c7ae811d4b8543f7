"""Firestore client construction (REST-based, no firebase-admin).

Credentials come from either FIREBASE_SERVICE_ACCOUNT_KEY (JSON string)
or FIREBASE_SERVICE_ACCOUNT_PATH (file path).
"""

import json
import logging
from pathlib import Path

import httpx

from app.core.config import Settings
from app.infrastructure.firebase._rest_client import FirestoreRESTClient, get_credentials

logger = logging.getLogger(__name__)


def load_key_dict(settings: Settings) -> dict | None:
    """Return service account dict from env key or file path."""
    key_json = (
        settings.firebase_service_account_key.get_secret_value()
        if settings.firebase_service_account_key
        else None
    )
    if key_json:
        try:
            return json.loads(key_json)
        except json.JSONDecodeError as e:
            raise ValueError("FIREBASE_SERVICE_ACCOUNT_KEY is not valid JSON") from e
    path = settings.firebase_service_account_path
    if path:
        resolved = Path(path).expanduser().resolve()
        if not resolved.is_file():
            logger.warning(
                "FIREBASE_SERVICE_ACCOUNT_PATH set but file not found: %s (resolved: %s)",
                path,
                resolved,
            )
            return None
        with open(resolved, encoding="utf-8") as f:
            return json.load(f)
    return None


def create_firestore_client(
    settings: Settings,
    project_id: str | None = None,
    *,
    http_client: httpx.AsyncClient | None = None,
) -> FirestoreRESTClient:
    """Build a FirestoreRESTClient from configured service account credentials.

    Args:
        settings: Application settings holding the credentials.
        project_id: Overrides the service account's ``project_id``.
        http_client: Optional shared client (not closed by the Firestore client).

    Raises:
        ValueError: Missing or malformed credentials, or no project id.
    """
    key_dict = load_key_dict(settings)
    if not key_dict:
        raise ValueError("Firestore credentials not found")
    project = project_id or key_dict.get("project_id")
    if not project:
        raise ValueError("Firebase service account JSON missing 'project_id'")
    client = FirestoreRESTClient(project, get_credentials(key_dict), http_client=http_client)
    logger.info("Firestore client initialized for project %s", project)
    return client
