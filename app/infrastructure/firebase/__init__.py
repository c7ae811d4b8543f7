"""Firestore REST integration."""

from app.infrastructure.firebase._rest_client import (
    DocumentExistsError,
    FirestoreRESTClient,
)
from app.infrastructure.firebase.client import create_firestore_client

__all__ = [
    "DocumentExistsError",
    "FirestoreRESTClient",
    "create_firestore_client",
]
