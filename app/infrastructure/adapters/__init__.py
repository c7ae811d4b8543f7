"""Storage adapters: the CRUD contract and its backends."""

from app.infrastructure.adapters.abstract_adapter import AbstractAdapter
from app.infrastructure.adapters.factory import AdapterFactory
from app.infrastructure.adapters.firestore_adapter import FirestoreAdapter
from app.infrastructure.adapters.in_memory_adapter import InMemoryAdapter
from app.infrastructure.adapters.model import ModelSpec, Property, PropertyKind, Resource
from app.infrastructure.adapters.query import Condition, Direction, Operator, Ordering, Query
from app.infrastructure.adapters.sqlalchemy_adapter import SqlAlchemyAdapter

__all__ = [
    "AbstractAdapter",
    "AdapterFactory",
    "Condition",
    "Direction",
    "FirestoreAdapter",
    "InMemoryAdapter",
    "ModelSpec",
    "Operator",
    "Ordering",
    "Property",
    "PropertyKind",
    "Query",
    "Resource",
    "SqlAlchemyAdapter",
]
