"""Typed entity stores layered over a key-value backend."""

from dataclasses import dataclass
from typing import Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel

from models.customer import Customer
from models.interaction import Interaction
from models.purchase import Purchase
from repositories.kv_store import InMemoryStore, Item, KeyValueStore
from utils.settings import Settings

T = TypeVar("T", bound=BaseModel)


class EntityStore(Generic[T]):
    """Identifier-keyed map of one record type."""

    def __init__(self, model: Type[T], backend: KeyValueStore):
        self.model = model
        self.backend = backend

    def _load(self, item: Optional[Item]) -> Optional[T]:
        return self.model.model_validate(item) if item is not None else None

    def get(self, record_id: str) -> Optional[T]:
        return self._load(self.backend.get(record_id))

    def insert(self, record_id: str, record: T) -> Optional[T]:
        """Upsert a record; create and update share this primitive."""
        previous = self.backend.insert(record_id, record.model_dump(mode="json"))
        return self._load(previous)

    def remove(self, record_id: str) -> Optional[T]:
        return self._load(self.backend.remove(record_id))

    def values(self) -> List[T]:
        return [self.model.model_validate(item) for item in self.backend.values()]

    def contains_key(self, record_id: str) -> bool:
        return self.backend.contains_key(record_id)


@dataclass
class Stores:
    """The three standalone stores. Writes across them are independent."""

    customers: EntityStore[Customer]
    interactions: EntityStore[Interaction]
    purchases: EntityStore[Purchase]


def in_memory_stores() -> Stores:
    """Fresh, empty stores backed by process memory."""
    return Stores(
        customers=EntityStore(Customer, InMemoryStore()),
        interactions=EntityStore(Interaction, InMemoryStore()),
        purchases=EntityStore(Purchase, InMemoryStore()),
    )


def build_stores(settings: Settings) -> Stores:
    """Assemble stores for the configured backend."""
    if settings.storage_backend == "memory":
        return in_memory_stores()

    from repositories.dynamodb_repo import DynamoDbStore

    return Stores(
        customers=EntityStore(Customer, DynamoDbStore(settings.customers_table)),
        interactions=EntityStore(Interaction, DynamoDbStore(settings.interactions_table)),
        purchases=EntityStore(Purchase, DynamoDbStore(settings.purchases_table)),
    )
