"""Key-value store interface and the in-memory backend."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

Item = Dict[str, Any]


class KeyValueStore(ABC):
    """
    Durable map from string key to a plain dict item.

    ``insert`` is an upsert and, like ``remove``, returns the value that was
    previously stored under the key. ``values`` is ordered by key.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[Item]:
        """Return the item stored under key."""

    @abstractmethod
    def insert(self, key: str, item: Item) -> Optional[Item]:
        """Store item under key."""

    @abstractmethod
    def remove(self, key: str) -> Optional[Item]:
        """Delete key."""

    @abstractmethod
    def values(self) -> List[Item]:
        """Return every stored item."""

    def contains_key(self, key: str) -> bool:
        return self.get(key) is not None


class InMemoryStore(KeyValueStore):
    """Dict-backed store used for local runs and tests."""

    def __init__(self) -> None:
        self._items: Dict[str, Item] = {}

    def get(self, key: str) -> Optional[Item]:
        return self._items.get(key)

    def insert(self, key: str, item: Item) -> Optional[Item]:
        previous = self._items.get(key)
        self._items[key] = item
        return previous

    def remove(self, key: str) -> Optional[Item]:
        return self._items.pop(key, None)

    def values(self) -> List[Item]:
        return [self._items[key] for key in sorted(self._items)]

    def contains_key(self, key: str) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)
