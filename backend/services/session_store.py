import logging
from typing import Generic, TypeVar
from pydantic import BaseModel

logger = logging.getLogger("session_store")

T = TypeVar("T", bound=BaseModel)


class SessionNotFoundError(KeyError):
    pass


class InMemoryStore(Generic[T]):
    """Holds the current value of each session/workspace, keyed by its id.

    Values are immutable; ``save`` replaces the stored value wholesale.
    Nothing survives a restart.
    """

    def __init__(self, kind: str):
        self.kind = kind
        self._items: dict[str, T] = {}

    def add(self, item: T) -> T:
        self._items[item.id] = item
        logger.info(f"Created {self.kind} {item.id}")
        return item

    def get(self, item_id: str) -> T:
        try:
            return self._items[item_id]
        except KeyError:
            raise SessionNotFoundError(f"{self.kind} {item_id} not found")

    def save(self, item: T) -> T:
        if item.id not in self._items:
            raise SessionNotFoundError(f"{self.kind} {item.id} not found")
        self._items[item.id] = item
        return item

    def remove(self, item_id: str) -> None:
        if self._items.pop(item_id, None) is None:
            raise SessionNotFoundError(f"{self.kind} {item_id} not found")
        logger.info(f"Removed {self.kind} {item_id}")

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)


# Singletons
_review_store = None
_workspace_store = None


def get_review_store() -> InMemoryStore:
    global _review_store
    if _review_store is None:
        _review_store = InMemoryStore("review session")
    return _review_store


def get_workspace_store() -> InMemoryStore:
    global _workspace_store
    if _workspace_store is None:
        _workspace_store = InMemoryStore("workspace")
    return _workspace_store
