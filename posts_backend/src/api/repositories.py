from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from functools import lru_cache
from threading import RLock
from typing import List, Optional

from .models import PostEntity
from .schemas import PostCreate, PostUpdate
from .settings import get_settings

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class Repository(ABC):
    """Abstract repository contract for post storage backends."""

    @abstractmethod
    def create(self, data: PostCreate) -> PostEntity:
        """Create and return a new PostEntity with a freshly assigned id."""

    @abstractmethod
    def get(self, post_id: int) -> Optional[PostEntity]:
        """Return a PostEntity by id, or None if not found."""

    @abstractmethod
    def update(self, post_id: int, data: PostUpdate) -> Optional[PostEntity]:
        """Merge provided fields into an existing PostEntity. Return updated entity or None if not found."""

    @abstractmethod
    def delete(self, post_id: int) -> Optional[PostEntity]:
        """Delete a PostEntity by id. Return its last state, or None if not found."""

    @abstractmethod
    def list(self) -> List[PostEntity]:
        """Return every stored PostEntity ordered by id."""


class InMemoryRepository(Repository):
    """
    Thread-safe in-memory repository suitable for testing and default runtime.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._items: dict[int, PostEntity] = {}
        self._next_id = 1

    def _now(self) -> datetime:
        return datetime.now()

    def _allocate_id(self) -> int:
        with self._lock:
            i = self._next_id
            self._next_id += 1
            return i

    def create(self, data: PostCreate) -> PostEntity:
        now = self._now()
        entity: PostEntity = {
            "id": self._allocate_id(),
            "title": data.title,
            "content": data.content,
            "created_at": now,
            "updated_at": now,
        }
        with self._lock:
            self._items[entity["id"]] = entity
        return entity.copy()

    def get(self, post_id: int) -> Optional[PostEntity]:
        with self._lock:
            item = self._items.get(post_id)
            return None if item is None else item.copy()

    def update(self, post_id: int, data: PostUpdate) -> Optional[PostEntity]:
        with self._lock:
            existing = self._items.get(post_id)
            if existing is None:
                return None

            updated = existing.copy()
            updated.update(data.changes())  # type: ignore[typeddict-item]
            updated["updated_at"] = self._now()

            self._items[post_id] = updated
            return updated.copy()

    def delete(self, post_id: int) -> Optional[PostEntity]:
        with self._lock:
            return self._items.pop(post_id, None)

    def list(self) -> List[PostEntity]:
        with self._lock:
            # Return copies to avoid external mutation
            return [self._items[k].copy() for k in sorted(self._items)]


# PUBLIC_INTERFACE
@lru_cache
def get_repository() -> Repository:
    """
    Return the process-wide repository configured by settings.
    - memory: InMemoryRepository
    - sqlite: SQLiteRepository backed by the standard library sqlite3 module
    """
    settings = get_settings()
    if settings.persistence_backend == "sqlite":
        from .db import SQLiteRepository

        logger.info("Using sqlite repository at %s", settings.sqlite_db_path)
        return SQLiteRepository(settings.sqlite_db_path)
    logger.info("Using in-memory repository")
    return InMemoryRepository()
