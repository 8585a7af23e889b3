"""Keyed entity caches owned by a Jira instance.

Each EntityCache partitions entities into collections by a string key. A key
is either populated (fetched from the server once) or absent; emptiness of a
collection does not matter. A populated key is never fetched again; only
``add``/``remove``/``discard`` change it afterwards. There is no TTL or
eviction: entries live as long as the owning cache.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Generic, Protocol, TypeVar

from jira_remote.remote.errors import InvalidUsageError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from jira_remote.remote.models import CustomField, IssueType, ProjectComponent

logger = logging.getLogger(__name__)

# Key of the single collection holding every custom field on the server
GLOBAL_KEY = "*"


class Identified(Protocol):
    @property
    def id(self) -> str: ...


E = TypeVar("E", bound=Identified)


def distinct_by_id(entities: Iterable[E]) -> list[E]:
    """Drop entities whose id was already seen, keeping the first occurrence."""
    seen: dict[str, E] = {}
    for entity in entities:
        seen.setdefault(entity.id, entity)
    return list(seen.values())


def issue_type_key(project_key: str, issue_type_id: str) -> str:
    """Create the cache key for one issue type of a project."""
    return f"{project_key}::{issue_type_id}"


@dataclass
class EntityCache(Generic[E]):
    """Collections of entities keyed by string, populated at most once per key.

    ``add`` and ``remove`` may target a key that was never populated.
    Populating the key later replaces whatever was added there with the
    server result.
    """

    name: str
    _collections: dict[str, dict[str, E]] = field(default_factory=dict)
    _populated: set[str] = field(default_factory=set)
    _locks: dict[str, asyncio.Lock] = field(default_factory=dict)
    _created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    _hits: int = 0
    _misses: int = 0

    def get(self, key: str) -> list[E] | None:
        """Get the entities of a populated key.

        Args:
            key: Collection key.

        Returns:
            The entities (possibly empty) or None if the key was never populated.
        """
        if key not in self._populated:
            self._misses += 1
            logger.debug("%s cache miss: %s", self.name, key)
            return None

        self._hits += 1
        logger.debug("%s cache hit: %s", self.name, key)
        return list(self._collections[key].values())

    def is_populated(self, key: str) -> bool:
        return key in self._populated

    def populate(self, key: str, entities: Iterable[E]) -> list[E]:
        """Populate a key with entities fetched from the server.

        Args:
            key: Collection key.
            entities: Entities to store; duplicates are dropped first-wins.

        Returns:
            The entities stored under the key.

        Raises:
            InvalidUsageError: If the key is already populated.
        """
        if key in self._populated:
            msg = f"{self.name} cache key '{key}' is already populated"
            raise InvalidUsageError(msg)

        collection = {entity.id: entity for entity in distinct_by_id(entities)}
        self._collections[key] = collection
        self._populated.add(key)
        logger.debug("%s cache populated: %s (%d entities)", self.name, key, len(collection))
        return list(collection.values())

    def add(self, key: str, entity: E) -> None:
        """Add an entity under a key, creating the collection if needed."""
        self._collections.setdefault(key, {})[entity.id] = entity
        logger.debug("%s cache add: %s -> %s", self.name, key, entity.id)

    def remove(self, key: str, entity_id: str) -> bool:
        """Remove an entity from one key.

        Returns:
            True if the entity was present.
        """
        collection = self._collections.get(key)
        if collection is None or entity_id not in collection:
            return False
        del collection[entity_id]
        logger.debug("%s cache remove: %s -> %s", self.name, key, entity_id)
        return True

    def discard(self, entity_id: str) -> list[str]:
        """Remove an entity from every key that holds it.

        Returns:
            Keys the entity was removed from.
        """
        return [key for key in list(self._collections) if self.remove(key, entity_id)]

    def find(self, entity_id: str) -> E | None:
        """Find an entity by id in any collection."""
        for collection in self._collections.values():
            if entity_id in collection:
                return collection[entity_id]
        return None

    def lock(self, key: str) -> asyncio.Lock:
        """Get the lock guarding fetch-and-populate for a key.

        Concurrent lookups of the same key wait for the first one to populate
        it; lookups of other keys do not wait.
        """
        return self._locks.setdefault(key, asyncio.Lock())

    def clear(self) -> None:
        """Drop every collection and reset statistics.

        Locks are kept so a fetch in flight still excludes later callers.
        """
        self._collections.clear()
        self._populated.clear()
        self._hits = 0
        self._misses = 0
        self._created_at = datetime.now(UTC)

    @property
    def keys(self) -> list[str]:
        """Populated keys."""
        return sorted(self._populated)

    @property
    def size(self) -> int:
        """Number of cached entities across all keys."""
        return sum(len(collection) for collection in self._collections.values())

    @property
    def stats(self) -> dict[str, Any]:
        """Get cache statistics."""
        return {
            "name": self.name,
            "keys": len(self._populated),
            "size": self.size,
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": (
                self._hits / (self._hits + self._misses)
                if (self._hits + self._misses) > 0
                else 0.0
            ),
            "created_at": self._created_at.isoformat(),
        }


@dataclass
class JiraCache:
    """The independent caches of one Jira instance."""

    custom_fields: EntityCache[CustomField] = field(
        default_factory=lambda: EntityCache("custom_fields")
    )
    project_custom_fields: EntityCache[CustomField] = field(
        default_factory=lambda: EntityCache("project_custom_fields")
    )
    components: EntityCache[ProjectComponent] = field(
        default_factory=lambda: EntityCache("components")
    )
    issue_types: EntityCache[IssueType] = field(
        default_factory=lambda: EntityCache("issue_types")
    )

    def clear(self) -> None:
        for cache in self.all():
            cache.clear()

    def all(self) -> list[EntityCache[Any]]:
        return [
            self.custom_fields,
            self.project_custom_fields,
            self.components,
            self.issue_types,
        ]

    @property
    def stats(self) -> dict[str, dict[str, Any]]:
        return {cache.name: cache.stats for cache in self.all()}
