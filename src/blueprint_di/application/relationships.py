"""Application layer - Thread-safe relationship capture."""

import threading
from typing import Dict, Iterable, Tuple

from blueprint_di.domain import KnownRelationship


class RelationshipSet:
    """De-duplicating, insertion-ordered set of dependency edges.

    Every access goes through one lock, so a reader never observes a set
    that is halfway through being replaced.

    Attributes:
        _lock: Mutual exclusion for all reads and writes.
        _relationships: Ordered edges (dict keys, values unused).
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._relationships: Dict[KnownRelationship, None] = {}

    def snapshot(self) -> Tuple[KnownRelationship, ...]:
        """Return an immutable copy taken under the lock."""
        with self._lock:
            return tuple(self._relationships)

    def replace(self, relationships: Iterable[KnownRelationship]) -> None:
        """Clear and repopulate the set in one critical section.

        Args:
            relationships: The edges captured by the latest build.
        """
        # Materialize first so a failing iterable leaves the set untouched.
        new_relationships = list(relationships)
        for relationship in new_relationships:
            self._check(relationship)

        with self._lock:
            self._relationships.clear()
            for relationship in new_relationships:
                self._relationships[relationship] = None

    def add(self, relationship: KnownRelationship) -> None:
        self._check(relationship)
        with self._lock:
            self._relationships[relationship] = None

    def __len__(self) -> int:
        with self._lock:
            return len(self._relationships)

    @staticmethod
    def _check(relationship: KnownRelationship) -> None:
        if relationship is None:
            raise ValueError("relationship cannot be None")
