"""Tag hierarchy — a DAG of string tags with multiple inheritance.

Page kinds, table styles and cell styles are plain strings. Declaring one
derives it from a root tag (or from another style), and dispatch tables
use the resulting ancestry to pick the most specific handler.

Thread safety:
    ``derive()`` builds a new parent map and swaps the reference under a
    lock, so readers always see either the old or the new map, never a
    half-inserted edge.
"""

import threading
from collections import deque
from typing import TypeAlias

from perch.errors import ConfigurationError, CycleError

Tag: TypeAlias = str


class Hierarchy:
    """Parent edges between tags.

    Usage::

        h = Hierarchy()
        h.derive("table/user-editable", "table/user")
        h.derive("table/user", "table-style")
        h.is_a("table/user-editable", "table-style")  # True
    """

    __slots__ = ("_lock", "_parents", "_version")

    def __init__(self) -> None:
        self._parents: dict[Tag, tuple[Tag, ...]] = {}
        self._lock = threading.Lock()
        self._version = 0

    @property
    def version(self) -> int:
        """Bumped on every new edge. Dispatch caches compare against it."""
        return self._version

    def derive(self, tag: Tag, parent: Tag) -> None:
        """Register ``tag`` as a child of ``parent``.

        Idempotent for an existing edge. Raises ``CycleError`` when the edge
        would make ``tag`` its own ancestor; the hierarchy is left unchanged.
        """
        _check_tag(tag)
        _check_tag(parent)
        with self._lock:
            existing = self._parents.get(tag, ())
            if parent in existing:
                return
            if tag == parent or self.is_a(parent, tag):
                raise CycleError(tag, parent)
            parents = dict(self._parents)
            parents[tag] = (*existing, parent)
            self._parents = parents
            self._version += 1

    def is_a(self, tag: Tag, ancestor: Tag) -> bool:
        """True if ``ancestor`` is ``tag`` or reachable through any parent chain."""
        if tag == ancestor:
            return True
        parents = self._parents
        seen: set[Tag] = {tag}
        stack = list(parents.get(tag, ()))
        while stack:
            current = stack.pop()
            if current == ancestor:
                return True
            if current in seen:
                continue
            seen.add(current)
            stack.extend(parents.get(current, ()))
        return False

    def parents(self, tag: Tag) -> tuple[Tag, ...]:
        """Direct parents of ``tag``, in declaration order."""
        return self._parents.get(tag, ())

    def ancestors(self, tag: Tag) -> dict[Tag, int]:
        """Map every ancestor of ``tag`` (itself included) to its shortest distance.

        Breadth-first, so an ancestor reached through several diamond paths
        appears once, at its nearest distance.
        """
        parents = self._parents
        distances: dict[Tag, int] = {tag: 0}
        queue: deque[Tag] = deque([tag])
        while queue:
            current = queue.popleft()
            depth = distances[current] + 1
            for parent in parents.get(current, ()):
                if parent not in distances:
                    distances[parent] = depth
                    queue.append(parent)
        return distances

    def descendants(self, ancestor: Tag) -> list[Tag]:
        """All declared tags that are strictly below ``ancestor``, sorted."""
        return sorted(t for t in self._parents if t != ancestor and self.is_a(t, ancestor))

    def tags(self) -> frozenset[Tag]:
        """Every tag mentioned by at least one edge."""
        parents = self._parents
        found = set(parents)
        for ps in parents.values():
            found.update(ps)
        return frozenset(found)

    def __contains__(self, tag: object) -> bool:
        return tag in self.tags()


def _check_tag(tag: object) -> None:
    if not isinstance(tag, str) or not tag:
        msg = f"Tags must be non-empty strings, got {tag!r}"
        raise ConfigurationError(msg)
