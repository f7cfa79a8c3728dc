"""Multi-axis polymorphic dispatch.

A ``DispatchTable`` maps key tuples to handlers. Each axis is either a tag
axis (matched through the ``Hierarchy``) or a type axis (matched through
the class MRO). ``DEFAULT`` in a key matches any value at the lowest
priority, so the all-``DEFAULT`` key is the last-resort handler.

Resolution is a pure function of (hierarchy, registered keys, values):

1. Rank each key per axis — tag distance in the hierarchy, or MRO
   position for types. Keys that fail any axis are dropped.
2. Compare keys axis by axis. A component that ``is_a`` the other is more
   specific regardless of distance; unrelated components compare by rank.
   A key dominates another when it is more specific on some axis and less
   specific on none.
3. The key that dominates every other match wins. Without one, the
   undominated keys raise ``AmbiguousDispatchError``; no match at all
   raises ``NoHandlerError``.

Usage::

    render_page = DispatchTable("render_page", hierarchy, (Axis.TAG,))

    @render_page.handles("list")
    def render_list(page_style, options):
        ...

    render_page("list", options)
"""

import math
import threading
from collections.abc import Callable, Hashable, Iterator
from enum import Enum
from typing import Any, Final

from perch.errors import AmbiguousDispatchError, ConfigurationError, NoHandlerError
from perch.hierarchy import Hierarchy


class _Default:
    """Wildcard axis value. Matches anything, loses to everything."""

    __slots__ = ()
    _instance: "_Default | None" = None

    def __new__(cls) -> "_Default":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "DEFAULT"

    def __reduce__(self) -> str:
        return "DEFAULT"


DEFAULT: Final = _Default()

_WILDCARD_RANK = math.inf


class Axis(Enum):
    """How one position of a dispatch key is matched."""

    TAG = "tag"
    TYPE = "type"


Handler = Callable[..., Any]


_Match = tuple[tuple[float, ...], tuple[Any, ...], Handler]


class DispatchTable:
    """Key tuple → handler, resolved by hierarchy and type specificity.

    Calling the table resolves on the leading ``arity`` positional
    arguments and calls the winning handler with every argument.

    Thread safety:
        Registration swaps the entry map and clears the resolution cache
        by replacing it. Lookups never mutate shared structures in place.
    """

    __slots__ = ("_axes", "_cache", "_entries", "_hierarchy", "_lock", "name")

    def __init__(self, name: str, hierarchy: Hierarchy, axes: tuple[Axis, ...]) -> None:
        if not axes:
            msg = f"{name}: a dispatch table needs at least one axis"
            raise ConfigurationError(msg)
        self.name = name
        self._hierarchy = hierarchy
        self._axes = axes
        self._entries: dict[tuple[Any, ...], Handler] = {}
        self._cache: dict[tuple[Any, ...], tuple[int, Handler]] = {}
        self._lock = threading.Lock()

    @property
    def arity(self) -> int:
        return len(self._axes)

    @property
    def axes(self) -> tuple[Axis, ...]:
        return self._axes

    # -- Registration --

    def register(self, key: Any, handler: Handler) -> Handler:
        """Associate ``handler`` with an exact key, replacing any previous one.

        Single-axis tables accept a bare value instead of a 1-tuple.
        """
        key = self._normalize_key(key)
        with self._lock:
            entries = dict(self._entries)
            entries[key] = handler
            self._entries = entries
            self._cache = {}
        return handler

    def handles(self, *key: Any) -> Callable[[Handler], Handler]:
        """Register the decorated function for ``key``."""

        def decorator(func: Handler) -> Handler:
            return self.register(key, func)

        return decorator

    def register_default(self, handler: Handler) -> Handler:
        """Register the last-resort handler (``DEFAULT`` on every axis)."""
        return self.register((DEFAULT,) * self.arity, handler)

    # -- Introspection --

    def has(self, key: Any) -> bool:
        """True if exactly this key is registered (no inheritance)."""
        return self._normalize_key(key) in self._entries

    def keys(self) -> list[tuple[Any, ...]]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[tuple[Any, ...]]:
        return iter(list(self._entries))

    def __repr__(self) -> str:
        axes = ", ".join(a.value for a in self._axes)
        return f"DispatchTable({self.name!r}, axes=({axes}), entries={len(self._entries)})"

    # -- Resolution --

    def resolve(self, *values: Any) -> Handler:
        """Return the most specific handler for ``values``.

        Raises ``NoHandlerError`` when nothing matches and
        ``AmbiguousDispatchError`` when several keys tie.
        """
        if len(values) != self.arity:
            msg = f"{self.name}: expected {self.arity} dispatch value(s), got {len(values)}"
            raise TypeError(msg)

        version = self._hierarchy.version
        cache = self._cache
        cache_key = self._cache_key(values)
        if cache_key is not None:
            hit = cache.get(cache_key)
            if hit is not None and hit[0] == version:
                return hit[1]

        handler = self._resolve_uncached(values)
        if cache_key is not None:
            cache[cache_key] = (version, handler)
        return handler

    def get(self, *values: Any) -> Handler | None:
        """Like ``resolve()``, but ``None`` when no handler matches."""
        try:
            return self.resolve(*values)
        except NoHandlerError:
            return None

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        handler = self.resolve(*args[: self.arity])
        return handler(*args, **kwargs)

    def _resolve_uncached(self, values: tuple[Any, ...]) -> Handler:
        candidates = [
            self._candidates(axis, value) for axis, value in zip(self._axes, values, strict=True)
        ]
        matches: list[_Match] = []
        for key, handler in self._entries.items():
            ranks: list[float] = []
            for wanted, ranked in zip(key, candidates, strict=True):
                if wanted is DEFAULT:
                    ranks.append(_WILDCARD_RANK)
                    continue
                rank = ranked.get(wanted)
                if rank is None:
                    break
                ranks.append(rank)
            else:
                matches.append((tuple(ranks), key, handler))

        if not matches:
            raise NoHandlerError(self.name, values)

        for match in matches:
            if all(other is match or self._dominates(match, other) for other in matches):
                return match[2]

        best = [
            m
            for m in matches
            if not any(other is not m and self._dominates(other, m) for other in matches)
        ]
        # Mixed is_a and distance comparisons can cycle, leaving no undominated key
        raise AmbiguousDispatchError(self.name, values, [key for _, key, _ in best or matches])

    def _dominates(self, a: _Match, b: _Match) -> bool:
        better = False
        for axis, rank_a, rank_b, want_a, want_b in zip(
            self._axes, a[0], b[0], a[1], b[1], strict=True
        ):
            order = self._compare(axis, want_a, want_b, rank_a, rank_b)
            if order < 0:
                return False
            if order > 0:
                better = True
        return better

    def _compare(self, axis: Axis, a: Any, b: Any, rank_a: float, rank_b: float) -> int:
        """1 if key component ``a`` is more specific than ``b``, -1 if less, else 0."""
        if a == b:
            return 0
        if a is not DEFAULT and b is not DEFAULT:
            if axis is Axis.TAG:
                a_under_b = self._hierarchy.is_a(a, b)
                b_under_a = self._hierarchy.is_a(b, a)
            else:
                a_under_b = issubclass(a, b)
                b_under_a = issubclass(b, a)
            if a_under_b != b_under_a:
                return 1 if a_under_b else -1
        if rank_a < rank_b:
            return 1
        if rank_a > rank_b:
            return -1
        return 0

    def _cache_key(self, values: tuple[Any, ...]) -> tuple[Any, ...] | None:
        key: list[Any] = []
        for axis, value in zip(self._axes, values, strict=True):
            if axis is Axis.TYPE and value is not DEFAULT and not isinstance(value, type):
                value = type(value)
            elif not isinstance(value, Hashable):
                return None
            key.append(value)
        return tuple(key)

    def _candidates(self, axis: Axis, value: Any) -> dict[Any, int]:
        if value is DEFAULT:
            return {}
        if axis is Axis.TAG:
            return self._hierarchy.ancestors(value)
        cls = value if isinstance(value, type) else type(value)
        return {klass: i for i, klass in enumerate(cls.__mro__)}

    def _normalize_key(self, key: Any) -> tuple[Any, ...]:
        if self.arity == 1 and not isinstance(key, tuple):
            key = (key,)
        if not isinstance(key, tuple) or len(key) != self.arity:
            msg = f"{self.name}: key {key!r} does not have {self.arity} axis value(s)"
            raise ConfigurationError(msg)
        for axis, value in zip(self._axes, key, strict=True):
            if value is DEFAULT:
                continue
            if axis is Axis.TAG and not isinstance(value, str):
                msg = f"{self.name}: tag axis value must be a string, got {value!r}"
                raise ConfigurationError(msg)
            if axis is Axis.TYPE and not isinstance(value, type):
                msg = f"{self.name}: type axis value must be a class, got {value!r}"
                raise ConfigurationError(msg)
        return key
