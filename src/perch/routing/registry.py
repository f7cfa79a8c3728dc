"""Route registry — per-model view routes with a lazily compiled router.

Each ``add_route()`` appends an entry to its model's list and bumps the
registry generation. The compiled router is a pure function of the
entries at one generation; it is rebuilt on first use after a change and
published as a single reference, so a request always sees one complete
router, never one under construction.

Thread safety:
    Readers check the published snapshot without locking. Rebuilds use a
    lock + double-check so at most one thread compiles per generation. A
    build superseded by a registration that landed mid-build still serves
    the request that triggered it, but is not published.
"""

import logging
import threading
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from perch.dispatch import DEFAULT
from perch.errors import ConfigurationError, NotFound
from perch.http.request import Request
from perch.http.response import Response
from perch.routing.route import Route, RouteEntry, RouteMatch
from perch.routing.router import Router, join_paths
from perch.server.errors import http_error_response

logger = logging.getLogger("perch.routing")

ModelResolver = Callable[[str], type]
ViewDispatch = Callable[[str, type, Request], Awaitable[Response]]

_METHODS = frozenset({"GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"})


@dataclass(frozen=True, slots=True)
class ViewEndpoint:
    """What a compiled route points at.

    ``model_name`` is ``None`` for default routes; the identifier then
    comes from the ``{model}`` path parameter.
    """

    entry: RouteEntry
    model_name: str | None


@dataclass(frozen=True, slots=True)
class CompiledRouter:
    """Immutable router snapshot for one registry generation."""

    generation: int
    router: Router

    def match(self, method: str, path: str) -> RouteMatch:
        return self.router.match(method, path)

    @property
    def routes(self) -> list[Route]:
        return self.router.routes


class RouteRegistry:
    """Per-model route entries plus the lazily built ``CompiledRouter``.

    Usage::

        registry = RouteRegistry(models.resolve, dispatch_view)
        registry.add_route("GET", "/", "list")              # every model
        registry.add_route("GET", "/stats", "stats", "widget")
        response = await registry.route(request)            # None if nothing matched
    """

    __slots__ = (
        "_build_lock",
        "_builds",
        "_compiled",
        "_dispatch",
        "_entries",
        "_generation",
        "_lock",
        "_resolve_model",
    )

    def __init__(self, resolve_model: ModelResolver, dispatch: ViewDispatch) -> None:
        self._resolve_model = resolve_model
        self._dispatch = dispatch
        self._entries: dict[Any, tuple[RouteEntry, ...]] = {}
        self._generation = 0
        self._builds = 0
        self._compiled: CompiledRouter | None = None
        self._lock = threading.Lock()
        self._build_lock = threading.Lock()

    # -- Registration --

    def add_route(
        self, method: str, path: str, page_kind: str, model: Any = DEFAULT
    ) -> RouteEntry:
        """Append a route for ``model`` (or every model) and invalidate the router."""
        method = method.upper()
        if method not in _METHODS:
            msg = f"Unsupported HTTP method {method!r} for {path!r}"
            raise ConfigurationError(msg)
        if model is not DEFAULT and (not isinstance(model, str) or not model):
            msg = f"Route model must be a model identifier or DEFAULT, got {model!r}"
            raise ConfigurationError(msg)
        entry = RouteEntry(method=method, path=path, page_kind=page_kind, model=model)
        with self._lock:
            entries = dict(self._entries)
            entries[model] = (*entries.get(model, ()), entry)
            self._entries = entries
            self._generation += 1
        return entry

    # -- Introspection --

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def builds(self) -> int:
        """How many times a router has been compiled."""
        return self._builds

    def entries(self) -> dict[Any, tuple[RouteEntry, ...]]:
        """Route entries per model identifier (``DEFAULT`` for the generic list)."""
        return dict(self._entries)

    # -- Compilation --

    def compile(self) -> CompiledRouter:
        """Build a router from the current entries. Does not publish it."""
        with self._lock:
            generation = self._generation
            entries = self._entries
            self._builds += 1

        router = Router()
        for model, model_entries in entries.items():
            if model is DEFAULT:
                continue
            for entry in model_entries:
                router.add(
                    Route(
                        path=join_paths(model, entry.path),
                        endpoint=ViewEndpoint(entry, model),
                        methods=frozenset({entry.method}),
                    )
                )
        for entry in entries.get(DEFAULT, ()):
            router.add(
                Route(
                    path=join_paths("{model}", entry.path),
                    endpoint=ViewEndpoint(entry, None),
                    methods=frozenset({entry.method}),
                )
            )
        logger.debug("Compiled router generation %d (%d routes)", generation, len(router.routes))
        return CompiledRouter(generation=generation, router=router)

    def compiled(self) -> CompiledRouter:
        """Return the router for the current generation, building it at most once."""
        snapshot = self._compiled
        if snapshot is not None and snapshot.generation == self._generation:
            return snapshot
        with self._build_lock:
            snapshot = self._compiled
            if snapshot is not None and snapshot.generation == self._generation:
                return snapshot
            built = self.compile()
            if built.generation == self._generation:
                self._compiled = built
            return built

    # -- Request routing --

    async def route(self, request: Request) -> Response | None:
        """Dispatch ``request`` to its view and return the response.

        Returns ``None`` when no route matches the path. Not-found models
        and records become structured 404 responses. ``MethodNotAllowed``
        propagates to the caller.
        """
        compiled = self.compiled()
        try:
            match = compiled.match(request.method, request.path)
        except NotFound:
            return None

        endpoint: ViewEndpoint = match.route.endpoint
        params = dict(match.path_params)
        model_name = endpoint.model_name or params.get("model", "")
        try:
            model = self._resolve_model(model_name)
            return await self._dispatch(
                endpoint.entry.page_kind, model, request.with_path_params(params)
            )
        except NotFound as exc:
            logger.debug("404 %s %s: %s", request.method, request.path, exc.detail)
            return http_error_response(exc)
