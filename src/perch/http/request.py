"""Immutable HTTP request.

Frozen metadata with async body access. ``path`` is relative to the
admin mount point; ``root_path`` holds the mount prefix so handlers can
build absolute links back into the admin.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from dataclasses import dataclass, field, replace
from typing import Any

from perch._internal.asgi import Receive, Scope
from perch.http.headers import Headers
from perch.http.query import QueryParams


async def _empty_receive() -> dict[str, Any]:
    return {"type": "http.request", "body": b"", "more_body": False}


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Metadata is frozen at creation. The body is read lazily through
    ``body()`` / ``form()`` and cached.
    """

    method: str
    path: str
    query: QueryParams = field(default_factory=QueryParams)
    headers: Headers = field(default_factory=Headers)
    path_params: dict[str, str] = field(default_factory=dict)
    root_path: str = ""

    # Private: ASGI receive callable for body streaming
    _receive: Receive = field(default=_empty_receive, repr=False, compare=False)

    # Private: mutable cache for the body and parsed form data
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def full_path(self) -> str:
        """Path including the mount prefix, without the query string."""
        return f"{self.root_path}{self.path}"

    @property
    def url(self) -> str:
        """Path including the mount prefix and the query string."""
        qs = self.query.raw
        if qs:
            return f"{self.full_path}?{qs.decode('latin-1')}"
        return self.full_path

    @property
    def params(self) -> dict[str, str]:
        """Query parameters merged with path parameters (path wins)."""
        return {**self.query.without(), **self.path_params}

    def with_path_params(self, path_params: dict[str, str]) -> Request:
        """Return a copy carrying the router's path parameters.

        The body cache is shared so a body read before routing is not lost.
        """
        return replace(self, path_params=path_params)

    # -- Async body access --

    async def body(self) -> bytes:
        """Read the full request body (cached after the first call)."""
        if "_body" in self._cache:
            return self._cache["_body"]
        chunks = [chunk async for chunk in self.stream()]
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def stream(self) -> AsyncGenerator[bytes]:
        """Stream the request body in chunks."""
        while True:
            message = await self._receive()
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    async def form(self) -> QueryParams:
        """Parse a URL-encoded form body (cached after the first call)."""
        if "_form" in self._cache:
            return self._cache["_form"]
        result = QueryParams(await self.body())
        self._cache["_form"] = result
        return result

    # -- Factory --

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive, *, root_path: str = "") -> Request:
        """Create a Request from an ASGI scope, stripping ``root_path`` from the path."""
        path: str = scope["path"]
        if root_path and (path == root_path or path.startswith(f"{root_path}/")):
            path = path[len(root_path) :] or "/"
        return cls(
            method=scope["method"],
            path=path,
            query=QueryParams(scope.get("query_string", b"")),
            headers=Headers(tuple(scope.get("headers", ()))),
            root_path=root_path,
            _receive=receive,
        )
