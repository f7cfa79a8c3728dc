"""Route entries, compiled routes and match results."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route path.

    Static:  ``/users``  (is_param=False)
    Param:   ``/{id}``   (is_param=True, param_name="id")
    Typed:   ``/{id:int}`` (is_param=True, param_name="id", param_type="int")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None
    param_type: str = "str"


@dataclass(frozen=True, slots=True)
class RouteEntry:
    """One view declaration: (method, path, page kind, model).

    ``model`` is a model identifier or ``DEFAULT`` for routes served for
    every registered model under ``/{model}``.
    """

    method: str
    path: str
    page_kind: str
    model: Any


@dataclass(frozen=True, slots=True)
class Route:
    """A compiled route: an absolute path bound to an endpoint."""

    path: str
    endpoint: Any
    methods: frozenset[str]


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route
    path_params: dict[str, str]
