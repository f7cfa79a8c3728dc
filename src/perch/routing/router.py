"""Trie router with method-aware backtracking.

Built once per registry generation and never mutated afterwards. Static
segments are tried before parameter segments, so model-specific routes
(``/widget/...``) win over the generic ``/{model}/...`` routes, and a
request falls back to the generic routes when the specific subtree has
nothing for its path or method.
"""

import re
from dataclasses import dataclass, field

from perch.errors import ConfigurationError, MethodNotAllowed, NotFound
from perch.routing.params import CONVERTERS
from perch.routing.route import PathSegment, Route, RouteMatch


def parse_path(path: str) -> list[PathSegment]:
    """Parse a route path string into segments.

    Examples::

        "/users"          -> [PathSegment("users")]
        "/users/{id}"     -> [PathSegment("users"), PathSegment("{id}", is_param=True, ...)]
        "/users/{id:int}" -> [..., PathSegment("{id:int}", is_param=True, param_type="int")]
        "/users/:id"      -> same as "/users/{id}"
    """
    segments: list[PathSegment] = []
    for part in path.strip("/").split("/"):
        if not part:
            continue
        if part.startswith(":") and len(part) > 1:
            part = f"{{{part[1:]}}}"
        if part.startswith("{") and part.endswith("}"):
            inner = part[1:-1]
            if ":" in inner:
                param_name, param_type = inner.split(":", 1)
            else:
                param_name, param_type = inner, "str"
            if not param_name or param_type not in CONVERTERS:
                msg = f"Invalid path parameter {part!r} in {path!r}"
                raise ConfigurationError(msg)
            segments.append(
                PathSegment(value=part, is_param=True, param_name=param_name, param_type=param_type)
            )
        elif "{" in part or "}" in part:
            msg = f"Invalid path segment {part!r} in {path!r}: use {{param}} for parameters"
            raise ConfigurationError(msg)
        else:
            segments.append(PathSegment(value=part))
    return segments


def join_paths(prefix: str, path: str) -> str:
    """Join a mount prefix and a route path into one normalized path."""
    joined = "/".join(p for p in (prefix.strip("/"), path.strip("/")) if p)
    return f"/{joined}"


@dataclass(slots=True)
class _TrieNode:
    children: dict[str, "_TrieNode"] = field(default_factory=dict)
    params: list["_ParamEdge"] = field(default_factory=list)
    catch_all: "_ParamEdge | None" = None
    routes_by_method: dict[str, Route] = field(default_factory=dict)


@dataclass(slots=True)
class _ParamEdge:
    param_name: str
    param_type: str
    regex: re.Pattern[str]
    node: _TrieNode


class Router:
    """Trie router over compiled routes.

    Usage::

        router = Router()
        router.add(Route("/widget", endpoint, frozenset({"GET"})))
        router.add(Route("/{model}/{id}", endpoint, frozenset({"GET"})))
        match = router.match("GET", "/widget/42")
    """

    __slots__ = ("_root", "_routes")

    def __init__(self) -> None:
        self._root = _TrieNode()
        self._routes: list[Route] = []

    def add(self, route: Route) -> None:
        """Add a route. A later route for the same path and method replaces the earlier one."""
        node = self._root
        for seg in parse_path(route.path):
            if seg.is_param and seg.param_type == "path":
                if node.catch_all is None:
                    node.catch_all = _ParamEdge(
                        seg.param_name or "path", "path", re.compile(".+"), _TrieNode()
                    )
                node = node.catch_all.node
                break
            if seg.is_param:
                node = self._param_node(node, seg)
            else:
                node = node.children.setdefault(seg.value, _TrieNode())
        for method in route.methods:
            node.routes_by_method[method] = route
        self._routes.append(route)

    @property
    def routes(self) -> list[Route]:
        """Every added route, in insertion order."""
        return list(self._routes)

    def match(self, method: str, path: str) -> RouteMatch:
        """Match a request path and method.

        Raises ``NotFound`` if no route matches the path and
        ``MethodNotAllowed`` if routes match the path but none for ``method``.
        """
        parts = [p for p in path.strip("/").split("/") if p]
        allowed: set[str] = set()
        result = self._match_node(self._root, parts, 0, {}, method, allowed)
        if result is not None:
            return result
        if allowed:
            raise MethodNotAllowed(frozenset(allowed))
        raise NotFound(f"No route matches {method} {path!r}")

    def _param_node(self, node: _TrieNode, seg: PathSegment) -> _TrieNode:
        for edge in node.params:
            if edge.param_name == seg.param_name and edge.param_type == seg.param_type:
                return edge.node
        edge = _ParamEdge(
            param_name=seg.param_name or "",
            param_type=seg.param_type,
            regex=re.compile(f"^{CONVERTERS[seg.param_type]}$"),
            node=_TrieNode(),
        )
        node.params.append(edge)
        return edge.node

    def _match_node(
        self,
        node: _TrieNode,
        parts: list[str],
        index: int,
        params: dict[str, str],
        method: str,
        allowed: set[str],
    ) -> RouteMatch | None:
        if index == len(parts):
            route = node.routes_by_method.get(method)
            if route is not None:
                return RouteMatch(route=route, path_params=params)
            allowed.update(node.routes_by_method)
            return None

        part = parts[index]

        # 1. Static child (exact match)
        child = node.children.get(part)
        if child is not None:
            result = self._match_node(child, parts, index + 1, params, method, allowed)
            if result is not None:
                return result

        # 2. Parameter children, in declaration order
        for edge in node.params:
            if edge.regex.match(part):
                new_params = {**params, edge.param_name: part}
                result = self._match_node(edge.node, parts, index + 1, new_params, method, allowed)
                if result is not None:
                    return result

        # 3. Catch-all consumes the rest of the path
        if node.catch_all is not None:
            edge = node.catch_all
            new_params = {**params, edge.param_name: "/".join(parts[index:])}
            return self._match_node(edge.node, [], 0, new_params, method, allowed)

        return None
