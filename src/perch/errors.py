"""Perch exception hierarchy.

Shared across the hierarchy, dispatch tables, router, renderers and the
ASGI pipeline so every module raises and catches the same types.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any


class PerchError(Exception):
    """Base for all perch-specific errors."""


class ConfigurationError(PerchError):
    """Raised when a declaration is invalid.

    Declarations happen at startup, so these stop the process before it
    serves a single page.
    """


class CycleError(ConfigurationError):
    """Raised when ``derive(tag, parent)`` would close a cycle."""

    def __init__(self, tag: str, parent: str) -> None:
        self.tag = tag
        self.parent = parent
        super().__init__(f"Cannot derive {tag!r} from {parent!r}: {parent!r} already is a {tag!r}")


class DispatchError(PerchError):
    """Base for dispatch table resolution failures."""


class AmbiguousDispatchError(DispatchError):
    """Two or more registered keys are equally specific for the same values.

    Always a declaration conflict. Resolution never picks one of them.
    """

    def __init__(self, table: str, values: Sequence[Any], keys: Sequence[tuple[Any, ...]]) -> None:
        self.table = table
        self.values = tuple(values)
        self.keys = tuple(keys)
        listed = ", ".join(repr(k) for k in self.keys)
        super().__init__(f"{table}: {self.values!r} matches several keys equally well: {listed}")


class NoHandlerError(DispatchError, LookupError):
    """No registered key matches and no default handler exists."""

    def __init__(self, table: str, values: Sequence[Any]) -> None:
        self.table = table
        self.values = tuple(values)
        super().__init__(f"{table}: no handler for {self.values!r}")


@dataclass(frozen=True, slots=True)
class HTTPError(PerchError):
    """An error that maps directly to an HTTP status code.

    Raised by the router and by view handlers. The ASGI pipeline turns
    these into structured responses instead of 500s.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """404 — nothing matched the request."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class ModelNotFoundError(NotFound):
    """404 — the model identifier in the URL does not name a registered model."""

    def __init__(self, name: str) -> None:
        super().__init__("Model does not exist.")
        object.__setattr__(self, "model_name", name)


class RecordNotFoundError(NotFound):
    """404 — the model exists but no record matches the request filters."""

    def __init__(self, detail: str = "Not found.") -> None:
        super().__init__(detail)


class MethodNotAllowed(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """405 — a route exists for the path but not for this HTTP method.

    Includes an ``Allow`` header listing the valid methods.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        super().__init__(
            status=405,
            detail=detail or f"Method not allowed. Allowed methods: {allow_value}",
            headers=(("Allow", allow_value),),
        )


class TemplateError(PerchError):
    """Base for template engine failures."""

    def __init__(self, name: str, message: str) -> None:
        self.template_name = name
        super().__init__(message)


class TemplateNotFoundError(TemplateError):
    """The template engine has no template with this name."""

    def __init__(self, name: str) -> None:
        super().__init__(name, f"Cannot find template named {name!r}")


class TemplateRenderError(TemplateError):
    """The template exists but rendering it failed."""

    def __init__(self, name: str, reason: str = "") -> None:
        message = f"Error rendering template {name!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(name, message)


class InvalidPageOptions(PerchError, ValueError):
    """Page options failed validation before rendering."""


class DataError(PerchError):
    """Raised by bundled data sources when a query cannot be built or run."""
