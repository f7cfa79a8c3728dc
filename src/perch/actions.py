"""Quick actions and breadcrumbs.

An action is anything with ``render(templates) -> str``. The three
built-ins render through packaged templates under ``actions/``.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from perch.errors import InvalidPageOptions
from perch.templating.engine import TemplateEngine


@runtime_checkable
class Action(Protocol):
    """A small widget attached to a page: search box, link, form button."""

    def render(self, templates: TemplateEngine) -> str: ...


@dataclass(frozen=True, slots=True)
class SearchAction:
    """A GET form with one text input.

    ``value`` prefills the input, typically with the current query, and
    ``title`` labels the form.
    """

    url: str = "/"
    placeholder: str = "..."
    param: str = "q"
    button_text: str = "Search"
    title: str = ""
    value: str = ""

    def render(self, templates: TemplateEngine) -> str:
        return templates.render("actions/search.html", {"action": self})


@dataclass(frozen=True, slots=True)
class LinkAction:
    url: str
    text: str

    def __post_init__(self) -> None:
        _require_url(self.url)

    def render(self, templates: TemplateEngine) -> str:
        return templates.render("actions/link.html", {"action": self})


@dataclass(frozen=True, slots=True)
class PostAction:
    """A button that submits an empty POST form to ``url``."""

    url: str
    text: str

    def __post_init__(self) -> None:
        _require_url(self.url)

    def render(self, templates: TemplateEngine) -> str:
        return templates.render("actions/post.html", {"action": self})


@dataclass(frozen=True, slots=True)
class Crumb:
    title: str
    url: str

    def __post_init__(self) -> None:
        if not isinstance(self.title, str) or not self.title.strip():
            msg = f"Crumb title must be a non-blank string, got {self.title!r}"
            raise InvalidPageOptions(msg)
        if not isinstance(self.url, str) or not self.url.strip():
            msg = f"Crumb url must be a non-blank string, got {self.url!r}"
            raise InvalidPageOptions(msg)


def is_action(value: object) -> bool:
    return isinstance(value, Action)


def as_crumb(value: Crumb | Mapping[str, Any]) -> Crumb:
    """Coerce a ``{"title": ..., "url": ...}`` mapping into a ``Crumb``."""
    if isinstance(value, Crumb):
        return value
    if isinstance(value, Mapping):
        return Crumb(title=value.get("title"), url=value.get("url"))  # type: ignore[arg-type]
    msg = f"Crumbs must be Crumb instances or mappings, got {value!r}"
    raise InvalidPageOptions(msg)


def _require_url(url: object) -> None:
    if not isinstance(url, str) or not url:
        msg = f"Action url must be a non-empty string, got {url!r}"
        raise InvalidPageOptions(msg)
