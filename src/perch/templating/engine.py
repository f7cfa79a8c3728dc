"""Template engine seam and its kida implementation.

Renderers only ever call ``render(name, data)``. ``KidaTemplates`` wraps a
kida ``Environment``; tests substitute any object with the same method.
"""

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from kida import ChoiceLoader, Environment, FileSystemLoader, PackageLoader
from kida.environment.exceptions import TemplateNotFoundError as KidaTemplateNotFoundError

from perch.config import AdminConfig
from perch.errors import TemplateNotFoundError, TemplateRenderError


@runtime_checkable
class TemplateEngine(Protocol):
    """Renders a named template with a data mapping."""

    def render(self, name: str, data: Mapping[str, Any] | None = None) -> str: ...


def create_environment(config: AdminConfig) -> Environment:
    """Create a kida Environment from admin configuration.

    User template directories are searched first, so any packaged
    template (``page.html``, ``cells/id.html``, ...) can be overridden
    by dropping a file with the same name into one of them.
    """
    loaders: list[Any] = [FileSystemLoader(str(d)) for d in config.template_dirs]
    loaders.append(PackageLoader("perch", "templates"))

    env = Environment(
        loader=ChoiceLoader(loaders),
        autoescape=config.autoescape,
        auto_reload=config.debug,
        trim_blocks=config.trim_blocks,
        lstrip_blocks=config.lstrip_blocks,
    )
    env.add_global("admin_title", config.title)
    env.add_global("base_url", config.base_url)
    return env


class KidaTemplates:
    """``TemplateEngine`` backed by a kida ``Environment``."""

    __slots__ = ("env",)

    def __init__(self, env: Environment) -> None:
        self.env = env

    @classmethod
    def from_config(cls, config: AdminConfig) -> "KidaTemplates":
        return cls(create_environment(config))

    def render(self, name: str, data: Mapping[str, Any] | None = None) -> str:
        try:
            template = self.env.get_template(name)
        except KidaTemplateNotFoundError as exc:
            raise TemplateNotFoundError(name) from exc
        try:
            return template.render(dict(data or {}))
        except Exception as exc:
            raise TemplateRenderError(name, str(exc)) from exc
