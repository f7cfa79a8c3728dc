"""Shared fixtures: sample models, recording template engines, render contexts."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import pytest

from perch.config import AdminConfig
from perch.errors import TemplateNotFoundError, TemplateRenderError
from perch.rendering import RenderContext, RenderFailure
from perch.site import AdminSite


@dataclass(frozen=True, slots=True)
class Widget:
    id: int
    name: str
    email: str = ""


@dataclass(frozen=True, slots=True)
class Gadget:
    id: int
    label: str


class RecordingTemplates:
    """Template engine double: records every call, renders ``[name:value]``.

    Names in ``missing`` raise ``TemplateNotFoundError``; names in
    ``failing`` raise ``TemplateRenderError``.
    """

    def __init__(self, *, missing: set[str] | None = None, failing: set[str] | None = None):
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.missing = missing or set()
        self.failing = failing or set()

    def render(self, name: str, data: Mapping[str, Any] | None = None) -> str:
        data = dict(data or {})
        self.calls.append((name, data))
        if name in self.missing:
            raise TemplateNotFoundError(name)
        if name in self.failing:
            raise TemplateRenderError(name, "boom")
        return f"[{name}:{data.get('value', '')}]"

    def data_for(self, name: str) -> dict[str, Any]:
        """Data of the last render of ``name``."""
        for called, data in reversed(self.calls):
            if called == name:
                return data
        msg = f"{name} was never rendered"
        raise AssertionError(msg)

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]


@pytest.fixture
def site() -> AdminSite:
    return AdminSite()


@pytest.fixture
def templates() -> RecordingTemplates:
    return RecordingTemplates()


@pytest.fixture
def failures() -> list[RenderFailure]:
    return []


@pytest.fixture
def ctx(templates: RecordingTemplates, failures: list[RenderFailure]) -> RenderContext:
    return RenderContext(templates, AdminConfig(base_url="/admin"), failures.append)
