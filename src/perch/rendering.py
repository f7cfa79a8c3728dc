"""Per-unit render results.

Cells and quick actions are optional parts of a page. Each one renders
into a ``Rendered`` value that holds either markup or the captured
failure; the aggregating renderer inserts empty markup for failed units
and forwards every failure to a ``FailureSink``.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from kida.template import Markup

from perch.config import AdminConfig
from perch.errors import AmbiguousDispatchError
from perch.templating.engine import TemplateEngine

logger = logging.getLogger("perch.render")


@dataclass(frozen=True, slots=True)
class RenderFailure:
    """A unit that failed to render. ``unit`` names it, e.g. ``"cell email"``."""

    unit: str
    error: Exception


@dataclass(frozen=True, slots=True)
class Rendered:
    markup: Markup
    failure: RenderFailure | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None


FailureSink = Callable[[RenderFailure], None]


def log_failure(failure: RenderFailure) -> None:
    """Default sink: log the failure with its traceback."""
    logger.error(
        "Failed to render %s: %s",
        failure.unit,
        failure.error,
        exc_info=(type(failure.error), failure.error, failure.error.__traceback__),
    )


def render_unit(unit: str, render: Callable[[], str], on_failure: FailureSink) -> Rendered:
    """Run ``render`` and capture any failure as an empty ``Rendered``.

    ``AmbiguousDispatchError`` is a declaration conflict, not a render
    failure, and propagates.
    """
    try:
        return Rendered(Markup(render()))
    except AmbiguousDispatchError:
        raise
    except Exception as exc:
        failure = RenderFailure(unit, exc)
        on_failure(failure)
        return Rendered(Markup(""), failure)


@dataclass(frozen=True, slots=True)
class RenderContext:
    """What every renderer needs besides the site: templates, config, sink."""

    templates: TemplateEngine
    config: AdminConfig
    on_failure: FailureSink = log_failure
