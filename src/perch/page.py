"""Page rendering.

A page is a shell template around one contents template, plus quick
actions and breadcrumbs. ``render_page`` dispatches on the page style; a
style without its own renderer falls back to ``default_page_renderer``,
which composes the packaged ``page.html`` shell.

Contents and action markup go into the shell unescaped. Templates that
produce them must escape untrusted data themselves.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from kida.template import Markup

from perch.actions import Action, Crumb, as_crumb, is_action
from perch.errors import InvalidPageOptions
from perch.rendering import RenderContext, render_unit

if TYPE_CHECKING:
    from perch.site import AdminSite


@dataclass(frozen=True, slots=True)
class PageOptions:
    """What to put on a page.

    ``actions`` and ``crumbs`` accept any sequence (``None`` for none);
    crumbs may be ``{"title": ..., "url": ...}`` mappings. ``extra`` is
    merged into the shell template data.
    """

    title: str
    contents_template: str
    contents_data: Mapping[str, Any] = field(default_factory=dict)
    actions: tuple[Action, ...] = ()
    crumbs: tuple[Crumb, ...] = ()
    extra: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.title, str) or not self.title:
            msg = f"Page title must be a non-empty string, got {self.title!r}"
            raise InvalidPageOptions(msg)
        if not isinstance(self.contents_template, str) or not self.contents_template:
            msg = f"contents_template must be a non-empty string, got {self.contents_template!r}"
            raise InvalidPageOptions(msg)

        actions = tuple(self.actions or ())
        invalid = [a for a in actions if not is_action(a)]
        if invalid:
            msg = f"Invalid actions (no render method): {invalid!r}"
            raise InvalidPageOptions(msg)
        object.__setattr__(self, "actions", actions)
        object.__setattr__(self, "crumbs", tuple(as_crumb(c) for c in self.crumbs or ()))
        object.__setattr__(self, "contents_data", dict(self.contents_data or {}))

    @classmethod
    def coerce(cls, options: "PageOptions | Mapping[str, Any]") -> "PageOptions":
        """Accept either ``PageOptions`` or a mapping of its fields."""
        if isinstance(options, PageOptions):
            return options
        if not isinstance(options, Mapping):
            msg = f"Page options must be PageOptions or a mapping, got {type(options).__name__}"
            raise InvalidPageOptions(msg)
        known = {"title", "contents_template", "contents_data", "actions", "crumbs", "extra"}
        unknown = set(options) - known
        if unknown:
            msg = f"Unknown page options: {', '.join(sorted(unknown))}"
            raise InvalidPageOptions(msg)
        if "title" not in options or "contents_template" not in options:
            msg = "Page options need at least 'title' and 'contents_template'"
            raise InvalidPageOptions(msg)
        return cls(**options)


def render_page(
    site: "AdminSite",
    ctx: RenderContext,
    page_style: str,
    options: PageOptions | Mapping[str, Any],
) -> str:
    """Render a full page with the renderer registered for ``page_style``."""
    return site.render_page(page_style, PageOptions.coerce(options), ctx)


def render_actions(ctx: RenderContext, actions: Sequence[Action]) -> list[Markup]:
    """Render each action on its own.

    A failed action is reported and takes its place as empty markup, so the
    result always lines up with ``actions``.
    """
    markup: list[Markup] = []
    for action in actions:
        result = render_unit(
            f"action {action!r}", lambda action=action: action.render(ctx.templates), ctx.on_failure
        )
        markup.append(result.markup)
    return markup


def render_page_with_template(
    ctx: RenderContext, page_template: str, options: PageOptions
) -> str:
    """Compose ``options`` into ``page_template``.

    Exposed for custom page styles that need a different shell::

        @site.render_page.handles("report")
        def render_report(page_style, options, ctx):
            return render_page_with_template(ctx, "report-shell.html", options)
    """
    contents = Markup(ctx.templates.render(options.contents_template, options.contents_data))
    actions = render_actions(ctx, options.actions)
    data = {
        **options.extra,
        "page_title": options.title,
        "contents": contents,
        "has_actions": bool(actions),
        "actions": actions,
        "has_crumbs": bool(options.crumbs),
        "crumbs": list(options.crumbs),
    }
    return ctx.templates.render(page_template, data)


def default_page_renderer(page_style: str, options: PageOptions, ctx: RenderContext) -> str:
    return render_page_with_template(ctx, ctx.config.page_template, options)
