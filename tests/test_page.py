"""Tests for perch.page — page options, shell composition and page styles."""

import pytest
from conftest import RecordingTemplates

from perch.actions import Crumb, LinkAction, SearchAction
from perch.config import AdminConfig
from perch.errors import AmbiguousDispatchError, InvalidPageOptions, TemplateRenderError
from perch.page import PageOptions, render_actions, render_page, render_page_with_template
from perch.rendering import RenderContext, RenderFailure
from perch.site import AdminSite


class TestPageOptions:
    def test_defaults(self) -> None:
        options = PageOptions(title="Widgets", contents_template="list.html")
        assert options.actions == ()
        assert options.crumbs == ()
        assert options.contents_data == {}

    def test_crumb_mappings_are_coerced(self) -> None:
        options = PageOptions(
            title="Widgets",
            contents_template="list.html",
            crumbs=[{"title": "Home", "url": "/admin"}],
        )
        assert options.crumbs == (Crumb("Home", "/admin"),)

    def test_none_means_empty(self) -> None:
        options = PageOptions(
            title="Widgets", contents_template="list.html", actions=None, crumbs=None
        )  # type: ignore[arg-type]
        assert (options.actions, options.crumbs) == ((), ())

    @pytest.mark.parametrize("title", ["", None, 3])
    def test_title_required(self, title: object) -> None:
        with pytest.raises(InvalidPageOptions):
            PageOptions(title=title, contents_template="list.html")  # type: ignore[arg-type]

    def test_contents_template_required(self) -> None:
        with pytest.raises(InvalidPageOptions):
            PageOptions(title="Widgets", contents_template="")

    def test_rejects_non_actions(self) -> None:
        with pytest.raises(InvalidPageOptions, match="no render method"):
            PageOptions(title="Widgets", contents_template="list.html", actions=["search"])

    def test_rejects_blank_crumb(self) -> None:
        with pytest.raises(InvalidPageOptions):
            PageOptions(
                title="Widgets", contents_template="list.html", crumbs=[{"title": " ", "url": "/"}]
            )

    def test_invalid_options_are_value_errors(self) -> None:
        with pytest.raises(ValueError):
            PageOptions(title="", contents_template="list.html")


class TestCoerce:
    def test_passes_instances_through(self) -> None:
        options = PageOptions(title="Widgets", contents_template="list.html")
        assert PageOptions.coerce(options) is options

    def test_from_mapping(self) -> None:
        options = PageOptions.coerce({"title": "Widgets", "contents_template": "list.html"})
        assert options.title == "Widgets"

    def test_unknown_keys(self) -> None:
        with pytest.raises(InvalidPageOptions, match="colour"):
            PageOptions.coerce({"title": "W", "contents_template": "x.html", "colour": "red"})

    def test_missing_keys(self) -> None:
        with pytest.raises(InvalidPageOptions):
            PageOptions.coerce({"title": "W"})

    def test_wrong_type(self) -> None:
        with pytest.raises(InvalidPageOptions):
            PageOptions.coerce(["title"])  # type: ignore[arg-type]


class TestDefaultPageRenderer:
    def test_composes_contents_actions_and_crumbs(
        self, site: AdminSite, ctx: RenderContext, templates: RecordingTemplates
    ) -> None:
        options = PageOptions(
            title="Widgets",
            contents_template="list.html",
            contents_data={"value": "body"},
            actions=[LinkAction("/admin/widget/new", "New")],
            crumbs=[Crumb("Home", "/admin")],
            extra={"theme": "dark"},
        )
        html = render_page(site, ctx, "list", options)
        assert html == "[page.html:]"
        assert templates.names() == ["list.html", "actions/link.html", "page.html"]
        data = templates.data_for("page.html")
        assert data["page_title"] == "Widgets"
        assert str(data["contents"]) == "[list.html:body]"
        assert data["has_actions"] is True
        assert [str(a) for a in data["actions"]] == ["[actions/link.html:]"]
        assert data["has_crumbs"] is True
        assert data["crumbs"] == [Crumb("Home", "/admin")]
        assert data["theme"] == "dark"

    def test_without_actions_or_crumbs(
        self, site: AdminSite, ctx: RenderContext, templates: RecordingTemplates
    ) -> None:
        render_page(site, ctx, "list", {"title": "Widgets", "contents_template": "list.html"})
        data = templates.data_for("page.html")
        assert data["has_actions"] is False
        assert data["has_crumbs"] is False

    def test_configured_shell(self, site: AdminSite, templates: RecordingTemplates) -> None:
        ctx = RenderContext(templates, AdminConfig(page_template="shell.html"))
        render_page(site, ctx, "list", {"title": "W", "contents_template": "list.html"})
        assert templates.names()[-1] == "shell.html"

    def test_failing_action_renders_empty(
        self, site: AdminSite, failures: list[RenderFailure]
    ) -> None:
        templates = RecordingTemplates(failing={"actions/search.html"})
        ctx = RenderContext(templates, AdminConfig(), failures.append)
        options = PageOptions(
            title="Widgets",
            contents_template="list.html",
            actions=[SearchAction(), LinkAction("/new", "New")],
        )
        render_page(site, ctx, "list", options)
        data = templates.data_for("page.html")
        assert [str(a) for a in data["actions"]] == ["", "[actions/link.html:]"]
        assert len(failures) == 1
        assert isinstance(failures[0].error, TemplateRenderError)

    def test_contents_failure_propagates(self, site: AdminSite) -> None:
        ctx = RenderContext(RecordingTemplates(failing={"list.html"}), AdminConfig())
        with pytest.raises(TemplateRenderError):
            render_page(site, ctx, "list", {"title": "W", "contents_template": "list.html"})


class TestPageStyles:
    def test_custom_style_renderer(self, site: AdminSite, ctx: RenderContext) -> None:
        site.declare_page_style("report")

        @site.render_page.handles("report")
        def render_report(page_style: str, options: PageOptions, ctx: RenderContext) -> str:
            return f"report:{options.title}"

        assert render_page(site, ctx, "report", {"title": "Q3", "contents_template": "r.html"}) == (
            "report:Q3"
        )

    def test_child_style_inherits_renderer(self, site: AdminSite, ctx: RenderContext) -> None:
        site.declare_page_style("report")
        site.declare_page_style("report/quarterly", "report")
        site.render_page.register("report", lambda style, options, ctx: f"report:{style}")
        html = render_page(
            site, ctx, "report/quarterly", {"title": "Q3", "contents_template": "r.html"}
        )
        assert html == "report:report/quarterly"

    def test_custom_shell_template(
        self, site: AdminSite, ctx: RenderContext, templates: RecordingTemplates
    ) -> None:
        site.declare_page_style("report")
        site.render_page.register(
            "report",
            lambda style, options, ctx: render_page_with_template(ctx, "report.html", options),
        )
        render_page(site, ctx, "report", {"title": "Q3", "contents_template": "r.html"})
        assert templates.names() == ["r.html", "report.html"]

    def test_ambiguous_style_propagates(self, site: AdminSite, ctx: RenderContext) -> None:
        site.declare_page_style("a")
        site.declare_page_style("b")
        site.declare_page_style("ab", "a")
        site.hierarchy.derive("ab", "b")
        site.render_page.register("a", lambda *args: "a")
        site.render_page.register("b", lambda *args: "b")
        with pytest.raises(AmbiguousDispatchError):
            render_page(site, ctx, "ab", {"title": "T", "contents_template": "t.html"})


class TestRenderActions:
    def test_renders_in_order(self, ctx: RenderContext) -> None:
        markup = render_actions(ctx, [SearchAction(), LinkAction("/a", "A")])
        assert [str(m) for m in markup] == ["[actions/search.html:]", "[actions/link.html:]"]

    def test_empty(self, ctx: RenderContext) -> None:
        assert render_actions(ctx, []) == []
