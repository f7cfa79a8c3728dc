"""Tests for perch.actions — quick actions and breadcrumbs."""

import pytest
from conftest import RecordingTemplates

from perch.actions import Crumb, LinkAction, PostAction, SearchAction, as_crumb, is_action
from perch.config import AdminConfig
from perch.errors import InvalidPageOptions
from perch.templating.engine import KidaTemplates


class TestActions:
    def test_search_defaults(self) -> None:
        action = SearchAction()
        assert (action.url, action.param, action.placeholder) == ("/", "q", "...")
        assert (action.title, action.value) == ("", "")

    def test_each_action_renders_its_own_template(self) -> None:
        templates = RecordingTemplates()
        SearchAction().render(templates)
        LinkAction("/a", "A").render(templates)
        PostAction("/b", "B").render(templates)
        assert templates.names() == [
            "actions/search.html",
            "actions/link.html",
            "actions/post.html",
        ]
        assert templates.data_for("actions/post.html")["action"] == PostAction("/b", "B")

    @pytest.mark.parametrize("cls", [LinkAction, PostAction])
    def test_url_required(self, cls: type) -> None:
        with pytest.raises(InvalidPageOptions):
            cls("", "text")

    def test_is_action(self) -> None:
        assert is_action(SearchAction())
        assert not is_action("search")
        assert not is_action(Crumb("Home", "/"))


class TestPackagedActionTemplates:
    def test_search_form(self) -> None:
        templates = KidaTemplates.from_config(AdminConfig())
        html = SearchAction(url="/admin/widget", placeholder="Name").render(templates)
        assert 'action="/admin/widget"' in html
        assert 'name="q"' in html
        assert 'placeholder="Name"' in html

    def test_search_title_and_value(self) -> None:
        templates = KidaTemplates.from_config(AdminConfig())
        action = SearchAction(url="/admin/widget", title="Find widgets", value="bolt m4")
        html = action.render(templates)
        assert "Find widgets" in html
        assert 'value="bolt m4"' in html

    def test_search_without_title_has_no_label(self) -> None:
        templates = KidaTemplates.from_config(AdminConfig())
        html = SearchAction(url="/admin/widget").render(templates)
        assert "<label" not in html
        assert 'value=""' in html

    def test_post_form(self) -> None:
        templates = KidaTemplates.from_config(AdminConfig())
        html = PostAction("/admin/widget/1/restock", "Restock").render(templates)
        assert 'method="post"' in html
        assert "Restock" in html

    def test_link_text_is_escaped(self) -> None:
        templates = KidaTemplates.from_config(AdminConfig())
        html = LinkAction("/x", "<b>New</b>").render(templates)
        assert "<b>" not in html
        assert "&lt;b&gt;" in html


class TestCrumbs:
    def test_as_crumb_from_mapping(self) -> None:
        assert as_crumb({"title": "Home", "url": "/"}) == Crumb("Home", "/")

    def test_as_crumb_passes_instances_through(self) -> None:
        crumb = Crumb("Home", "/")
        assert as_crumb(crumb) is crumb

    def test_missing_url(self) -> None:
        with pytest.raises(InvalidPageOptions):
            as_crumb({"title": "Home"})

    def test_rejects_other_values(self) -> None:
        with pytest.raises(InvalidPageOptions):
            as_crumb("Home")  # type: ignore[arg-type]
