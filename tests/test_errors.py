"""Tests for perch.errors — exception hierarchy and error messages."""

import pytest

from perch.errors import (
    AmbiguousDispatchError,
    ConfigurationError,
    CycleError,
    DataError,
    DispatchError,
    HTTPError,
    InvalidPageOptions,
    MethodNotAllowed,
    ModelNotFoundError,
    NoHandlerError,
    NotFound,
    PerchError,
    RecordNotFoundError,
    TemplateNotFoundError,
    TemplateRenderError,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        ("child", "parent"),
        [
            (ConfigurationError, PerchError),
            (CycleError, ConfigurationError),
            (AmbiguousDispatchError, DispatchError),
            (NoHandlerError, DispatchError),
            (NoHandlerError, LookupError),
            (HTTPError, PerchError),
            (NotFound, HTTPError),
            (ModelNotFoundError, NotFound),
            (RecordNotFoundError, NotFound),
            (MethodNotAllowed, HTTPError),
            (TemplateNotFoundError, PerchError),
            (TemplateRenderError, PerchError),
            (InvalidPageOptions, ValueError),
            (DataError, PerchError),
        ],
    )
    def test_subclass(self, child: type, parent: type) -> None:
        assert issubclass(child, parent)


class TestHTTPError:
    def test_str_with_detail(self) -> None:
        assert str(NotFound("gone")) == "404: gone"

    def test_str_without_detail(self) -> None:
        assert str(HTTPError(status=500)) == "500"

    def test_model_not_found(self) -> None:
        exc = ModelNotFoundError("gizmo")
        assert (exc.status, exc.detail) == (404, "Model does not exist.")
        assert exc.model_name == "gizmo"  # type: ignore[attr-defined]

    def test_record_not_found(self) -> None:
        assert RecordNotFoundError().detail == "Not found."

    def test_method_not_allowed_allow_header(self) -> None:
        exc = MethodNotAllowed(frozenset({"POST", "GET"}))
        assert exc.status == 405
        assert exc.headers == (("Allow", "GET, POST"),)
        assert "GET, POST" in exc.detail


class TestDispatchErrors:
    def test_ambiguous_lists_keys(self) -> None:
        exc = AmbiguousDispatchError("render_page", ("c",), [("a",), ("b",)])
        assert exc.table == "render_page"
        assert "('a',)" in str(exc)
        assert "('b',)" in str(exc)

    def test_no_handler(self) -> None:
        exc = NoHandlerError("cell_style", ("t", "email"))
        assert str(exc) == "cell_style: no handler for ('t', 'email')"

    def test_cycle(self) -> None:
        exc = CycleError("a", "b")
        assert (exc.tag, exc.parent) == ("a", "b")


class TestTemplateErrors:
    def test_not_found(self) -> None:
        exc = TemplateNotFoundError("page.html")
        assert exc.template_name == "page.html"
        assert "page.html" in str(exc)

    def test_render_reason(self) -> None:
        assert str(TemplateRenderError("x.html", "boom")) == "Error rendering template 'x.html': boom"
