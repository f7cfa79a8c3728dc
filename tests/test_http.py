"""Tests for perch.http — headers, query params, request and response."""

import pytest

from perch.http.headers import Headers
from perch.http.query import QueryParams
from perch.http.request import Request
from perch.http.response import PLAIN_TEXT, Response


class TestHeaders:
    def test_case_insensitive(self) -> None:
        headers = Headers(((b"Content-Type", b"text/html"),))
        assert headers["content-type"] == "text/html"
        assert headers["CONTENT-TYPE"] == "text/html"

    def test_first_value_wins(self) -> None:
        headers = Headers(((b"x-a", b"1"), (b"X-A", b"2")))
        assert headers["x-a"] == "1"
        assert len(headers) == 1

    def test_missing(self) -> None:
        with pytest.raises(KeyError):
            Headers()["x"]
        assert Headers().get("x") is None


class TestQueryParams:
    def test_first_value(self) -> None:
        query = QueryParams(b"page=2&tag=a&tag=b")
        assert query["page"] == "2"
        assert query.get_list("tag") == ["a", "b"]

    def test_blank_values_are_kept(self) -> None:
        assert QueryParams(b"q=")["q"] == ""

    def test_get_int(self) -> None:
        query = QueryParams(b"page=3&bad=x")
        assert query.get_int("page") == 3
        assert query.get_int("bad", 1) == 1
        assert query.get_int("missing") is None

    def test_without(self) -> None:
        query = QueryParams(b"page=2&name=Bolt&email=a%40b.io")
        assert query.without("page") == {"name": "Bolt", "email": "a@b.io"}

    def test_raw(self) -> None:
        assert QueryParams(b"a=1").raw == b"a=1"


def _scope(path: str, query: bytes = b"") -> dict:
    return {"type": "http", "method": "GET", "path": path, "query_string": query, "headers": []}


async def _receive() -> dict:
    return {"type": "http.request", "body": b"", "more_body": False}


class TestRequest:
    def test_from_asgi_strips_root_path(self) -> None:
        request = Request.from_asgi(_scope("/admin/widget", b"page=2"), _receive, root_path="/admin")
        assert request.path == "/widget"
        assert request.full_path == "/admin/widget"
        assert request.url == "/admin/widget?page=2"

    def test_mount_root_becomes_slash(self) -> None:
        request = Request.from_asgi(_scope("/admin"), _receive, root_path="/admin")
        assert request.path == "/"

    def test_params_merge_path_over_query(self) -> None:
        request = Request("GET", "/widget/1", QueryParams(b"id=9&name=a")).with_path_params(
            {"id": "1"}
        )
        assert request.params == {"id": "1", "name": "a"}

    async def test_form_body(self) -> None:
        chunks = iter(
            [
                {"type": "http.request", "body": b"name=Bo", "more_body": True},
                {"type": "http.request", "body": b"lt&qty=3", "more_body": False},
            ]
        )

        async def receive() -> dict:
            return next(chunks)

        request = Request.from_asgi({**_scope("/w"), "method": "POST"}, receive)
        form = await request.form()
        assert dict(form) == {"name": "Bolt", "qty": "3"}
        assert await request.body() == b"name=Bolt&qty=3"


class TestResponse:
    def test_defaults(self) -> None:
        response = Response("hi")
        assert (response.status, response.text, response.body_bytes) == (200, "hi", b"hi")
        assert "text/html" in response.content_type

    def test_with_methods_return_copies(self) -> None:
        base = Response("x")
        changed = base.with_status(201).with_header("X-A", "1").with_content_type(PLAIN_TEXT)
        assert base.status == 200
        assert changed.status == 201
        assert changed.header("x-a") == "1"
        assert changed.content_type == PLAIN_TEXT

    def test_missing_header(self) -> None:
        assert Response().header("x") is None
