"""Error handling pipeline for admin requests.

Maps HTTPError exceptions and unexpected failures to Response objects.
"""

import logging

from perch.errors import HTTPError
from perch.http.request import Request
from perch.http.response import PLAIN_TEXT, Response

logger = logging.getLogger("perch.server")


def http_error_response(exc: HTTPError) -> Response:
    """Plain-text response carrying the error's status, detail and headers."""
    detail = exc.detail or f"Error {exc.status}"
    resp = Response(body=detail, status=exc.status, content_type=PLAIN_TEXT)
    for name, value in exc.headers:
        resp = resp.with_header(name, value)
    return resp


def handle_http_error(exc: HTTPError, request: Request) -> Response:
    """Map an HTTPError raised while serving ``request`` to a Response."""
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)
    return http_error_response(exc)


def handle_internal_error(exc: Exception, request: Request, debug: bool) -> Response:
    """Handle unexpected exceptions as 500 errors."""
    logger.exception("500 %s %s", request.method, request.path)
    body = "Internal Server Error"
    if debug:
        body = f"{body}\n\n{type(exc).__name__}: {exc}"
    return Response(body=body, status=500, content_type=PLAIN_TEXT)
