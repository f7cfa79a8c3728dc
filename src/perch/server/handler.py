"""ASGI handler: translates ASGI scope/messages to admin types.

The only component that touches raw ASGI HTTP messages. Converts the
scope to a ``Request``, routes it, maps errors to responses and sends the
result back through ASGI send().
"""

from typing import TYPE_CHECKING

from perch._internal.asgi import Receive, Scope, Send
from perch.errors import HTTPError, NotFound
from perch.http.request import Request
from perch.http.response import Response
from perch.server.errors import handle_http_error, handle_internal_error
from perch.server.sender import send_response
from perch.views import home_view

if TYPE_CHECKING:
    from perch.app import Admin


async def dispatch(request: Request, admin: "Admin") -> Response:
    """Route one request: the home page at ``/``, everything else through the registry."""
    if request.path in {"", "/"} and request.method == "GET":
        return home_view(request, admin)
    response = await admin.routes.route(request)
    if response is None:
        raise NotFound(f"No admin page at {request.full_path}")
    return response


def _is_mounted(path: str, base_url: str) -> bool:
    return not base_url or path == base_url or path.startswith(f"{base_url}/")


async def handle_request(scope: Scope, receive: Receive, send: Send, *, admin: "Admin") -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive, root_path=admin.config.base_url)
    head = request.method == "HEAD"
    if head:
        request = Request.from_asgi(
            {**scope, "method": "GET"}, receive, root_path=admin.config.base_url
        )

    try:
        if not _is_mounted(scope["path"], admin.config.base_url):
            raise NotFound(f"{scope['path']!r} is outside the admin mount point")
        response = await dispatch(request, admin)
    except HTTPError as exc:
        response = handle_http_error(exc, request)
    except Exception as exc:
        response = handle_internal_error(exc, request, admin.config.debug)

    await send_response(response, send, head=head)
