"""Admin: the ASGI application object.

Wires the site (hierarchy + dispatch tables), the route registry, the
model registry, the data source and the template engine together, and
serves them as one ASGI callable::

    admin = Admin(AdminConfig(title="Shop"), source=MemorySource(), models=[Widget, Order])

    @admin.view("restock", "POST", "/{id}/restock", Widget)
    async def restock(page_kind, model, request, admin):
        ...

Any ASGI server can host it; mount it under ``config.base_url``.
"""

import threading
from collections.abc import Callable, Iterable, Sequence
from typing import Any

from perch._internal.asgi import Receive, Scope, Send
from perch._internal.invoke import invoke
from perch.actions import Action
from perch.config import AdminConfig
from perch.data.memory import MemorySource
from perch.data.source import DataSource
from perch.dispatch import DEFAULT, Handler
from perch.errors import ConfigurationError, NoHandlerError, NotFound
from perch.http.request import Request
from perch.http.response import Response
from perch.models import ModelRegistry
from perch.rendering import FailureSink, RenderContext, log_failure
from perch.routing.registry import RouteRegistry
from perch.routing.route import RouteEntry
from perch.server.handler import handle_request
from perch.site import AdminSite
from perch.templating.engine import KidaTemplates, TemplateEngine
from perch.views import install_views


class Admin:
    """The admin application.

    Declarations (models, views, styles) may keep arriving after the first
    request; the route registry rebuilds its router lazily. The template
    engine is created once, on first use.
    """

    __slots__ = (
        "_shutdown_hooks",
        "_startup_hooks",
        "_templates",
        "_templates_lock",
        "config",
        "home_actions",
        "models",
        "on_failure",
        "routes",
        "site",
        "source",
    )

    def __init__(
        self,
        config: AdminConfig | None = None,
        *,
        source: DataSource | None = None,
        models: Iterable[type] = (),
        site: AdminSite | None = None,
        templates: TemplateEngine | None = None,
        on_failure: FailureSink = log_failure,
    ) -> None:
        self.config: AdminConfig = config or AdminConfig()
        self.site: AdminSite = site or AdminSite()
        self.source: DataSource = source if source is not None else MemorySource()
        self.models = ModelRegistry()
        self.routes = RouteRegistry(self.models.resolve, self._dispatch_view)
        self.home_actions: tuple[Action, ...] = ()
        self.on_failure = on_failure

        self._templates: TemplateEngine | None = templates
        self._templates_lock = threading.Lock()
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []

        install_views(self)
        for model in models:
            self.register_model(model)

    # -- Declarations --

    def register_model(self, model: type, name: str | None = None) -> type:
        """Serve ``model`` under ``/<name>``. Usable as a class decorator."""
        return self.models.register(model, name)

    def declare_view(
        self, page_kind: str, method: str, path: str, model: Any = DEFAULT
    ) -> RouteEntry:
        """Route ``method path`` to the ``page_kind`` handler.

        ``model`` is a model class or identifier to serve the route under
        ``/<model><path>`` only, or ``DEFAULT`` to serve it under
        ``/{model}<path>`` for every registered model.
        """
        self.site.declare_view_kind(page_kind)
        if isinstance(model, type):
            model = self.models.name_of(model)
        return self.routes.add_route(method, path, page_kind, model)

    def view(
        self, page_kind: str, method: str, path: str, model: Any = DEFAULT
    ) -> Callable[[Handler], Handler]:
        """Declare a view and register the decorated function as its handler.

        Handlers are called as ``handler(page_kind, model, request, admin)``
        and return a ``Response`` (or a string of HTML).
        """
        model_type = model
        if isinstance(model, str):
            model_type = self.models.resolve(model)

        def decorator(func: Handler) -> Handler:
            self.site.handle_request.register((page_kind, model_type), func)
            self.declare_view(page_kind, method, path, model)
            return func

        return decorator

    def set_home_actions(self, actions: Sequence[Action]) -> None:
        """Quick actions shown on the admin home page."""
        self.home_actions = tuple(actions)

    # -- Lifecycle hooks --

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync startup hook via decorator.

        Hooks run in registration order during ASGI lifespan startup.
        """
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync shutdown hook via decorator.

        Hooks run in registration order during ASGI lifespan shutdown,
        before the data source is closed.
        """
        self._shutdown_hooks.append(func)
        return func

    # -- Rendering --

    @property
    def templates(self) -> TemplateEngine:
        """The template engine, created from config on first use.

        Double-checked locking so concurrent first requests build one
        environment.
        """
        templates = self._templates
        if templates is not None:
            return templates
        with self._templates_lock:
            if self._templates is None:
                self._templates = KidaTemplates.from_config(self.config)
            return self._templates

    @property
    def render_context(self) -> RenderContext:
        return RenderContext(self.templates, self.config, self.on_failure)

    # -- Request handling --

    async def _dispatch_view(self, page_kind: str, model: type, request: Request) -> Response:
        try:
            handler = self.site.handle_request.resolve(page_kind, model)
        except NoHandlerError as exc:
            raise NotFound(f"No {page_kind} view for {model.__name__}") from exc
        result = await invoke(handler, page_kind, model, request, self)
        if isinstance(result, str):
            return Response(body=result)
        if not isinstance(result, Response):
            msg = f"{page_kind} handler for {model.__name__} returned {type(result).__name__}"
            raise ConfigurationError(msg)
        return result

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(scope, receive, send)
            return
        await handle_request(scope, receive, send, admin=self)

    async def _handle_lifespan(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol.

        Builds the template engine before the first request, runs the
        startup/shutdown hooks and closes the data source on shutdown.
        """
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    self.templates  # noqa: B018
                    for hook in self._startup_hooks:
                        await invoke(hook)
                    await send({"type": "lifespan.startup.complete"})
                except Exception as exc:
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return

            elif msg_type == "lifespan.shutdown":
                for hook in self._shutdown_hooks:
                    await invoke(hook)
                close = getattr(self.source, "close", None)
                if close is not None:
                    await invoke(close)
                await send({"type": "lifespan.shutdown.complete"})
                return
