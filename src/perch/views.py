"""Built-in views: the model list, the record detail page and the admin home.

``list`` and ``detail`` are page kinds served for every registered model
under ``/{model}/`` and ``/{model}/{id}``. Each step that differs between
models goes through a dispatch table on (page kind, model type), so a
model overrides its title, fetch, table style, actions or crumbs without
replacing the whole handler::

    site.list_title.register(("list", Widget), lambda kind, model, records: "Inventory")
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode

from perch._internal.invoke import invoke
from perch.dispatch import DEFAULT
from perch.errors import RecordNotFoundError
from perch.http.request import Request
from perch.http.response import Response
from perch.page import PageOptions, render_page
from perch.table import model_columns, record_value, render_table

if TYPE_CHECKING:
    from perch.app import Admin

LIST = "list"
DETAIL = "detail"
HOME = "home"


@dataclass(frozen=True, slots=True)
class ModelLink:
    """One entry of the home page model list."""

    name: str
    label: str
    url: str


def default_list_title(page_kind: str, model: type, records: Any) -> str:
    return f"{model.__name__} List"


def default_detail_title(page_kind: str, model: type, record: Any) -> str:
    return f"{model.__name__} {record_value(record, 'id')}"


async def list_view(page_kind: str, model: type, request: Request, admin: "Admin") -> Response:
    """One page of records. ``?page=N`` selects the page; other params filter."""
    site, config = admin.site, admin.config
    page = max(request.query.get_int("page", 1) or 1, 1)
    filters = request.query.without("page")
    offset = (page - 1) * config.page_size

    # One extra record tells whether a next page exists
    records = list(
        await invoke(site.fetch_list, model, offset, config.page_size + 1, filters, admin.source)
    )
    has_next = len(records) > config.page_size
    records = records[: config.page_size]
    next_page = None
    if has_next:
        next_page = f"{request.full_path}?{urlencode({**filters, 'page': page + 1})}"

    ctx = admin.render_context
    title = site.list_title(page_kind, model, records)
    table = render_table(
        site,
        ctx,
        site.table_style(page_kind, model, request),
        records,
        model=admin.models.name_of(model),
        columns=model_columns(model),
        extra={"next_page": next_page, "page": page},
    )
    options = PageOptions(
        title=title,
        contents_template="list.html",
        contents_data={"title": title, "body": table, "next_page": next_page, "page": page},
        actions=site.actions(page_kind, model, records),
        crumbs=site.crumbs(page_kind, model, records),
    )
    return Response(body=render_page(site, ctx, page_kind, options))


async def detail_view(page_kind: str, model: type, request: Request, admin: "Admin") -> Response:
    """One record, selected by every request parameter except ``model`` and ``saved``."""
    site = admin.site
    filters: dict[str, Any] = {
        k: v for k, v in request.params.items() if k not in {"model", "saved"}
    }
    ident = filters.get("id")
    if isinstance(ident, str) and ident.isascii() and ident.isdigit():
        filters["id"] = int(ident)

    record = await invoke(site.fetch_one, model, filters, admin.source)
    if record is None:
        raise RecordNotFoundError

    ctx = admin.render_context
    title = site.detail_title(page_kind, model, record)
    table = render_table(
        site,
        ctx,
        site.table_style(page_kind, model, request),
        [record],
        model=admin.models.name_of(model),
        columns=model_columns(model),
    )
    options = PageOptions(
        title=title,
        contents_template="detail.html",
        contents_data={
            "title": title,
            "saved": bool(request.query.get("saved")),
            "body": table,
            "save_action_url": request.full_path,
        },
        actions=site.actions(page_kind, model, record),
        crumbs=site.crumbs(page_kind, model, record),
    )
    return Response(body=render_page(site, ctx, page_kind, options))


def home_view(request: Request, admin: "Admin") -> Response:
    """The admin root: one link per registered model."""
    base_url = admin.config.base_url
    models = [
        ModelLink(name=name, label=model.__name__, url=f"{base_url}/{name}")
        for name, model in admin.models.items()
    ]
    options = PageOptions(
        title=admin.config.title,
        contents_template="home.html",
        contents_data={"title": admin.config.title, "models": models},
        actions=admin.home_actions,
    )
    return Response(body=render_page(admin.site, admin.render_context, HOME, options))


def install_views(admin: "Admin") -> None:
    """Declare the built-in page kinds, their handlers and their routes."""
    site = admin.site
    for kind in (LIST, DETAIL, HOME):
        site.declare_page_style(kind)

    site.list_title.register((LIST, DEFAULT), default_list_title)
    site.detail_title.register((DETAIL, DEFAULT), default_detail_title)
    site.handle_request.register((LIST, DEFAULT), list_view)
    site.handle_request.register((DETAIL, DEFAULT), detail_view)

    admin.declare_view(LIST, "GET", "/")
    admin.declare_view(DETAIL, "GET", "/{id}")
