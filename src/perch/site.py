"""AdminSite — the hierarchy and every dispatch table, in one object.

There are no process-wide registries. An ``AdminSite`` is built once at
startup, filled through the declaration API below, and then only read
while serving requests::

    site = AdminSite()
    site.declare_table_style("table/user")
    site.declare_cell_style("money", "cells/money.html", lambda v, cell: f"${v:,.2f}")
    site.use_cell_style("table/user", balance="money")
    site.declare_column_order("table/user", ["id", "email", "balance"])
    site.use_table_style("list", User, "table/user")

Tables and their handler signatures:

=================  ======================  ==============================================
table              dispatch axes           handler(...)
=================  ======================  ==============================================
render_page        page style              (page_style, options, ctx) -> str
actions            page kind, model type   (page_kind, model, result) -> actions
crumbs             page kind, model type   (page_kind, model, result) -> crumbs
table_style        page kind, model type   (page_kind, model, request) -> table style
handle_request     page kind, model type   (page_kind, model, request, admin) -> Response
list_title         page kind, model type   (page_kind, model, records) -> str
detail_title       page kind, model type   (page_kind, model, record) -> str
column_order       table style             (table_style, columns) -> list[str]
cell_style         table style, column     (table_style, column) -> cell style | None
cell_template      cell style              (cell_style) -> template name | None
cell_transform     cell style              (cell_style, value, cell) -> value
fetch_list         model type              (model, offset, limit, filters, source)
fetch_one          model type              (model, filters, source)
=================  ======================  ==============================================
"""

from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

from perch.actions import Action, Crumb
from perch.dispatch import Axis, DispatchTable, Handler
from perch.errors import ConfigurationError
from perch.hierarchy import Hierarchy, Tag

VIEW: Tag = "view"
PAGE_STYLE: Tag = "page-style"
TABLE_STYLE: Tag = "table-style"
CELL_STYLE: Tag = "cell-style"

DEFAULT_TABLE_STYLE: Tag = "table/default"

CellTransform = Callable[[Any, Any], Any]


def default_column_order(table_style: Tag, columns: Iterable[str]) -> list[str]:
    """Identifier column first, the rest sorted."""
    keyset = set(columns)
    if "id" in keyset:
        keyset.discard("id")
        return ["id", *sorted(keyset)]
    return sorted(keyset)


async def _fetch_list(
    model: type, offset: int, limit: int, filters: Mapping[str, Any], source: Any
) -> Any:
    return await source.fetch_page(model, offset, limit, filters)


async def _fetch_one(model: type, filters: Mapping[str, Any], source: Any) -> Any:
    return await source.fetch_one(model, filters)


def _constant(value: Any) -> Handler:
    def handler(*_args: Any) -> Any:
        return value

    return handler


class AdminSite:
    """Tag hierarchy plus one dispatch table per polymorphic operation."""

    def __init__(self, hierarchy: Hierarchy | None = None) -> None:
        from perch.page import default_page_renderer
        from perch.table import install_cell_styles

        self.hierarchy = hierarchy or Hierarchy()
        h = self.hierarchy
        tag, kind_and_type = (Axis.TAG,), (Axis.TAG, Axis.TYPE)

        self.render_page = DispatchTable("render_page", h, tag)
        self.actions = DispatchTable("actions", h, kind_and_type)
        self.crumbs = DispatchTable("crumbs", h, kind_and_type)
        self.table_style = DispatchTable("table_style", h, kind_and_type)
        self.handle_request = DispatchTable("handle_request", h, kind_and_type)
        self.list_title = DispatchTable("list_title", h, kind_and_type)
        self.detail_title = DispatchTable("detail_title", h, kind_and_type)
        self.column_order = DispatchTable("column_order", h, tag)
        self.cell_style = DispatchTable("cell_style", h, (Axis.TAG, Axis.TAG))
        self.cell_template = DispatchTable("cell_template", h, tag)
        self.cell_transform = DispatchTable("cell_transform", h, tag)
        self.fetch_list = DispatchTable("fetch_list", h, (Axis.TYPE,))
        self.fetch_one = DispatchTable("fetch_one", h, (Axis.TYPE,))

        self.render_page.register_default(default_page_renderer)
        self.actions.register_default(_constant(()))
        self.crumbs.register_default(_constant(()))
        self.table_style.register_default(_constant(DEFAULT_TABLE_STYLE))
        self.column_order.register_default(default_column_order)
        self.cell_style.register_default(_constant(None))
        self.cell_template.register_default(_constant(None))
        self.cell_transform.register_default(lambda _style, value, _cell: value)
        self.fetch_list.register_default(_fetch_list)
        self.fetch_one.register_default(_fetch_one)

        h.derive(DEFAULT_TABLE_STYLE, TABLE_STYLE)
        install_cell_styles(self)

    def tables(self) -> list[DispatchTable]:
        """Every dispatch table, in declaration order."""
        return [v for v in vars(self).values() if isinstance(v, DispatchTable)]

    # -- Predicates --

    def is_view(self, tag: Tag) -> bool:
        return self.hierarchy.is_a(tag, VIEW)

    def is_page_style(self, tag: Tag) -> bool:
        return self.hierarchy.is_a(tag, PAGE_STYLE)

    def is_table_style(self, tag: Tag) -> bool:
        return self.hierarchy.is_a(tag, TABLE_STYLE)

    def is_cell_style(self, tag: Tag) -> bool:
        return self.hierarchy.is_a(tag, CELL_STYLE)

    # -- Style declarations --

    def declare_view_kind(self, page_kind: Tag) -> None:
        """Mark ``page_kind`` as a view that routes can point at."""
        self.hierarchy.derive(page_kind, VIEW)

    def declare_page_style(self, tag: Tag, parent: Tag = PAGE_STYLE) -> None:
        self._derive_under(tag, parent, PAGE_STYLE)

    def declare_table_style(self, tag: Tag, parent: Tag = TABLE_STYLE) -> None:
        self._derive_under(tag, parent, TABLE_STYLE)

    def declare_cell_style(
        self,
        tag: Tag,
        template: str,
        transform: CellTransform | None = None,
        parent: Tag = CELL_STYLE,
    ) -> None:
        """Declare a cell style rendered by ``template``.

        ``transform(value, cell)`` rewrites the raw value before the
        template sees it as ``value``; ``cell`` is the ``CellContext``.
        A style without a transform inherits its nearest ancestor's.
        """
        if not isinstance(template, str) or not template:
            msg = f"Cell style {tag!r} needs a template name, got {template!r}"
            raise ConfigurationError(msg)
        self._derive_under(tag, parent, CELL_STYLE)
        self.cell_template.register(tag, _constant(template))
        if transform is not None:
            self.cell_transform.register(tag, lambda _style, value, cell: transform(value, cell))

    def declare_column_order(self, table_style: Tag, columns: Sequence[str]) -> None:
        """Render tables of ``table_style`` with exactly these columns, in this order."""
        order = list(columns)
        self.column_order.register(table_style, _constant(order))

    def use_cell_style(
        self, table_style: Tag, mapping: Mapping[str, Tag] | None = None, **columns: Tag
    ) -> None:
        """Map column names to cell styles for tables of ``table_style``.

        Column names that are not identifiers (``created-at``) go in ``mapping``.
        """
        for column, style in {**(mapping or {}), **columns}.items():
            self.cell_style.register((table_style, column), _constant(style))

    def use_global_cell_style(self, mapping: Mapping[str, Tag] | None = None, **columns: Tag) -> None:
        """Cell styles used by every table style that does not map the column itself."""
        self.use_cell_style(DEFAULT_TABLE_STYLE, mapping, **columns)

    def use_table_style(self, page_kind: Tag, model: Any, table_style: Tag) -> None:
        self.table_style.register((page_kind, model), _constant(table_style))

    def define_actions(
        self, page_kind: Tag, model: Any, actions: Sequence[Action] | Handler
    ) -> None:
        """Quick actions for (page kind, model).

        ``actions`` is a sequence, or a callable ``(page_kind, model, result)``
        returning one for the records the page shows.
        """
        handler = actions if callable(actions) else _constant(tuple(actions))
        self.actions.register((page_kind, model), handler)

    def define_crumbs(
        self, page_kind: Tag, model: Any, crumbs: Sequence[Crumb | Mapping[str, str]] | Handler
    ) -> None:
        """Breadcrumbs for (page kind, model); same forms as ``define_actions``."""
        handler = crumbs if callable(crumbs) else _constant(tuple(crumbs))
        self.crumbs.register((page_kind, model), handler)

    # -- Lookups --

    def cell_style_for(self, table_style: Tag, column: str) -> Tag | None:
        """Cell style for ``column``: the table style's own mapping, then the default table style's."""
        style = self.cell_style(table_style, column)
        if style is None and table_style != DEFAULT_TABLE_STYLE:
            style = self.cell_style(DEFAULT_TABLE_STYLE, column)
        return style

    def _derive_under(self, tag: Tag, parent: Tag, root: Tag) -> None:
        if parent != root and not self.hierarchy.is_a(parent, root):
            msg = f"Cannot derive {tag!r} from {parent!r}: {parent!r} is not a {root}"
            raise ConfigurationError(msg)
        self.hierarchy.derive(tag, parent)
