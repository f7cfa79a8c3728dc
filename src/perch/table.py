"""Table rendering.

A table style decides the column order and which cell style each column
uses; a cell style decides the template and the value transform for one
cell. Both are resolved through the site's dispatch tables, so a style
inherits everything it does not declare from its ancestors.

Cell style lookup has two levels: the table style's own mapping, then the
mapping of ``DEFAULT_TABLE_STYLE``. Each cell renders on its own; a cell
that fails renders empty and is reported to the context's failure sink.
"""

import dataclasses
import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date, datetime
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from kida.template import Markup

from perch.rendering import RenderContext, render_unit
from perch.site import DEFAULT_TABLE_STYLE

if TYPE_CHECKING:
    from perch.site import AdminSite

_SEPARATORS = re.compile(r"[-_]")


@dataclass(frozen=True, slots=True)
class CellContext:
    """Everything a cell transform may need besides the value.

    ``model`` is the identifier of the model the table shows, or ``None``
    for tables that are not about one model.
    """

    column: str
    model: str | None
    base_url: str
    record: Any = None


@dataclass(frozen=True, slots=True)
class RecordLink:
    """Value of an ``id`` cell: the identifier plus a link to its detail page."""

    model: str | None
    id: Any
    url: str | None

    def __str__(self) -> str:
        return str(self.id)


def column_label(column: str) -> str:
    """``created_at`` -> ``Created at``."""
    return _SEPARATORS.sub(" ", column).capitalize()


def record_fields(record: Any) -> list[str]:
    """Field names of a dataclass instance or mapping, in definition order."""
    if isinstance(record, Mapping):
        return [str(k) for k in record]
    if dataclasses.is_dataclass(record):
        return [f.name for f in dataclasses.fields(record)]
    msg = f"Records must be dataclass instances or mappings, got {type(record).__name__}"
    raise TypeError(msg)


def record_value(record: Any, column: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(column)
    return getattr(record, column, None)


def model_columns(model: type | None) -> list[str] | None:
    """Columns known ahead of any record: dataclass fields, else ``None``."""
    if model is not None and dataclasses.is_dataclass(model):
        return [f.name for f in dataclasses.fields(model)]
    return None


def render_cell(
    site: "AdminSite",
    ctx: RenderContext,
    table_style: str,
    column: str,
    value: Any,
    *,
    model: str | None = None,
    record: Any = None,
) -> str:
    """Render one cell: resolve its style, transform the value, render the template."""
    cell = CellContext(column=column, model=model, base_url=ctx.config.base_url, record=record)
    template = None
    style = site.cell_style_for(table_style, column)
    if style is not None:
        template = site.cell_template(style)
        value = site.cell_transform(style, value, cell)
    if value is None:
        value = ""
    return ctx.templates.render(
        template or ctx.config.default_cell_template, {"value": value, "cell": cell}
    )


def render_table(
    site: "AdminSite",
    ctx: RenderContext,
    table_style: str,
    records: Iterable[Any],
    *,
    model: str | None = None,
    columns: Sequence[str] | None = None,
    extra: Mapping[str, Any] | None = None,
) -> Markup:
    """Render ``records`` as a table of ``table_style``.

    The header comes from ``columns`` when given, else from the first
    record's fields. With neither, only a declared column order can
    produce a header. ``extra`` is merged into the table template data.
    """
    records = list(records)
    if columns is not None:
        known = list(columns)
    elif records:
        known = record_fields(records[0])
    else:
        known = []
    order = list(site.column_order(table_style, known))

    rows = []
    for record in records:
        cells = []
        for column in order:

            def render(column: str = column, record: Any = record) -> str:
                return render_cell(
                    site,
                    ctx,
                    table_style,
                    column,
                    record_value(record, column),
                    model=model,
                    record=record,
                )

            unit = f"cell {column!r} of {table_style}"
            cells.append(render_unit(unit, render, ctx.on_failure).markup)
        rows.append(cells)

    data = {
        "columns": [column_label(c) for c in order],
        "column_names": order,
        "rows": rows,
        "next_page": None,
        **(extra or {}),
    }
    return Markup(ctx.templates.render(ctx.config.table_template, data))


# -- Built-in cell styles --


def _as_datetime(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            return value
    return value


def format_datetime(value: Any) -> str | None:
    """``Mar 4, 2024 3:07 PM (UTC)``. Naive datetimes get no zone suffix."""
    value = _as_datetime(value)
    if value is None or value == "":
        return None
    if not isinstance(value, datetime):
        if isinstance(value, date):
            return format_date(value)
        return str(value)
    hour = value.hour % 12 or 12
    text = f"{value:%b} {value.day}, {value.year} {hour}:{value:%M} {value:%p}"
    zone = value.tzname()
    return f"{text} ({zone})" if zone else text


def format_date(value: Any) -> str | None:
    """``Mar 4, 2024``."""
    value = _as_datetime(value)
    if value is None or value == "":
        return None
    if not isinstance(value, date):
        return str(value)
    return f"{value:%b} {value.day}, {value.year}"


def record_link(value: Any, cell: CellContext) -> RecordLink:
    if value is None or value == "":
        return RecordLink(model=cell.model, id="", url=None)
    url = f"{cell.base_url}/{cell.model}/{quote(str(value), safe='')}" if cell.model else None
    return RecordLink(model=cell.model, id=value, url=url)


def install_cell_styles(site: "AdminSite") -> None:
    """Declare the built-in cell styles and the global column mapping."""
    site.declare_cell_style("boolean", "cells/boolean.html", lambda v, _cell: bool(v))
    site.declare_cell_style("datetime", "cells/datetime.html", lambda v, _cell: format_datetime(v))
    site.declare_cell_style("date", "cells/datetime.html", lambda v, _cell: format_date(v))
    site.declare_cell_style("email", "cells/email.html")
    site.declare_cell_style("id", "cells/id.html", record_link)

    site.use_cell_style(
        DEFAULT_TABLE_STYLE,
        {
            "id": "id",
            "email": "email",
            "created": "datetime",
            "created-at": "datetime",
            "created_at": "datetime",
            "updated": "datetime",
            "updated-at": "datetime",
            "updated_at": "datetime",
        },
    )
