"""The data source protocol and the filter helpers shared by bundled sources."""

from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class DataSource(Protocol):
    """Where admin views get records from.

    ``filters`` maps column names to values compared for equality. Values
    arrive as strings from the query string; sources compare them with
    whatever coercion their storage needs.
    """

    async def fetch_page(
        self, model: type, offset: int, limit: int, filters: Mapping[str, Any]
    ) -> Sequence[Any]: ...

    async def fetch_one(self, model: type, filters: Mapping[str, Any]) -> Any | None: ...


def applicable_filters(filters: Mapping[str, Any], columns: Iterable[str]) -> dict[str, Any]:
    """Drop filters on columns the model does not have.

    List pages receive every query parameter as a filter, including ones
    meant for other widgets (a search box's ``q``), so unknown keys are
    ignored rather than failing the page.
    """
    known = set(columns)
    return {k: v for k, v in filters.items() if k in known}
