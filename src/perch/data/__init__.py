"""Record sources for admin views.

Views fetch records through the ``DataSource`` protocol: two async
methods, equality filters, offset paging. Two implementations ship::

    from perch.data import MemorySource, SQLiteSource

    source = MemorySource({Widget: [Widget(1, "bolt"), Widget(2, "nut")]})
    source = SQLiteSource("shop.db")

Anything else (an ORM session, an HTTP API) only needs the two methods.
"""

from perch.data.memory import MemorySource
from perch.data.source import DataSource
from perch.data.sqlite import SQLiteSource

__all__ = [
    "DataSource",
    "MemorySource",
    "SQLiteSource",
]
