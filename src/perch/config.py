"""Admin configuration.

AdminConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class AdminConfig:
    """Admin configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AdminConfig(title="Store Admin", base_url="/store-admin", page_size=50)
    """

    title: str = "Perch Admin"

    # Mount prefix: stripped from incoming paths, prepended to generated links
    base_url: str = ""

    # Number of records per page in list views
    page_size: int = 20

    debug: bool = False

    # Templates
    template_dirs: tuple[str | Path, ...] = ()  # Searched before the packaged templates
    autoescape: bool = True
    trim_blocks: bool = True
    lstrip_blocks: bool = True

    # Shell and fallback templates
    page_template: str = "page.html"
    table_template: str = "table.html"
    default_cell_template: str = "cells/default.html"

    def __post_init__(self) -> None:
        if self.page_size < 1:
            msg = f"page_size must be at least 1, got {self.page_size}"
            raise ValueError(msg)
        if self.base_url and (not self.base_url.startswith("/") or self.base_url.endswith("/")):
            msg = f"base_url must start with '/' and not end with '/', got {self.base_url!r}"
            raise ValueError(msg)
