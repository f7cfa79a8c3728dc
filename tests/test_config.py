"""Tests for perch.config — AdminConfig frozen dataclass."""

from pathlib import Path

import pytest

from perch.config import AdminConfig


class TestAdminConfig:
    def test_defaults(self) -> None:
        cfg = AdminConfig()

        assert cfg.title == "Perch Admin"
        assert cfg.base_url == ""
        assert cfg.page_size == 20
        assert cfg.debug is False
        assert cfg.template_dirs == ()
        assert cfg.autoescape is True
        assert cfg.page_template == "page.html"
        assert cfg.table_template == "table.html"
        assert cfg.default_cell_template == "cells/default.html"

    def test_override(self) -> None:
        cfg = AdminConfig(title="Shop", base_url="/shop-admin", page_size=50, debug=True)

        assert cfg.title == "Shop"
        assert cfg.base_url == "/shop-admin"
        assert cfg.page_size == 50
        assert cfg.debug is True

    def test_frozen(self) -> None:
        cfg = AdminConfig()

        with pytest.raises(AttributeError):
            cfg.debug = True  # type: ignore[misc]

    def test_template_dirs_accept_paths(self) -> None:
        cfg = AdminConfig(template_dirs=(Path("/srv/templates"), "more"))
        assert cfg.template_dirs == (Path("/srv/templates"), "more")

    @pytest.mark.parametrize("size", [0, -1])
    def test_page_size_must_be_positive(self, size: int) -> None:
        with pytest.raises(ValueError, match="page_size"):
            AdminConfig(page_size=size)

    @pytest.mark.parametrize("base_url", ["admin", "/admin/", "/"])
    def test_base_url_shape(self, base_url: str) -> None:
        with pytest.raises(ValueError, match="base_url"):
            AdminConfig(base_url=base_url)
