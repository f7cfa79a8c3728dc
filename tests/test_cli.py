"""Tests for perch.cli — entrypoint, admin resolution, routes and styles."""

import sys
import types

import pytest
from conftest import Widget

from perch.app import Admin
from perch.cli import main
from perch.cli._resolve import resolve_admin
from perch.cli._routes import format_routes
from perch.cli._styles import tree_lines
from perch.config import AdminConfig
from perch.hierarchy import Hierarchy


@pytest.fixture
def _fake_admin_module(monkeypatch: pytest.MonkeyPatch) -> None:
    """Register a fake module with perch admins on sys.modules."""
    admin = Admin(AdminConfig(base_url="/admin"), models=[Widget])

    @admin.view("restock", "POST", "/{id}/restock", Widget)
    def restock(page_kind, model, request, admin):
        return "ok"

    admin.site.declare_table_style("table/widget")

    mod = types.ModuleType("_fake_perch_admin")
    mod.admin = admin  # type: ignore[attr-defined]
    mod.make_admin = lambda: Admin()  # type: ignore[attr-defined]
    mod.broken = lambda: 1 / 0  # type: ignore[attr-defined]
    mod.not_an_admin = "just a string"  # type: ignore[attr-defined]
    monkeypatch.setitem(sys.modules, "_fake_perch_admin", mod)


class TestCLIHelp:
    def test_help_exits_zero(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"])
        assert exc_info.value.code == 0

    def test_no_command_prints_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 0
        assert "routes" in capsys.readouterr().out

    def test_routes_missing_admin(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes"])
        assert exc_info.value.code == 2


@pytest.mark.usefixtures("_fake_admin_module")
class TestResolveAdmin:
    def test_default_attribute(self) -> None:
        assert isinstance(resolve_admin("_fake_perch_admin"), Admin)

    def test_factory(self) -> None:
        assert isinstance(resolve_admin("_fake_perch_admin:make_admin"), Admin)

    def test_failing_factory(self) -> None:
        with pytest.raises(TypeError, match="raised an error"):
            resolve_admin("_fake_perch_admin:broken")

    def test_wrong_type(self) -> None:
        with pytest.raises(TypeError, match=r"not a perch\.Admin instance"):
            resolve_admin("_fake_perch_admin:not_an_admin")

    def test_missing_module(self) -> None:
        with pytest.raises(ModuleNotFoundError):
            resolve_admin("nonexistent_module_xyz:admin")

    def test_missing_attribute_exits_one(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes", "_fake_perch_admin:nope"])
        assert exc_info.value.code == 1
        assert "Error:" in capsys.readouterr().err


@pytest.mark.usefixtures("_fake_admin_module")
class TestRoutesCommand:
    def test_lists_compiled_routes(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["routes", "_fake_perch_admin"])
        lines = capsys.readouterr().out.splitlines()
        assert lines[0].split() == ["METHOD", "PATH", "PAGE", "KIND", "MODEL"]
        rows = [line.split() for line in lines[2:]]
        assert rows == [
            ["POST", "/admin/widget/{id}/restock", "restock", "widget"],
            ["GET", "/admin/{model}", "list", "*"],
            ["GET", "/admin/{model}/{id}", "detail", "*"],
        ]

    def test_format_routes_aligns_columns(self) -> None:
        lines = format_routes([("GET", "/{model}", "list", "*"), ("POST", "/x", "x", "widget")])
        assert lines[0].index("PAGE KIND") == lines[2].index("list") == 18
        assert lines[3][18] == "x"
        assert set(lines[1]) == {"-"}


@pytest.mark.usefixtures("_fake_admin_module")
class TestStylesCommand:
    def test_prints_tree(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["styles", "_fake_perch_admin", "--root", "table-style"])
        assert capsys.readouterr().out.splitlines() == [
            "table-style",
            "  table/default",
            "  table/widget",
        ]

    def test_tree_lines_repeats_shared_children(self) -> None:
        h = Hierarchy()
        h.derive("b", "a")
        h.derive("c", "a")
        h.derive("d", "b")
        h.derive("d", "c")
        assert tree_lines(h) == ["a", "  b", "    d", "  c", "    d"]

    def test_tree_lines_from_root(self) -> None:
        h = Hierarchy()
        h.derive("b", "a")
        h.derive("x", "y")
        assert tree_lines(h, "y") == ["y", "  x"]
