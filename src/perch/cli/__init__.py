"""Perch CLI: inspect an admin's routes and style hierarchy.

Entry point registered as ``perch`` in ``pyproject.toml``::

    [project.scripts]
    perch = "perch.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``perch`` command."""
    parser = argparse.ArgumentParser(
        prog="perch",
        description="Perch: admin pages from your data models.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- perch routes -----------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List compiled admin routes")
    routes_parser.add_argument("admin", help="Import string (e.g. myapp:admin)")

    # -- perch styles -----------------------------------------------------
    styles_parser = subparsers.add_parser("styles", help="Show the style hierarchy")
    styles_parser.add_argument("admin", help="Import string (e.g. myapp:admin)")
    styles_parser.add_argument(
        "--root",
        default=None,
        help="Only show tags below this one (e.g. table-style)",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        from perch.cli._routes import run_routes

        run_routes(args)
    elif args.command == "styles":
        from perch.cli._styles import run_styles

        run_styles(args)
