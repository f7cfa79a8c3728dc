"""``perch routes``: list compiled admin routes.

Prints METHOD, PATH, PAGE KIND and MODEL for every route the registry
compiles, model-specific routes first.
"""

import argparse

from perch.cli._resolve import load_admin
from perch.routing.registry import ViewEndpoint


def format_routes(rows: list[tuple[str, str, str, str]]) -> list[str]:
    headers = ("METHOD", "PATH", "PAGE KIND", "MODEL")
    widths = [max(len(h), *(len(r[i]) for r in rows)) for i, h in enumerate(headers)]
    fmt = "  ".join(f"{{:<{w}}}" for w in widths[:-1]) + "  {}"
    lines = [fmt.format(*headers), "-" * min(sum(widths) + 6, 80)]
    lines.extend(fmt.format(*row) for row in rows)
    return lines


def run_routes(args: argparse.Namespace) -> None:
    """List compiled routes for an admin."""
    admin = load_admin(args.admin)
    routes = admin.routes.compiled().routes
    if not routes:
        print("No routes registered.")
        return

    rows: list[tuple[str, str, str, str]] = []
    for route in routes:
        endpoint: ViewEndpoint = route.endpoint
        prefix = admin.config.base_url
        rows.append(
            (
                ", ".join(sorted(route.methods)),
                f"{prefix}{route.path}",
                endpoint.entry.page_kind,
                endpoint.model_name or "*",
            )
        )
    for line in format_routes(rows):
        print(line)
