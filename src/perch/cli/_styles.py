"""``perch styles``: print the tag hierarchy as an indented tree."""

import argparse

from perch.cli._resolve import load_admin
from perch.hierarchy import Hierarchy


def tree_lines(hierarchy: Hierarchy, root: str | None = None) -> list[str]:
    """Indented tree of tags. A tag with several parents appears under each."""
    children: dict[str, list[str]] = {}
    for tag in hierarchy.tags():
        for parent in hierarchy.parents(tag):
            children.setdefault(parent, []).append(tag)

    if root is not None:
        roots = [root]
    else:
        roots = sorted(t for t in hierarchy.tags() if not hierarchy.parents(t))

    lines: list[str] = []

    def walk(tag: str, depth: int) -> None:
        lines.append(f"{'  ' * depth}{tag}")
        for child in sorted(children.get(tag, ())):
            walk(child, depth + 1)

    for tag in roots:
        walk(tag, 0)
    return lines


def run_styles(args: argparse.Namespace) -> None:
    admin = load_admin(args.admin)
    for line in tree_lines(admin.site.hierarchy, args.root):
        print(line)
