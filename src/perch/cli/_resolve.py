"""Admin import resolution: ``"module:attribute"`` strings to Admin instances."""

import importlib
import sys

from perch.app import Admin


def resolve_admin(import_string: str) -> Admin:
    """Resolve an import string to an Admin instance.

    Accepts ``"module:attribute"``; the attribute defaults to ``admin``.
    A callable that is not an Admin is treated as a factory and called.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the resolved object is not an ``Admin``.
    """
    module_path, _, attr_name = import_string.partition(":")
    if not attr_name:
        attr_name = "admin"

    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name)

    if callable(obj) and not isinstance(obj, Admin):
        try:
            obj = obj()
        except Exception as exc:
            msg = f"Factory function {import_string!r} raised an error: {exc}"
            raise TypeError(msg) from exc

    if not isinstance(obj, Admin):
        msg = f"{import_string!r} resolved to {type(obj).__name__}, not a perch.Admin instance"
        raise TypeError(msg)

    return obj


def load_admin(import_string: str) -> Admin:
    """``resolve_admin`` for commands: errors go to stderr and exit 1."""
    try:
        return resolve_admin(import_string)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
