"""Path parameter patterns.

Built-in converters for route path segments like ``{id:int}``. Values
stay strings in ``path_params``; the pattern only restricts what matches.
"""

CONVERTERS: dict[str, str] = {
    "str": r"[^/]+",
    "int": r"\d+",
    "float": r"\d+(?:\.\d+)?",
    "path": r".+",
}
