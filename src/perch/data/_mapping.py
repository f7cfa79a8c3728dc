"""Row-to-dataclass mapping with type coercion.

SQLite returns strings or integers for columns a dataclass annotates as
``bool`` or ``int``. Fields annotated with a scalar type are coerced;
anything else passes through unchanged.
"""

import dataclasses
import types
from typing import Any, get_args, get_origin

_COERCIBLE: dict[type, Any] = {
    int: lambda v: int(v) if v != "" else 0,
    float: lambda v: float(v) if v != "" else 0.0,
    bool: lambda v: bool(int(v)) if isinstance(v, str) else bool(v),
    str: str,
}


def _coercion_map(cls: type) -> dict[str, type | None]:
    result: dict[str, type | None] = {}
    for f in dataclasses.fields(cls):
        annotation = f.type
        # Unwrap Optional (X | None) to the non-None branch
        if get_origin(annotation) is types.UnionType:
            args = [a for a in get_args(annotation) if a is not type(None)]
            annotation = args[0] if len(args) == 1 else None
        result[f.name] = annotation if annotation in _COERCIBLE else None
    return result


def _coerce(value: Any, target: type | None) -> Any:
    if target is None or value is None or isinstance(value, target):
        return value
    return _COERCIBLE[target](value)


def map_row(model: type, row: dict[str, Any]) -> Any:
    """Build a ``model`` instance from a row, or return the row for non-dataclasses.

    Columns without a matching field are dropped.
    """
    if not dataclasses.is_dataclass(model):
        return row
    coercion = _coercion_map(model)
    return model(**{k: _coerce(v, coercion[k]) for k, v in row.items() if k in coercion})
