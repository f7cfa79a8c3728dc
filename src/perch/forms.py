"""Form input helpers."""

from collections.abc import Mapping
from typing import Any

CHECKBOX_PREFIX = "checkbox__"


def collect_checkbox_input(params: Mapping[str, Any]) -> dict[str, Any]:
    """Fold checkbox fields into one set per group.

    A checked box named ``checkbox__<group>__<value>`` becomes ``value``
    in the set under ``group``. Other keys pass through unchanged::

        collect_checkbox_input(
            {"state": "trial", "checkbox__features__sso": "on", "checkbox__features__hosting": "on"}
        )
        # {"state": "trial", "features": {"sso", "hosting"}}

    Unchecked boxes are not submitted by browsers, so each group is the
    set of checked values.
    """
    result: dict[str, Any] = {}
    groups: dict[str, set[str]] = {}
    for key, value in params.items():
        if key.startswith(CHECKBOX_PREFIX):
            group, sep, option = key[len(CHECKBOX_PREFIX) :].partition("__")
            if sep and group and option:
                groups.setdefault(group, set()).add(option)
                continue
        result[key] = value
    result.update(groups)
    return result
