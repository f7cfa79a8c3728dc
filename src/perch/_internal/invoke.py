"""Call sync or async hooks uniformly.

View handlers, fetch hooks and lifecycle hooks can be ``def`` or
``async def``. Everything that calls a user-supplied hook goes through
``invoke()`` so the awaitable check lives in one place::

    records = await invoke(site.fetch_list, model, offset, limit, filters, source)
"""

import inspect
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call ``func`` and await the result when it is awaitable."""
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
