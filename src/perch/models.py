"""Model registry: identifiers in URLs to model classes and back."""

import threading
from collections.abc import Iterator

from perch.errors import ConfigurationError, ModelNotFoundError


def model_identifier(model: type) -> str:
    """``__admin_name__`` if the class sets one, else the lower-cased class name."""
    name = getattr(model, "__admin_name__", None)
    if name:
        return str(name)
    return model.__name__.lower()


class ModelRegistry:
    """Models the admin serves, keyed by identifier.

    Usage::

        models = ModelRegistry()
        models.register(Widget)         # served under /widget
        models.resolve("widget")        # Widget
        models.resolve("gadget")        # raises ModelNotFoundError
    """

    __slots__ = ("_by_name", "_lock")

    def __init__(self) -> None:
        self._by_name: dict[str, type] = {}
        self._lock = threading.Lock()

    def register(self, model: type, name: str | None = None) -> type:
        """Register ``model`` under ``name`` (default: its identifier). Returns ``model``."""
        if not isinstance(model, type):
            msg = f"Models must be classes, got {model!r}"
            raise ConfigurationError(msg)
        name = name or model_identifier(model)
        with self._lock:
            existing = self._by_name.get(name)
            if existing is not None and existing is not model:
                msg = f"Model identifier {name!r} is already used by {existing.__qualname__}"
                raise ConfigurationError(msg)
            self._by_name = {**self._by_name, name: model}
        return model

    def resolve(self, name: str) -> type:
        try:
            return self._by_name[name]
        except KeyError:
            raise ModelNotFoundError(name) from None

    def name_of(self, model: type) -> str:
        """Identifier ``model`` is registered under, else its default identifier."""
        for name, registered in self._by_name.items():
            if registered is model:
                return name
        return model_identifier(model)

    def items(self) -> list[tuple[str, type]]:
        return sorted(self._by_name.items())

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._by_name))

    def __len__(self) -> int:
        return len(self._by_name)
