"""Perch: admin pages from your data models.

Serves browsable list and detail pages for every registered model, and
lets you override how any page, table or cell renders per page kind and
per model.

Basic usage::

    from perch import Admin, AdminConfig
    from perch.data import MemorySource

    admin = Admin(AdminConfig(title="Shop"), source=MemorySource({Widget: widgets}))
    admin.register_model(Widget)

    admin.site.declare_table_style("table/widget")
    admin.site.use_cell_style("table/widget", in_stock="boolean")
    admin.site.use_table_style("list", Widget, "table/widget")

``admin`` is an ASGI application; serve it with any ASGI server.
"""

# Declare free-threading support (PEP 703)
_Py_mod_gil = 0

__version__ = "0.1.0-dev"
__all__ = [
    "DEFAULT",
    "Admin",
    "AdminConfig",
    "AdminSite",
    "AmbiguousDispatchError",
    "ConfigurationError",
    "Crumb",
    "CycleError",
    "DispatchTable",
    "HTTPError",
    "Hierarchy",
    "LinkAction",
    "ModelNotFoundError",
    "NoHandlerError",
    "NotFound",
    "PageOptions",
    "PerchError",
    "PostAction",
    "RecordNotFoundError",
    "Request",
    "Response",
    "SearchAction",
    "collect_checkbox_input",
]

_LAZY: dict[str, str] = {
    "Admin": "perch.app",
    "AdminConfig": "perch.config",
    "AdminSite": "perch.site",
    "Hierarchy": "perch.hierarchy",
    "DEFAULT": "perch.dispatch",
    "DispatchTable": "perch.dispatch",
    "PageOptions": "perch.page",
    "Crumb": "perch.actions",
    "LinkAction": "perch.actions",
    "PostAction": "perch.actions",
    "SearchAction": "perch.actions",
    "Request": "perch.http.request",
    "Response": "perch.http.response",
    "collect_checkbox_input": "perch.forms",
    "AmbiguousDispatchError": "perch.errors",
    "ConfigurationError": "perch.errors",
    "CycleError": "perch.errors",
    "HTTPError": "perch.errors",
    "ModelNotFoundError": "perch.errors",
    "NoHandlerError": "perch.errors",
    "NotFound": "perch.errors",
    "PerchError": "perch.errors",
    "RecordNotFoundError": "perch.errors",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import perch`` fast while providing a clean top-level API.
    """
    module_name = _LAZY.get(name)
    if module_name is None:
        msg = f"module 'perch' has no attribute {name!r}"
        raise AttributeError(msg)
    import importlib

    return getattr(importlib.import_module(module_name), name)
