"""Service package public API definitions.

The service implementations import the store, which imports the backend
client, which in turn imports ``queuetrack.services.exceptions``. Importing
the implementations eagerly here would make that chain circular, so they are
resolved lazily on first attribute access.
"""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING, Any

__all__ = [
    "AppointmentService",
    "CatalogService",
]

_SERVICE_MODULES = {
    "AppointmentService": "appointment",
    "CatalogService": "directory",
}


def __getattr__(name: str) -> Any:
    if name not in _SERVICE_MODULES:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module = import_module(f".{_SERVICE_MODULES[name]}", __name__)
    attr = getattr(module, name)
    globals()[name] = attr
    return attr


if TYPE_CHECKING:  # pragma: no cover - import for static analysis only
    from .appointment import AppointmentService as AppointmentService
    from .directory import CatalogService as CatalogService
