"""Store helpers, loaded on first attribute access (``crud.profile`` etc.)."""

from importlib import import_module

__all__ = ["user", "profile", "swap_request"]


def __getattr__(name):
    if name in __all__:
        return import_module(f".{name}", __name__)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
