"""Howl — a multi-product changelog site for Python 3.14t.

Reads Markdown changelog entries stored one directory per product, and
serves them as a single reverse-chronological timeline with product tabs
and per-entry media galleries.

Quick start::

    import howl

    howl.dev("my-changelog/")

Two modes::

    howl.dev("my-changelog/")     # Local development, content reloads on change
    howl.serve("my-changelog/")   # Live production server

Built on the Bengal ecosystem:

    pounce      ASGI server       (serves apps)
    chirp       Web framework     (serves HTML)
    kida        Template engine   (renders HTML)
    patitas     Markdown parser   (parses content)
    bengal      Static site gen   (discovers content)

"""

# PEP 703: Declare this module as free-threading safe
_Py_mod_gil = 0

__version__ = "0.1.0"
__all__ = [
    "HowlConfig",
    "__version__",
    "dev",
    "serve",
]


def __getattr__(name: str) -> object:
    """Lazy imports for the public API; keeps ``import howl`` fast."""
    if name == "HowlConfig":
        from howl.config import HowlConfig

        return HowlConfig

    if name == "dev":
        from howl.app import dev

        return dev

    if name == "serve":
        from howl.app import serve

        return serve

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
