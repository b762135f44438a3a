"""Product filter — the selected product as shareable URL state.

The selection lives in a single query parameter (``product`` by default).
Changing it produces a new URL that keeps every other parameter where it
was; navigating to that URL re-renders the timeline for the new selection.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from urllib.parse import urlencode

DEFAULT_PARAM = "product"


@dataclass(frozen=True, slots=True)
class FilterState:
    """Request path plus ordered query parameters.

    Attributes:
        path: Request path (e.g. ``/``).
        params: Query parameters as ``(name, value)`` pairs, in order.
        param: Name of the parameter holding the product selection.

    """

    path: str = "/"
    params: tuple[tuple[str, str], ...] = ()
    param: str = DEFAULT_PARAM

    @classmethod
    def from_query(
        cls,
        path: str,
        pairs: Iterable[tuple[str, str]],
        *,
        param: str = DEFAULT_PARAM,
    ) -> FilterState:
        return cls(path=path or "/", params=tuple((str(k), str(v)) for k, v in pairs), param=param)

    @property
    def product(self) -> str | None:
        """The selected product slug, or None for all products."""
        for name, value in self.params:
            if name == self.param:
                return value or None
        return None

    def set_product(self, slug: str | None) -> FilterState:
        """Return the state selecting *slug* (None removes the parameter).

        An existing product parameter is replaced in place; otherwise the new
        one is appended.  Other parameters are untouched.
        """
        params: list[tuple[str, str]] = []
        placed = False
        for name, value in self.params:
            if name != self.param:
                params.append((name, value))
            elif slug is not None and not placed:
                params.append((name, slug))
                placed = True
        if slug is not None and not placed:
            params.append((self.param, slug))
        return replace(self, params=tuple(params))

    @property
    def query_string(self) -> str:
        return urlencode(self.params)

    @property
    def url(self) -> str:
        """Path plus query string, or the bare path when no parameters remain."""
        query = self.query_string
        return f"{self.path}?{query}" if query else self.path
