"""Product registry — the set of products that actually have changelog entries.

A product is identified by the first path segment of its entries.  Each
product may ship an optional ``_meta.json`` next to its entries::

    {"displayName": "Mobile App", "order": 1, "description": "iOS and Android"}

Every field is optional and unknown fields are ignored.  A missing, unreadable
or invalid metadata file never fails discovery: the product falls back to a
name derived from its slug and the default sort order.

Reading metadata (``read_product_meta``) is kept apart from interpreting it
(``parse_product_meta`` / ``resolve_product``) so the latter can be tested
without a filesystem.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, ValidationError

if TYPE_CHECKING:
    from howl.config import HowlConfig
    from howl.content.changelog import ContentEntry
    from howl.content.source import ContentSource
    from howl.observability.collector import StackCollector

DEFAULT_ORDER = 999


class ProductMeta(BaseModel):
    """Optional per-product metadata, as stored in ``_meta.json``."""

    model_config = ConfigDict(
        strict=True, extra="ignore", populate_by_name=True, allow_inf_nan=False,
    )

    display_name: str | None = Field(default=None, alias="displayName")
    order: int | float | None = None
    description: str | None = None


@dataclass(frozen=True, slots=True)
class Product:
    """A product with at least one changelog entry.

    Attributes:
        slug: Identifier taken from the content path.
        display_name: Name shown on tabs and badges.
        order: Sort key; lower sorts first.
        description: Optional blurb shown when the product is selected.

    """

    slug: str
    display_name: str
    order: int | float = DEFAULT_ORDER
    description: str | None = None


def slug_to_display_name(slug: str) -> str:
    """Derive a display name from a slug.

    ``mobile-app`` -> ``Mobile App``.  Only the first character of each
    hyphen-separated word is upper-cased; the rest is kept as written.
    """
    return " ".join(word[:1].upper() + word[1:] for word in slug.split("-"))


def read_product_meta(content_root: Path, slug: str, filename: str = "_meta.json") -> bytes | None:
    """Return the raw metadata bytes for *slug*, or None when absent or unreadable."""
    path = content_root / slug / filename
    try:
        return path.read_bytes()
    except OSError:
        return None


def parse_product_meta(
    raw: bytes | str | None,
    *,
    on_error: Callable[[str], None] | None = None,
) -> ProductMeta | None:
    """Validate raw metadata.

    Returns None for absent input and for anything that is not a JSON object
    matching ``ProductMeta``.  The validation error is reported to *on_error*
    and never raised.
    """
    if raw is None:
        return None
    try:
        return ProductMeta.model_validate_json(raw)
    except ValidationError as exc:
        if on_error is not None:
            on_error(_summarize(exc))
        return None


def _summarize(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    first = errors[0]
    loc = ".".join(str(part) for part in first.get("loc", ())) or "<root>"
    suffix = f" (+{len(errors) - 1} more)" if len(errors) > 1 else ""
    return f"{loc}: {first.get('msg', 'invalid')}{suffix}"


def resolve_product(
    slug: str,
    meta: ProductMeta | None,
    *,
    default_order: int = DEFAULT_ORDER,
) -> Product:
    """Combine a slug with its (optional) metadata, applying defaults."""
    if meta is None:
        meta = ProductMeta()
    return Product(
        slug=slug,
        display_name=meta.display_name or slug_to_display_name(slug),
        order=meta.order if meta.order is not None else default_order,
        description=meta.description,
    )


def sort_products(products: Iterable[Product]) -> list[Product]:
    """Sort by order ascending, then display name."""
    return sorted(products, key=lambda p: (p.order, p.display_name.casefold(), p.display_name))


def discover_products(
    entries: Iterable[ContentEntry],
    reader: Callable[[str], bytes | None],
    *,
    default_order: int = DEFAULT_ORDER,
    on_error: Callable[[str, str], None] | None = None,
) -> list[Product]:
    """Resolve one Product per distinct product slug among *entries*.

    Args:
        entries: Annotated changelog entries.
        reader: Returns raw metadata for a slug, or None when there is none.
        default_order: Order used when metadata does not set one.
        on_error: Called with ``(slug, reason)`` for rejected metadata.

    """
    slugs = dict.fromkeys(entry.product for entry in entries if entry.product)

    products: list[Product] = []
    for slug in slugs:
        report = partial(on_error, slug) if on_error is not None else None
        meta = parse_product_meta(reader(slug), on_error=report)
        products.append(resolve_product(slug, meta, default_order=default_order))
    return sort_products(products)


class ProductRegistry:
    """Discovers products from the content source on every call.

    Args:
        source: Content source supplying changelog records.
        config: Howl configuration (content root, metadata file name, defaults).
        collector: Optional event collector.

    """

    def __init__(
        self,
        source: ContentSource,
        config: HowlConfig,
        collector: StackCollector | None = None,
    ) -> None:
        self._source = source
        self._config = config
        self._collector = collector

    def discover(self) -> list[Product]:
        """Return the products present in the current content, in display order."""
        from howl.content.changelog import load_all

        entries = load_all(
            self._source.records(),
            invalid_dates="last",
            default_product=self._config.default_product,
        )
        products = discover_products(
            entries,
            self._read,
            default_order=self._config.default_order,
            on_error=self._rejected,
        )
        if self._collector is not None:
            self._collector.record_products(tuple(p.slug for p in products))
        return products

    def _read(self, slug: str) -> bytes | None:
        return read_product_meta(self._config.content_path, slug, self._config.meta_filename)

    def _rejected(self, slug: str, reason: str) -> None:
        if self._collector is None:
            return
        path = self._config.content_path / slug / self._config.meta_filename
        self._collector.record_metadata_rejected(slug, str(path), reason)
