"""Changelog aggregator — annotate records with their product, filter and sort.

Annotation is a pure map: each ``ContentRecord`` becomes a new
``ContentEntry`` carrying the derived ``product`` slug.  Queries return new
lists and never reorder or mutate what the content source handed out.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import UTC, date, datetime, time
from pathlib import PurePosixPath
from typing import TYPE_CHECKING, Any

from howl._errors import ContentError

if TYPE_CHECKING:
    from howl._types import InvalidDatePolicy
    from howl.config import HowlConfig
    from howl.content.source import ContentRecord, ContentSource
    from howl.observability.collector import StackCollector

DEFAULT_PRODUCT = "default"


@dataclass(frozen=True, slots=True)
class ContentEntry:
    """A changelog entry tagged with its owning product.

    Attributes:
        url: Unique page URL.
        path: Storage path relative to the content root.
        title: Entry title (file stem when the frontmatter has none).
        date: Publication instant, timezone-aware; None when unparseable.
        product: Product slug derived from ``path``.
        description: Optional summary line.
        version: Optional version label.
        tags: Tag strings, in frontmatter order.
        images: Raw media file names, in frontmatter order.
        html: Rendered body.

    """

    url: str
    path: str
    title: str
    date: datetime | None
    product: str
    description: str | None = None
    version: str | None = None
    tags: tuple[str, ...] = ()
    images: tuple[Any, ...] = ()
    html: str = ""


def product_from_path(path: str, default: str = DEFAULT_PRODUCT) -> str:
    """Return the product slug owning a content path.

    ``mobile-app/2024-03-01.md`` -> ``mobile-app``; a file directly in the
    content root belongs to *default*.
    """
    parts = PurePosixPath(path).parts
    if len(parts) > 1:
        return parts[0]
    return default


def parse_entry_date(value: object) -> datetime | None:
    """Parse a frontmatter date into a timezone-aware datetime.

    Accepts ``date`` and ``datetime`` objects (YAML produces these) and
    ISO-8601 strings.  Naive values are taken as UTC.  Returns None for
    anything else.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time())
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _optional_text(value: object) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def _string_tuple(value: object) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    if isinstance(value, list | tuple):
        return tuple(str(item) for item in value)
    return ()


def annotate(
    record: ContentRecord,
    *,
    invalid_dates: InvalidDatePolicy = "last",
    default_product: str = DEFAULT_PRODUCT,
    on_invalid_date: Callable[[str, object], None] | None = None,
) -> ContentEntry:
    """Build a ContentEntry from a record, adding its product slug.

    Raises:
        ContentError: When the date cannot be parsed and *invalid_dates*
            is ``"error"``.

    """
    data = record.data
    raw_date = data.get("date")
    when = parse_entry_date(raw_date)
    if when is None:
        if invalid_dates == "error":
            msg = f"Unparseable date {raw_date!r} in {record.path}"
            raise ContentError(msg)
        if on_invalid_date is not None:
            on_invalid_date(record.path, raw_date)

    images = data.get("images")
    return ContentEntry(
        url=record.url,
        path=record.path,
        title=str(data.get("title") or PurePosixPath(record.path).stem),
        date=when,
        product=product_from_path(record.path, default_product),
        description=_optional_text(data.get("description")),
        version=_optional_text(data.get("version")),
        tags=_string_tuple(data.get("tags")),
        images=tuple(images) if isinstance(images, list | tuple) else (),
        html=record.html,
    )


def load_all(
    records: Iterable[ContentRecord],
    *,
    invalid_dates: InvalidDatePolicy = "last",
    default_product: str = DEFAULT_PRODUCT,
    on_invalid_date: Callable[[str, object], None] | None = None,
) -> tuple[ContentEntry, ...]:
    """Annotate every record with its product slug."""
    return tuple(
        annotate(
            record,
            invalid_dates=invalid_dates,
            default_product=default_product,
            on_invalid_date=on_invalid_date,
        )
        for record in records
    )


def _newest_first(entry: ContentEntry) -> tuple[int, float, str, str]:
    # Undated entries after every dated one; equal dates by URL, then path.
    if entry.date is None:
        return (1, 0.0, entry.url, entry.path)
    return (0, -entry.date.timestamp(), entry.url, entry.path)


def query_by_product(entries: Sequence[ContentEntry], product: str | None) -> list[ContentEntry]:
    """Entries of *product* (all entries when None or empty), newest first."""
    selected = [e for e in entries if e.product == product] if product else list(entries)
    return sorted(selected, key=_newest_first)


class ChangelogAggregator:
    """Loads and queries changelog entries from the content source.

    Every call recomputes from ``source.records()``; nothing is cached here.

    Args:
        source: Content source supplying changelog records.
        config: Howl configuration (date policy, default product).
        collector: Optional event collector for unparseable dates.

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

    def load_all(self) -> tuple[ContentEntry, ...]:
        """Every entry, annotated, in storage order."""
        on_invalid = self._collector.record_invalid_date if self._collector is not None else None
        return load_all(
            self._source.records(),
            invalid_dates=self._config.invalid_dates,  # type: ignore[arg-type]
            default_product=self._config.default_product,
            on_invalid_date=on_invalid,
        )

    def query_by_product(self, product: str | None) -> list[ContentEntry]:
        """Entries of *product* (or all), newest first."""
        return query_by_product(self.load_all(), product)

    def find(self, url: str) -> ContentEntry | None:
        """Return the entry published at *url*, if any."""
        for entry in self.load_all():
            if entry.url == url:
                return entry
        return None
