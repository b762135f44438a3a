"""Content source — Bengal pages as plain changelog records.

Bengal discovers the Markdown files under the content directory and Patitas
renders their bodies.  This module turns the resulting pages into
``ContentRecord`` values that the rest of howl works with, so the product
registry and the aggregator never touch Bengal objects directly.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from howl._errors import ConfigError

if TYPE_CHECKING:
    from bengal.core.site import Site

    from howl.config import HowlConfig
    from howl.observability.collector import StackCollector


@dataclass(frozen=True, slots=True)
class ContentRecord:
    """One changelog page as supplied by the content source.

    Attributes:
        path: POSIX path relative to the content root
            (e.g. ``mobile-app/2024-03-01.md``).
        url: Site-relative URL of the page; unique per record.
        data: Read-only frontmatter mapping.
        html: Rendered Markdown body.

    """

    path: str
    url: str
    data: Mapping[str, Any]
    html: str = ""


def make_record(
    path: str,
    data: Mapping[str, Any],
    *,
    url: str | None = None,
    html: str = "",
) -> ContentRecord:
    """Build a ContentRecord, deriving the URL from the path when absent."""
    if url is None:
        url = _url_from_path(path)
    return ContentRecord(path=path, url=url, data=MappingProxyType(dict(data)), html=html)


def _url_from_path(path: str) -> str:
    stem = PurePosixPath(path).with_suffix("")
    return "/" + "/".join(stem.parts) + "/"


def parse_pages(site: Site) -> None:
    """Parse markdown content for all discovered pages.

    Bengal separates discovery from parsing.  Rather than pulling in the
    full ``RenderingPipeline``, we use Patitas' ``Markdown`` class directly
    with the table extension enabled.
    """
    from patitas import Markdown

    md = Markdown(plugins=["table"])

    for page in site.pages:
        raw = getattr(page, "_raw_content", "") or ""
        if not raw:
            continue
        page.html_content = md(raw)


def load_site(root: Path) -> Site:
    """Load a Bengal site from the given root directory.

    Loads configuration via ``Site.from_config()``, discovers content via
    ``ContentOrchestrator`` and renders page bodies with Patitas.

    Raises:
        ConfigError: If the site cannot be loaded (missing config, bad structure).

    """
    try:
        from bengal.core.site import Site
        from bengal.orchestration.content import ContentOrchestrator

        site = Site.from_config(root)
        ContentOrchestrator(site).discover()
        parse_pages(site)
        return site
    except Exception as exc:
        msg = f"Failed to load Bengal site from {root}: {exc}"
        raise ConfigError(msg) from exc


def records_from_pages(pages: Iterable[Any], content_root: Path) -> tuple[ContentRecord, ...]:
    """Convert Bengal pages into content records.

    Pages outside *content_root* (generated pages) and files whose name
    starts with ``_`` (section indexes) are skipped.  Records are returned
    in storage-path order.
    """
    records: list[ContentRecord] = []
    for page in pages:
        source_path = getattr(page, "source_path", None)
        if not source_path:
            continue
        source_path = Path(source_path)
        if source_path.name.startswith("_"):
            continue
        try:
            relative = source_path.relative_to(content_root)
        except ValueError:
            continue

        metadata = getattr(page, "metadata", None) or {}
        href = getattr(page, "href", None)
        records.append(
            make_record(
                relative.as_posix(),
                metadata,
                url=str(href) if href else None,
                html=getattr(page, "html_content", None) or "",
            )
        )
    records.sort(key=lambda r: r.path)
    return tuple(records)


class ContentSource:
    """Supplies the current changelog records.

    Loads lazily on first use and keeps the snapshot until ``invalidate()``
    is called (the dev-mode watcher does this on every content change).
    Consumers must not cache what ``records()`` returns.

    Args:
        config: Howl configuration.
        loader: Callable returning a Bengal ``Site`` for a root directory.
        collector: Optional event collector for load events.

    """

    def __init__(
        self,
        config: HowlConfig,
        *,
        loader: Callable[[Path], Any] = load_site,
        collector: StackCollector | None = None,
    ) -> None:
        self._config = config
        self._loader = loader
        self._collector = collector
        self._lock = threading.Lock()
        self._records: tuple[ContentRecord, ...] | None = None
        self._loads = 0

    @property
    def content_root(self) -> Path:
        """Absolute path to the content directory."""
        return self._config.content_path

    @property
    def load_count(self) -> int:
        """Number of times content was loaded from disk."""
        return self._loads

    def records(self) -> tuple[ContentRecord, ...]:
        """Return the current records, loading from disk if stale."""
        with self._lock:
            if self._records is None:
                self._records = self._load()
            return self._records

    def invalidate(self) -> None:
        """Drop the current snapshot; the next ``records()`` call reloads."""
        with self._lock:
            self._records = None

    def _load(self) -> tuple[ContentRecord, ...]:
        t0 = time.perf_counter()
        site = self._loader(self._config.root)
        records = records_from_pages(site.pages, self.content_root)
        self._loads += 1
        if self._collector is not None:
            self._collector.record_load(
                str(self.content_root),
                records=len(records),
                load_ms=(time.perf_counter() - t0) * 1000,
            )
        return records
