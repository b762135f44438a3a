"""Stack collector — one entry point for every howl event.

Implements Pounce's ``LifecycleCollector`` protocol so it can be passed
directly to Pounce workers.  Also provides typed helpers the content layer
and the views call to record what they did.

Thread Safety:
    The collector delegates to ``EventLog`` which is internally locked.
    Safe for concurrent use from multiple Pounce worker threads.

"""

from __future__ import annotations

import threading
from typing import Any

from howl.observability.events import (
    ContentLoaded,
    GalleryTransition,
    InvalidDate,
    MetadataRejected,
    ProductsDiscovered,
    TimelineRendered,
    now_ns,
)
from howl.observability.log import EventLog


class StackCollector:
    """Unified event collector.

    Args:
        log: The EventLog to store events in.

    """

    __slots__ = ("_lock", "_log", "_problems")

    def __init__(self, log: EventLog | None = None) -> None:
        self._log = log if log is not None else EventLog()
        self._lock = threading.Lock()
        # Content problems reported since the last load, keyed by warning text.
        self._problems: dict[str, None] = {}

    @property
    def log(self) -> EventLog:
        """The underlying event log."""
        return self._log

    # ----- Pounce LifecycleCollector protocol -----

    def record(self, event: Any) -> None:
        """Record a Pounce lifecycle event.

        Implements the ``LifecycleCollector.record()`` protocol.
        Pounce events are stored directly since they are frozen dataclasses.

        """
        self._log.append(event)

    # ----- Content events -----

    def record_load(self, path: str, *, records: int = 0, load_ms: float = 0.0) -> None:
        """Record a content (re)load.

        A new load starts a fresh set of content problems.
        """
        with self._lock:
            self._problems.clear()
        self._log.append(
            ContentLoaded(path=path, records=records, load_ms=load_ms, timestamp_ns=now_ns())
        )

    def record_products(self, slugs: tuple[str, ...]) -> None:
        """Record the resolved product set."""
        self._log.append(ProductsDiscovered(slugs=slugs, timestamp_ns=now_ns()))

    def record_metadata_rejected(self, slug: str, path: str, reason: str) -> None:
        """Record a per-product metadata file that was ignored, once per load."""
        self._report(
            f"Ignored {path}: {reason}",
            MetadataRejected(slug=slug, path=path, reason=reason, timestamp_ns=now_ns()),
        )

    def record_invalid_date(self, path: str, value: object) -> None:
        """Record an entry whose date could not be parsed, once per load."""
        self._report(
            f"Unparseable date {str(value)!r} in {path}",
            InvalidDate(path=path, value=str(value), timestamp_ns=now_ns()),
        )

    def _report(self, message: str, event: Any) -> None:
        with self._lock:
            if message in self._problems:
                return
            self._problems[message] = None
        self._log.append(event)

    # ----- View events -----

    def record_timeline(
        self,
        path: str,
        *,
        product: str | None = None,
        entries: int = 0,
        duration_ms: float = 0.0,
    ) -> None:
        """Record a timeline render."""
        self._log.append(
            TimelineRendered(
                path=path,
                product=product or "",
                entries=entries,
                duration_ms=duration_ms,
                timestamp_ns=now_ns(),
            )
        )

    def record_gallery(
        self,
        path: str,
        action: str,
        *,
        active_index: int,
        lightbox_open: bool,
    ) -> None:
        """Record a gallery transition served by the fragment endpoint."""
        self._log.append(
            GalleryTransition(
                path=path,
                action=action,
                active_index=active_index,
                lightbox_open=lightbox_open,
                timestamp_ns=now_ns(),
            )
        )

    # ----- Startup warnings -----

    def warnings(self) -> list[str]:
        """Human-readable warnings for content problems in the current load."""
        with self._lock:
            return list(self._problems)
