"""Unified event model for howl observability.

Defines event types for the content layer, the timeline view, and the
gallery endpoint.  Pounce lifecycle events are stored alongside them
unchanged.

All events are frozen dataclasses with:
- ``timestamp_ns``: Monotonic nanosecond timestamp
- Descriptive fields for the specific event type

Thread Safety:
    All events are frozen (immutable) and safe to share across threads.

"""

import time
from dataclasses import dataclass


# ---------------------------------------------------------------------------
# Content events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ContentLoaded:
    """The content source (re)loaded pages from disk.

    Attributes:
        path: Absolute path to the content directory.
        records: Number of changelog records produced.
        load_ms: Time spent discovering and parsing content in milliseconds.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    records: int
    load_ms: float
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class ProductsDiscovered:
    """The product registry resolved the current product set.

    Attributes:
        slugs: Product slugs in display order.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    slugs: tuple[str, ...]
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class MetadataRejected:
    """A per-product metadata file failed validation and was ignored.

    Attributes:
        slug: Product slug the metadata belongs to.
        path: Path to the rejected metadata file.
        reason: Validation error summary.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    slug: str
    path: str
    reason: str
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class InvalidDate:
    """A changelog entry carried a date that could not be parsed.

    Attributes:
        path: Content path of the entry (relative to the content root).
        value: The raw frontmatter value, as text.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    value: str
    timestamp_ns: int


# ---------------------------------------------------------------------------
# View events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class TimelineRendered:
    """The timeline page was built for a request.

    Attributes:
        path: Request path.
        product: Selected product slug, or empty for all products.
        entries: Number of entries rendered.
        duration_ms: Time spent building the context in milliseconds.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    product: str
    entries: int
    duration_ms: float
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class GalleryTransition:
    """The gallery endpoint applied a transition.

    Attributes:
        path: URL of the changelog entry owning the gallery.
        action: Requested action (``prev``, ``next``, ``key``, ...).
        active_index: Active index after the transition.
        lightbox_open: Lightbox flag after the transition.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    action: str
    active_index: int
    lightbox_open: bool
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

type StackEvent = (
    ContentLoaded
    | ProductsDiscovered
    | MetadataRejected
    | InvalidDate
    | TimelineRendered
    | GalleryTransition
)


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()
