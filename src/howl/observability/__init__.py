"""Observability — structured events for the changelog runtime.

Aggregates events from:
- **Pounce**: Connection lifecycle (open, request, response, disconnect, close)
- **Content layer**: Loads, product discovery, rejected metadata, bad dates
- **Views**: Timeline renders and gallery transitions

All events are frozen dataclasses with nanosecond timestamps, safe for
concurrent production from multiple worker threads.

Quick Start:
    >>> from howl.observability import StackCollector, EventLog
    >>> log = EventLog()
    >>> collector = StackCollector(log)
    >>> collector.record_products(("mobile-app", "web"))

"""

from howl.observability.collector import StackCollector
from howl.observability.events import (
    ContentLoaded,
    GalleryTransition,
    InvalidDate,
    MetadataRejected,
    ProductsDiscovered,
    StackEvent,
    TimelineRendered,
    now_ns,
)
from howl.observability.log import EventLog

__all__ = [
    "ContentLoaded",
    "EventLog",
    "GalleryTransition",
    "InvalidDate",
    "MetadataRejected",
    "ProductsDiscovered",
    "StackCollector",
    "StackEvent",
    "TimelineRendered",
    "now_ns",
]
