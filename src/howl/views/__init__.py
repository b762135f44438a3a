"""Presentation layer — filter state, timeline context and routes."""

from howl.views.filters import FilterState
from howl.views.timeline import (
    GalleryView,
    Tab,
    TimelineItem,
    TimelineRouter,
    build_tabs,
    build_timeline_context,
    format_entry_date,
)

__all__ = [
    "FilterState",
    "GalleryView",
    "Tab",
    "TimelineItem",
    "TimelineRouter",
    "build_tabs",
    "build_timeline_context",
    "format_entry_date",
]
