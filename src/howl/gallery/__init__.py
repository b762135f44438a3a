"""Media gallery — slideshow and lightbox for changelog media.

Builds display-ready media items from frontmatter file names and drives the
per-entry gallery state (active item, lightbox, keyboard, scroll lock).
"""

from howl.gallery.media import MediaItem, build_media_items, is_video_file_name
from howl.gallery.state import (
    KEY_ESCAPE,
    KEY_NEXT,
    KEY_PREV,
    GalleryState,
    ScrollLock,
    Viewport,
    build_gallery,
)

__all__ = [
    "KEY_ESCAPE",
    "KEY_NEXT",
    "KEY_PREV",
    "GalleryState",
    "MediaItem",
    "ScrollLock",
    "Viewport",
    "build_gallery",
    "build_media_items",
    "is_video_file_name",
]
