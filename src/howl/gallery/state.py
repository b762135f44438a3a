"""Gallery state machine — slideshow plus lightbox for one changelog entry.

State is ``(items, active_index, lightbox_open)`` and is owned by whoever
builds the gallery for an entry; nothing is shared between entries.  Every
transition is synchronous and immediately observable.

The lightbox suspends background scrolling while open.  That is modelled as
a ``ScrollLock`` on a ``Viewport``: the viewport's prior overflow setting is
saved on open and restored on close, on ``dispose()`` and on context-manager
exit, so abrupt teardown never leaves the page locked.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING

from howl._errors import GalleryError
from howl.gallery.media import MediaItem, build_media_items

if TYPE_CHECKING:
    from types import TracebackType

    from howl._types import GalleryAction

KEY_ESCAPE = "Escape"
KEY_PREV = "ArrowLeft"
KEY_NEXT = "ArrowRight"

SCROLL_LOCKED = "hidden"


class Viewport:
    """The page-level scroll setting galleries lock while a lightbox is open.

    Several locks may be held at once; the overflow saved by the first one is
    restored when the last one is released.

    Args:
        overflow: Current overflow style of the document body.

    """

    __slots__ = ("_holders", "_saved", "overflow")

    def __init__(self, overflow: str = "") -> None:
        self.overflow = overflow
        self._holders: set[int] = set()
        self._saved: str | None = None

    @property
    def locked(self) -> bool:
        return bool(self._holders)

    def acquire_for(self, holder: int) -> None:
        if not self._holders:
            self._saved = self.overflow
            self.overflow = SCROLL_LOCKED
        self._holders.add(holder)

    def release_for(self, holder: int) -> None:
        if holder not in self._holders:
            return
        self._holders.discard(holder)
        if not self._holders:
            self.overflow = self._saved if self._saved is not None else ""
            self._saved = None


class ScrollLock:
    """Scoped "background scroll disabled" state on a viewport.

    ``release()`` is idempotent and safe to call on every exit path.
    """

    __slots__ = ("_held", "_viewport")

    def __init__(self, viewport: Viewport) -> None:
        self._viewport = viewport
        self._held = False

    @property
    def held(self) -> bool:
        return self._held

    def acquire(self) -> None:
        if self._held:
            return
        self._viewport.acquire_for(id(self))
        self._held = True

    def release(self) -> None:
        if not self._held:
            return
        self._viewport.release_for(id(self))
        self._held = False

    def __enter__(self) -> ScrollLock:
        self.acquire()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()


class GalleryState:
    """Slideshow and lightbox state for one non-empty list of media items.

    Args:
        items: Media items to show; must not be empty.
        active_index: Initially active item.
        lightbox_open: Whether the lightbox starts open.
        viewport: Viewport to lock while the lightbox is open, if any.

    Raises:
        ValueError: If *items* is empty.
        IndexError: If *active_index* is out of range.

    """

    __slots__ = ("_active_index", "_items", "_lightbox_open", "_scroll_lock")

    def __init__(
        self,
        items: Iterable[MediaItem],
        *,
        active_index: int = 0,
        lightbox_open: bool = False,
        viewport: Viewport | None = None,
    ) -> None:
        self._items = tuple(items)
        if not self._items:
            msg = "A gallery needs at least one media item"
            raise ValueError(msg)
        if not 0 <= active_index < len(self._items):
            msg = f"Active index {active_index} out of range for {len(self._items)} items"
            raise IndexError(msg)

        self._active_index = active_index
        self._lightbox_open = False
        self._scroll_lock = ScrollLock(viewport) if viewport is not None else None
        if lightbox_open:
            self.open_lightbox()

    @classmethod
    def restore(
        cls,
        items: Iterable[MediaItem],
        index: int,
        lightbox_open: bool,
        *,
        viewport: Viewport | None = None,
    ) -> GalleryState:
        """Rebuild a state from request parameters; a bad index resets to 0."""
        items = tuple(items)
        if not 0 <= index < len(items):
            index = 0
        return cls(items, active_index=index, lightbox_open=lightbox_open, viewport=viewport)

    # ----- Read-only view -----

    @property
    def items(self) -> tuple[MediaItem, ...]:
        return self._items

    @property
    def active_index(self) -> int:
        return self._active_index

    @property
    def active_item(self) -> MediaItem:
        return self._items[self._active_index]

    @property
    def lightbox_open(self) -> bool:
        return self._lightbox_open

    @property
    def has_multiple(self) -> bool:
        """Whether prev/next controls and thumbnails are shown."""
        return len(self._items) > 1

    @property
    def counter(self) -> str:
        """Position label such as ``2 / 3``."""
        return f"{self._active_index + 1} / {len(self._items)}"

    # ----- Slideshow -----

    def go_prev(self) -> None:
        """Move to the previous item, wrapping to the last."""
        if not self.has_multiple:
            return
        self._active_index = (self._active_index - 1) % len(self._items)

    def go_next(self) -> None:
        """Move to the next item, wrapping to the first."""
        if not self.has_multiple:
            return
        self._active_index = (self._active_index + 1) % len(self._items)

    def select(self, index: int) -> None:
        """Make the thumbnail at *index* active."""
        if not 0 <= index < len(self._items):
            msg = f"Thumbnail index {index} out of range for {len(self._items)} items"
            raise IndexError(msg)
        self._active_index = index

    # ----- Lightbox -----

    def open_lightbox(self) -> None:
        if self._lightbox_open:
            return
        if self._scroll_lock is not None:
            self._scroll_lock.acquire()
        self._lightbox_open = True

    def close_lightbox(self) -> None:
        if not self._lightbox_open:
            return
        self._lightbox_open = False
        if self._scroll_lock is not None:
            self._scroll_lock.release()

    def handle_key(self, key: str) -> bool:
        """Dispatch a key press while the lightbox is open.

        Returns True when the key was consumed (its default action should be
        suppressed).  Escape always closes; arrows navigate only when there
        is more than one item.  Other keys, and any key while the lightbox
        is closed, are ignored.
        """
        if not self._lightbox_open:
            return False
        if key == KEY_ESCAPE:
            self.close_lightbox()
            return True
        if not self.has_multiple:
            return False
        if key == KEY_PREV:
            self.go_prev()
            return True
        if key == KEY_NEXT:
            self.go_next()
            return True
        return False

    def apply(self, action: GalleryAction | str, *, index: int | None = None, key: str = "") -> bool:
        """Apply one named transition (used by the gallery endpoint).

        Returns False only for an ignored key press.

        Raises:
            GalleryError: For an unknown action or a ``select`` without index.
            IndexError: For a ``select`` index outside the item range.

        """
        if action == "key":
            return self.handle_key(key)
        if action == "select":
            if index is None:
                msg = "The select action needs an index"
                raise GalleryError(msg)
            self.select(index)
            return True

        handler = self._ACTIONS.get(action)
        if handler is None:
            msg = f"Unknown gallery action {action!r}"
            raise GalleryError(msg)
        handler(self)
        return True

    _ACTIONS: dict[str, Callable[[GalleryState], None]] = {
        "prev": go_prev,
        "next": go_next,
        "open": open_lightbox,
        "close": close_lightbox,
    }

    # ----- Teardown -----

    def dispose(self) -> None:
        """Release the scroll lock without an explicit close (e.g. unmount)."""
        self._lightbox_open = False
        if self._scroll_lock is not None:
            self._scroll_lock.release()

    def __enter__(self) -> GalleryState:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.dispose()


def build_gallery(
    title: str,
    product_slug: str,
    file_names: Iterable[object],
    *,
    prefix: str = "/changelog",
    viewport: Viewport | None = None,
) -> GalleryState | None:
    """Build a fresh gallery for an entry, or None when it has no usable media."""
    items = build_media_items(title, product_slug, file_names, prefix=prefix)
    if not items:
        return None
    return GalleryState(items, viewport=viewport)
