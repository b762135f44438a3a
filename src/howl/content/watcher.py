"""File watcher — keeps the dev server's content fresh.

Monitors content files, metadata, templates, media and configuration.  In
dev mode every content change invalidates the content source so the next
request re-reads the changelog from disk.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from watchfiles import Change

from howl.config_loader import CONFIG_FILENAMES

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from howl.config import HowlConfig


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    """A file change detected by the watcher.

    Attributes:
        path: Absolute path to the changed file.
        kind: Type of filesystem change.
        category: What kind of file changed.

    """

    path: Path
    kind: Literal["created", "modified", "deleted"]
    category: Literal["content", "template", "config", "asset", "media"]


# Mapping from watchfiles Change enum to our kind literals.
_CHANGE_KIND_MAP: dict[Change, Literal["created", "modified", "deleted"]] = {
    Change.added: "created",
    Change.modified: "modified",
    Change.deleted: "deleted",
}


def categorize_change(path: Path, config: HowlConfig) -> str | None:
    """Determine the category of a changed file based on its location.

    Returns None if the file doesn't belong to any watched category.

    """
    try:
        rel = path.relative_to(config.root)
    except ValueError:
        return None

    parts = rel.parts
    if not parts:
        return None

    if len(parts) == 1 and parts[0] in CONFIG_FILENAMES:
        return "config"

    first_dir = parts[0]

    if first_dir == config.content_dir:
        return "content"
    if first_dir == config.templates_dir:
        return "template"
    if first_dir == config.static_dir:
        return "asset"
    if first_dir == config.media_dir:
        return "media"

    return None


class ContentWatcher:
    """Watches the site root and yields categorized change events.

    Wraps ``watchfiles.awatch`` so the watcher lives inside the server's
    event loop; cancelling the consuming task tears it down.

    """

    def __init__(self, config: HowlConfig) -> None:
        self._config = config
        self._running = False

    @property
    def is_running(self) -> bool:
        """Whether ``changes()`` is currently being iterated."""
        return self._running

    async def changes(self) -> AsyncIterator[ChangeEvent]:
        """Async iterator of ChangeEvent objects for files under the root."""
        from watchfiles import awatch

        self._running = True
        try:
            async for raw_changes in awatch(self._config.root, debounce=300, step=100):
                for change_type, path_str in sorted(raw_changes, key=lambda c: c[1]):
                    path = Path(path_str)
                    category = categorize_change(path, self._config)
                    if category is None:
                        continue
                    kind = _CHANGE_KIND_MAP.get(change_type, "modified")
                    yield ChangeEvent(path=path, kind=kind, category=category)  # type: ignore[arg-type]
        finally:
            self._running = False
