"""Media items — changelog frontmatter file names made display-ready."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from howl._types import MediaType

VIDEO_SUFFIXES: tuple[str, ...] = (".mp4", ".webm")


@dataclass(frozen=True, slots=True)
class MediaItem:
    """One image or video of a changelog entry.

    Attributes:
        src: Public URL of the file.
        type: ``"image"`` or ``"video"``.
        file_name: File name as written in the frontmatter.
        alt: Alt text, numbered from 1 over the kept items.

    """

    src: str
    type: MediaType
    file_name: str
    alt: str

    @property
    def is_video(self) -> bool:
        return self.type == "video"


def is_video_file_name(file_name: str) -> bool:
    """Whether *file_name* has a supported video extension (case-insensitive)."""
    return file_name.lower().endswith(VIDEO_SUFFIXES)


def build_media_items(
    title: str,
    product_slug: str,
    file_names: Iterable[object],
    *,
    prefix: str = "/changelog",
) -> list[MediaItem]:
    """Turn frontmatter file names into media items.

    Names that are not strings or are blank after trimming are dropped
    before numbering, so alt texts run 1..n over the kept names.  Files are
    expected at ``{prefix}/{product_slug}/images/{file_name}``; existence is
    not checked.
    """
    names = [name for name in file_names if isinstance(name, str) and name.strip()]
    base = prefix.rstrip("/")
    return [
        MediaItem(
            src=f"{base}/{product_slug}/images/{name}",
            type="video" if is_video_file_name(name) else "image",
            file_name=name,
            alt=f"{title} - Media {position}",
        )
        for position, name in enumerate(names, start=1)
    ]
