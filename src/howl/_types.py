"""Shared type definitions for howl."""

from typing import Literal

# Mode of operation
type HowlMode = Literal["dev", "serve"]

# Classification of a gallery media file
type MediaType = Literal["image", "video"]

# What to do with an entry whose date cannot be parsed
type InvalidDatePolicy = Literal["last", "error"]

# Gallery transition requested by the fragment endpoint
type GalleryAction = Literal["prev", "next", "select", "open", "close", "key"]
