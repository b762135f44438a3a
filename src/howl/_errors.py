"""Howl error hierarchy.

All howl-specific errors inherit from HowlError for easy catching.
"""


class HowlError(Exception):
    """Base error for all howl operations."""


class ConfigError(HowlError):
    """Invalid or missing configuration."""


class ContentError(HowlError):
    """Error in content processing (loading, date parsing, aggregation)."""


class GalleryError(HowlError):
    """Invalid gallery request (unknown action or entry)."""
