"""Howl configuration.

HowlConfig is the central configuration object, frozen after creation.
"""

from dataclasses import dataclass, field
from pathlib import Path

from howl._errors import ConfigError

_INVALID_DATE_POLICIES = frozenset({"last", "error"})


@dataclass(frozen=True, slots=True)
class HowlConfig:
    """Configuration for a Howl changelog site.

    Attributes:
        root: Path to the site root directory (contains content/, media/, etc.).
              Always resolved to an absolute path on construction.
        host: Bind address for dev/serve modes.
        port: Bind port for dev/serve modes.
        workers: Number of Pounce workers (0 = auto-detect).
        content_dir: Directory containing one sub-directory of Markdown
            entries per product.
        templates_dir: Directory containing user Kida template overrides.
        static_dir: Directory containing user static assets.
        media_dir: Directory containing ``<product>/images/<file>`` media.
        media_prefix: URL prefix media files are served under.
        meta_filename: Name of the optional per-product metadata file.
        default_order: Sort order for products without an explicit order.
        default_product: Product slug for entries stored at the content root.
        filter_param: Query parameter holding the selected product.
        invalid_dates: ``"last"`` keeps entries with unparseable dates and
            sorts them after every dated entry; ``"error"`` fails the load.
        site_title: Heading shown in the page header.
        home_url: Optional link target for the header logo.

    """

    root: Path = field(default_factory=Path.cwd)
    host: str = "127.0.0.1"
    port: int = 3000
    workers: int = 0
    content_dir: str = "content"
    templates_dir: str = "templates"
    static_dir: str = "static"
    media_dir: str = "media"
    media_prefix: str = "/changelog"
    meta_filename: str = "_meta.json"
    default_order: int = 999
    default_product: str = "default"
    filter_param: str = "product"
    invalid_dates: str = "last"
    site_title: str = "Changelog"
    home_url: str = ""

    def __post_init__(self) -> None:
        # Resolve root to absolute so that watchfiles (which returns
        # absolute paths) can be compared via Path.relative_to().
        if not self.root.is_absolute():
            object.__setattr__(self, "root", self.root.resolve())

        if self.invalid_dates not in _INVALID_DATE_POLICIES:
            msg = (
                f"invalid_dates must be one of {sorted(_INVALID_DATE_POLICIES)}, "
                f"got {self.invalid_dates!r}"
            )
            raise ConfigError(msg)

        if not self.media_prefix.startswith("/"):
            object.__setattr__(self, "media_prefix", "/" + self.media_prefix)
        object.__setattr__(self, "media_prefix", self.media_prefix.rstrip("/") or "/")

    @property
    def content_path(self) -> Path:
        """Absolute path to content directory."""
        return self.root / self.content_dir

    @property
    def templates_path(self) -> Path:
        """Absolute path to templates directory."""
        return self.root / self.templates_dir

    @property
    def static_path(self) -> Path:
        """Absolute path to static assets directory."""
        return self.root / self.static_dir

    @property
    def media_path(self) -> Path:
        """Absolute path to media directory."""
        return self.root / self.media_dir
