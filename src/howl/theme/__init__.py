"""Howl theme loader — user overrides first, bundled theme second.

A template or asset found under the site's ``templates/`` or ``static/``
directory wins over the bundled file of the same name.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from howl.config import HowlConfig


def _bundled_theme_path() -> Path:
    """Return the absolute path to the bundled default theme."""
    return Path(__file__).parent / "default"


def _with_fallback(user_dir: Path, bundled: Path) -> list[Path]:
    # The user directory is listed even if missing; it may appear later in dev mode.
    if user_dir == bundled:
        return [bundled]
    return [user_dir, bundled]


def get_template_dirs(config: HowlConfig) -> list[Path]:
    """Template directories in priority order: ``[user, bundled]``."""
    return _with_fallback(config.templates_path, _bundled_theme_path() / "templates")


def get_asset_dirs(config: HowlConfig) -> list[Path]:
    """Static asset directories in priority order: ``[user, bundled]``."""
    return _with_fallback(config.static_path, _bundled_theme_path() / "assets")
