"""Startup banner — mode-aware status output on stderr.

Detects ``NO_COLOR`` / ``TERM`` for safe fallback to plain text.
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from howl._types import HowlMode
    from howl.config import HowlConfig


# ---------------------------------------------------------------------------
# ANSI helpers — respect NO_COLOR (https://no-color.org)
# ---------------------------------------------------------------------------

def _supports_color() -> bool:
    """Return True if the terminal supports ANSI colors."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("TERM") == "dumb":
        return False
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


_COLOR = _supports_color()

_RESET = "\033[0m" if _COLOR else ""
_BOLD = "\033[1m" if _COLOR else ""
_DIM = "\033[2m" if _COLOR else ""
_CYAN = "\033[36m" if _COLOR else ""
_GREEN = "\033[32m" if _COLOR else ""
_YELLOW = "\033[33m" if _COLOR else ""
_VIOLET = "\033[38;5;141m" if _COLOR else ""

_MODE_STYLES: dict[str, tuple[str, str]] = {
    "dev": (_GREEN, "dev"),
    "serve": (_CYAN, "serve"),
}


def _mode_badge(mode: str) -> str:
    color, label = _MODE_STYLES.get(mode, (_DIM, mode))
    return f"{color}[{label}]{_RESET}"


def _clickable_url(url: str) -> str:
    """Wrap *url* in an OSC 8 hyperlink escape if the terminal supports it."""
    if not _COLOR:
        return url
    return f"\033]8;;{url}\033\\{_BOLD}{_CYAN}{url}{_RESET}\033]8;;\033\\"


def print_banner(
    config: HowlConfig,
    entry_count: int,
    mode: HowlMode,
    *,
    product_count: int = 0,
    load_ms: float = 0.0,
    warnings: list[str] | None = None,
) -> None:
    """Print the Howl startup banner to stderr.

    Args:
        config: Resolved HowlConfig.
        entry_count: Number of changelog entries loaded.
        mode: ``"dev"`` or ``"serve"``.
        product_count: Number of products discovered.
        load_ms: Time spent loading content in milliseconds.
        warnings: Content problems to display (ignored metadata, bad dates).

    """
    from howl import __version__

    moon = "\u263e"  # ☾
    header = (
        f"  {_VIOLET}{_BOLD}{moon}{_RESET}  Howl {_DIM}v{__version__}{_RESET}  "
        f"{_mode_badge(mode)}"
    )

    lines: list[str] = [
        "",
        header,
        f"  {_DIM}{'─' * 43}{_RESET}",
    ]

    timing = f" {_DIM}in {load_ms:.0f}ms{_RESET}" if load_ms > 0 else ""
    entries_label = "entry" if entry_count == 1 else "entries"
    products_label = "product" if product_count == 1 else "products"
    lines.append(f"  {_DIM}├─{_RESET} {entry_count} {entries_label} loaded{timing}")
    lines.append(f"  {_DIM}├─{_RESET} {product_count} {products_label}")
    lines.append(f"  {_DIM}├─{_RESET} content: {_DIM}{config.content_path}{_RESET}")
    lines.append(f"  {_DIM}├─{_RESET} templates: {_DIM}{config.templates_path}{_RESET}")

    if mode == "serve":
        workers_label = str(config.workers) if config.workers > 0 else "auto"
        lines.append(f"  {_DIM}└─{_RESET} workers: {workers_label}")
    else:
        lines.append(f"  {_DIM}└─{_RESET} media: {_DIM}{config.media_prefix}/{_RESET}")

    url = f"http://{config.host}:{config.port}"
    lines.append("")
    lines.append(f"  {_clickable_url(url)}")

    if mode == "dev":
        lines.append("")
        lines.append(f"  {_DIM}Watching for changes...{_RESET}")

    if warnings:
        lines.append("")
        lines.extend(f"  {_YELLOW}!{_RESET} {w}" for w in warnings)

    lines.append("")

    print("\n".join(lines), file=sys.stderr)
