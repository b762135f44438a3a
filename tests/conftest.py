"""Shared test fixtures for howl."""

from __future__ import annotations

from datetime import date
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest

from howl.config import HowlConfig
from howl.content.source import ContentRecord, ContentSource, make_record
from howl.observability import StackCollector


@pytest.fixture
def tmp_site(tmp_path: Path) -> Path:
    """Create a minimal changelog site for testing.

    Two products (``mobile-app`` with metadata, ``web`` without), a section
    index that is not an entry, one media file, and user template/static dirs.
    """
    content = tmp_path / "content"
    content.mkdir()
    (content / "_index.md").write_text("---\ntitle: Changelog\n---\n")

    mobile = content / "mobile-app"
    mobile.mkdir()
    (mobile / "_meta.json").write_text(
        '{"displayName": "Mobile App", "order": 1, "description": "iOS and Android"}'
    )
    (mobile / "faster-login.md").write_text(
        "---\ntitle: Faster login\ndate: 2024-03-01\n"
        "images: [login.png, walkthrough.mp4]\n---\n\nSign in with one tap.\n"
    )

    web = content / "web"
    web.mkdir()
    (web / "dark-mode.md").write_text(
        "---\ntitle: Dark mode\ndate: 2024-02-10\n---\n\nEasier on the eyes.\n"
    )

    images = tmp_path / "media" / "mobile-app" / "images"
    images.mkdir(parents=True)
    (images / "login.png").write_bytes(b"\x89PNG\r\n")

    (tmp_path / "templates").mkdir()
    static = tmp_path / "static"
    static.mkdir()
    (static / "style.css").write_text("body { margin: 0; }\n")

    (tmp_path / "bengal.toml").write_text('[site]\ntitle = "Changelog"\n')

    return tmp_path


def sample_records() -> list[ContentRecord]:
    """Three entries across two products, one with media."""
    return [
        make_record(
            "mobile-app/faster-login.md",
            {
                "title": "Faster login",
                "date": date(2024, 3, 1),
                "images": ["login.png", "walkthrough.mp4"],
            },
            html="<p>Sign in with one tap.</p>",
        ),
        make_record(
            "mobile-app/offline.md",
            {"title": "Offline mode", "date": date(2024, 1, 5)},
        ),
        make_record(
            "web/dark-mode.md",
            {"title": "Dark mode", "date": date(2024, 2, 10), "version": "3.1"},
        ),
    ]


def make_test_page(
    source_path: Path,
    *,
    href: str,
    title: str = "Test Entry",
    html_content: str = "<p>Test content</p>",
    metadata: dict[str, Any] | None = None,
) -> Any:
    """Create a minimal Bengal Page for unit testing.

    Sets ``href`` directly on the page's ``__dict__`` to bypass the property's
    computed resolution (which requires a fully wired Site).
    """
    from bengal.core.page import Page

    raw_metadata = metadata or {"title": title}
    page = Page(source_path=source_path, _raw_metadata=raw_metadata, html_content=html_content)
    page.__dict__["href"] = href
    return page


def fake_page(
    source_path: Path,
    *,
    href: str | None = None,
    metadata: dict[str, Any] | None = None,
    html_content: str = "",
) -> SimpleNamespace:
    """A page-shaped object carrying only what the content source reads."""
    return SimpleNamespace(
        source_path=source_path,
        href=href,
        metadata=metadata or {},
        html_content=html_content,
    )


def fake_source(
    config: HowlConfig,
    records: list[ContentRecord],
    *,
    collector: StackCollector | None = None,
) -> ContentSource:
    """A ContentSource whose loader serves *records* instead of reading Bengal."""
    pages = [
        fake_page(
            config.content_path / record.path,
            href=record.url,
            metadata=dict(record.data),
            html_content=record.html,
        )
        for record in records
    ]
    return ContentSource(
        config, loader=lambda _root: SimpleNamespace(pages=pages), collector=collector,
    )
