"""Tests for howl.content.source — Bengal pages as changelog records."""

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from howl._errors import ConfigError
from howl.config import HowlConfig
from howl.content.source import ContentSource, load_site, make_record, records_from_pages
from howl.observability import ContentLoaded, EventLog, StackCollector

from .conftest import fake_page


class TestMakeRecord:
    """make_record — read-only data and derived URLs."""

    def test_url_from_path(self) -> None:
        assert make_record("mobile-app/faster-login.md", {}).url == "/mobile-app/faster-login/"

    def test_explicit_url(self) -> None:
        assert make_record("web/a.md", {}, url="/changelog/a/").url == "/changelog/a/"

    def test_data_read_only(self) -> None:
        record = make_record("web/a.md", {"title": "A"})
        with pytest.raises(TypeError):
            record.data["title"] = "B"  # type: ignore[index]

    def test_data_copied(self) -> None:
        data = {"title": "A"}
        record = make_record("web/a.md", data)
        data["title"] = "B"
        assert record.data["title"] == "A"


class TestRecordsFromPages:
    """records_from_pages — conversion and filtering."""

    def test_relative_paths_and_metadata(self, tmp_path: Path) -> None:
        content = tmp_path / "content"
        pages = [
            fake_page(
                content / "web" / "a.md",
                href="/web/a/",
                metadata={"title": "A"},
                html_content="<p>A</p>",
            ),
        ]
        (record,) = records_from_pages(pages, content)
        assert record.path == "web/a.md"
        assert record.url == "/web/a/"
        assert record.data["title"] == "A"
        assert record.html == "<p>A</p>"

    def test_underscore_files_skipped(self, tmp_path: Path) -> None:
        content = tmp_path / "content"
        pages = [
            fake_page(content / "_index.md", href="/"),
            fake_page(content / "web" / "_index.md", href="/web/"),
            fake_page(content / "web" / "a.md", href="/web/a/"),
        ]
        assert [r.path for r in records_from_pages(pages, content)] == ["web/a.md"]

    def test_pages_outside_content_skipped(self, tmp_path: Path) -> None:
        content = tmp_path / "content"
        pages = [
            fake_page(tmp_path / "generated" / "tags.md", href="/tags/"),
            SimpleNamespace(source_path=None),
        ]
        assert records_from_pages(pages, content) == ()

    def test_missing_href_derived(self, tmp_path: Path) -> None:
        content = tmp_path / "content"
        (record,) = records_from_pages([fake_page(content / "web" / "a.md")], content)
        assert record.url == "/web/a/"

    def test_sorted_by_path(self, tmp_path: Path) -> None:
        content = tmp_path / "content"
        pages = [
            fake_page(content / "web" / "b.md"),
            fake_page(content / "api" / "z.md"),
            fake_page(content / "web" / "a.md"),
        ]
        paths = [r.path for r in records_from_pages(pages, content)]
        assert paths == ["api/z.md", "web/a.md", "web/b.md"]

    def test_bengal_page(self, tmp_path: Path) -> None:
        from .conftest import make_test_page

        content = tmp_path / "content"
        page = make_test_page(
            content / "web" / "a.md",
            href="/web/a/",
            metadata={"title": "From Bengal", "date": "2024-01-01"},
        )
        (record,) = records_from_pages([page], content)
        assert record.data["title"] == "From Bengal"


class TestContentSource:
    """ContentSource — lazy load, snapshot until invalidated."""

    def _source(self, tmp_path: Path, counter: list[int], **kwargs: object) -> ContentSource:
        config = HowlConfig(root=tmp_path)

        def loader(_root: Path) -> SimpleNamespace:
            counter.append(1)
            page = fake_page(config.content_path / "web" / f"entry-{len(counter)}.md")
            return SimpleNamespace(pages=[page])

        return ContentSource(config, loader=loader, **kwargs)  # type: ignore[arg-type]

    def test_lazy(self, tmp_path: Path) -> None:
        calls: list[int] = []
        source = self._source(tmp_path, calls)
        assert calls == []
        source.records()
        assert len(calls) == 1

    def test_snapshot_reused(self, tmp_path: Path) -> None:
        calls: list[int] = []
        source = self._source(tmp_path, calls)
        assert source.records() is source.records()
        assert source.load_count == 1

    def test_invalidate_reloads(self, tmp_path: Path) -> None:
        calls: list[int] = []
        source = self._source(tmp_path, calls)
        first = source.records()
        source.invalidate()
        second = source.records()
        assert first[0].path == "web/entry-1.md"
        assert second[0].path == "web/entry-2.md"
        assert source.load_count == 2

    def test_load_recorded(self, tmp_path: Path) -> None:
        collector = StackCollector(EventLog())
        source = self._source(tmp_path, [], collector=collector)
        source.records()
        (event,) = collector.log.query(event_type=ContentLoaded)
        assert event.records == 1  # type: ignore[union-attr]

    def test_content_root(self, tmp_path: Path) -> None:
        source = self._source(tmp_path, [])
        assert source.content_root == tmp_path / "content"


class TestLoadSite:
    """load_site — Bengal site loading from disk."""

    def test_raises_config_error_for_missing_dir(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Failed to load Bengal site"):
            load_site(tmp_path / "nonexistent")
