"""Tests for howl.config."""

from pathlib import Path

import pytest

from howl._errors import ConfigError
from howl.config import HowlConfig


class TestHowlConfig:
    """HowlConfig — frozen dataclass with sensible defaults."""

    def test_defaults(self) -> None:
        config = HowlConfig()
        assert config.host == "127.0.0.1"
        assert config.port == 3000
        assert config.workers == 0
        assert config.content_dir == "content"
        assert config.media_dir == "media"
        assert config.media_prefix == "/changelog"
        assert config.meta_filename == "_meta.json"
        assert config.default_order == 999
        assert config.filter_param == "product"
        assert config.invalid_dates == "last"

    def test_frozen(self) -> None:
        config = HowlConfig()
        with pytest.raises(AttributeError):
            config.port = 8000  # type: ignore[misc]

    def test_paths_resolve_from_root(self, tmp_path: Path) -> None:
        config = HowlConfig(root=tmp_path)
        assert config.content_path == tmp_path / "content"
        assert config.templates_path == tmp_path / "templates"
        assert config.static_path == tmp_path / "static"
        assert config.media_path == tmp_path / "media"

    def test_custom_dirs(self, tmp_path: Path) -> None:
        config = HowlConfig(root=tmp_path, content_dir="changelog", media_dir="assets/media")
        assert config.content_path == tmp_path / "changelog"
        assert config.media_path == tmp_path / "assets" / "media"

    def test_relative_root_resolved_to_absolute(self) -> None:
        config = HowlConfig(root=Path("site"))
        assert config.root.is_absolute()

    def test_absolute_root_unchanged(self, tmp_path: Path) -> None:
        config = HowlConfig(root=tmp_path)
        assert config.root == tmp_path


class TestInvalidDatesPolicy:
    """invalid_dates accepts only the known policies."""

    def test_error_policy_accepted(self) -> None:
        assert HowlConfig(invalid_dates="error").invalid_dates == "error"

    def test_unknown_policy_rejected(self) -> None:
        with pytest.raises(ConfigError, match="invalid_dates"):
            HowlConfig(invalid_dates="drop")


class TestMediaPrefix:
    """media_prefix is normalized to a leading slash and no trailing slash."""

    def test_leading_slash_added(self) -> None:
        assert HowlConfig(media_prefix="media").media_prefix == "/media"

    def test_trailing_slash_removed(self) -> None:
        assert HowlConfig(media_prefix="/changelog/").media_prefix == "/changelog"

    def test_root_prefix_kept(self) -> None:
        assert HowlConfig(media_prefix="/").media_prefix == "/"
