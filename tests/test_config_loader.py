"""Tests for howl.config_loader — howl.yaml / howl.toml merging."""

from __future__ import annotations

from pathlib import Path

from howl.config_loader import load_config


class TestLoadConfig:
    """load_config — file settings merged with overrides."""

    def test_no_file_uses_defaults(self, tmp_path: Path) -> None:
        config = load_config(tmp_path)
        assert config.root == tmp_path
        assert config.port == 3000

    def test_yaml_top_level_keys(self, tmp_path: Path) -> None:
        (tmp_path / "howl.yaml").write_text("site_title: Release notes\nport: 4000\n")
        config = load_config(tmp_path)
        assert config.site_title == "Release notes"
        assert config.port == 4000

    def test_yaml_howl_section(self, tmp_path: Path) -> None:
        (tmp_path / "howl.yml").write_text("howl:\n  invalid_dates: error\n")
        config = load_config(tmp_path)
        assert config.invalid_dates == "error"

    def test_section_wins_over_top_level(self, tmp_path: Path) -> None:
        (tmp_path / "howl.yaml").write_text("port: 4000\nhowl:\n  port: 5000\n")
        assert load_config(tmp_path).port == 5000

    def test_toml_section(self, tmp_path: Path) -> None:
        (tmp_path / "howl.toml").write_text('[howl]\nmedia_prefix = "/media"\n')
        assert load_config(tmp_path).media_prefix == "/media"

    def test_yaml_preferred_over_toml(self, tmp_path: Path) -> None:
        (tmp_path / "howl.yaml").write_text("port: 4000\n")
        (tmp_path / "howl.toml").write_text("port = 5000\n")
        assert load_config(tmp_path).port == 4000

    def test_overrides_win(self, tmp_path: Path) -> None:
        (tmp_path / "howl.yaml").write_text("port: 4000\nhost: 0.0.0.0\n")
        config = load_config(tmp_path, port=9000)
        assert config.port == 9000
        assert config.host == "0.0.0.0"

    def test_unknown_keys_dropped(self, tmp_path: Path) -> None:
        (tmp_path / "howl.yaml").write_text("theme: midnight\nroot: /elsewhere\n")
        config = load_config(tmp_path)
        assert config.root == tmp_path

    def test_malformed_yaml_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "howl.yaml").write_text("port: [unclosed\n")
        assert load_config(tmp_path).port == 3000

    def test_malformed_toml_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "howl.toml").write_text("[howl\nport = \n")
        assert load_config(tmp_path).port == 3000

    def test_non_mapping_yaml_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "howl.yaml").write_text("- just\n- a list\n")
        assert load_config(tmp_path).port == 3000
