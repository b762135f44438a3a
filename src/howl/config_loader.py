"""Load HowlConfig from howl.yaml if present.

Merges file config with CLI kwargs. CLI overrides file.
"""

from __future__ import annotations

import tomllib
from dataclasses import fields
from pathlib import Path

import yaml

from howl.config import HowlConfig

CONFIG_FILENAMES: tuple[str, ...] = ("howl.yaml", "howl.yml", "howl.toml")

# Every HowlConfig field except root may be set from a config file.
_FILE_KEYS: frozenset[str] = frozenset(
    f.name for f in fields(HowlConfig) if f.name != "root"
)


def load_config(root: Path, **overrides: object) -> HowlConfig:
    """Load HowlConfig from root, optionally merging howl.yaml.

    Looks for howl.yaml, howl.yml, or howl.toml in root. If found, loads
    and merges with overrides. Overrides take precedence.
    """
    file_config = _read_howl_config(root)
    merged = {**file_config, **overrides}
    return HowlConfig(root=root, **merged)  # type: ignore[arg-type]


def _read_howl_config(root: Path) -> dict[str, object]:
    """Read howl config from yaml/toml if present. Returns empty dict otherwise."""
    for name in ("howl.yaml", "howl.yml"):
        path = root / name
        if path.is_file():
            return _parse_yaml(path)
    toml_path = root / "howl.toml"
    if toml_path.is_file():
        return _parse_toml(toml_path)
    return {}


def _parse_yaml(path: Path) -> dict[str, object]:
    """Parse YAML config. Returns empty dict on error."""
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError):
        return {}
    if not isinstance(data, dict):
        return {}
    return _flatten_howl_section(data)


def _parse_toml(path: Path) -> dict[str, object]:
    """Parse TOML config. Returns empty dict on error."""
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError):
        return {}
    return _flatten_howl_section(data)


def _flatten_howl_section(data: dict[str, object]) -> dict[str, object]:
    """Extract howl.* keys into top-level config.

    Top-level keys are read first so that an explicit ``[howl]`` section wins.
    Unknown keys are dropped.
    """
    result: dict[str, object] = {}
    for k, v in data.items():
        if k in _FILE_KEYS:
            result[k] = v
    howl = data.get("howl")
    if isinstance(howl, dict):
        for k, v in howl.items():
            if k in _FILE_KEYS:
                result[k] = v
    return result
