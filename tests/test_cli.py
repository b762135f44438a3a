"""Tests for howl._cli — argument parsing and command dispatch."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from howl._cli import _build_parser, main
from howl._errors import ConfigError


class TestBuildParser:
    """_build_parser — CLI argument parsing."""

    def test_dev_default_args(self) -> None:
        parser = _build_parser()
        args = parser.parse_args(["dev"])
        assert args.command == "dev"
        assert args.root == "."
        assert args.host == "127.0.0.1"
        assert args.port == 3000

    def test_dev_with_custom_root(self) -> None:
        parser = _build_parser()
        args = parser.parse_args(["dev", "my-changelog/", "--port", "4000"])
        assert args.root == "my-changelog/"
        assert args.port == 4000

    def test_serve_default_args(self) -> None:
        parser = _build_parser()
        args = parser.parse_args(["serve"])
        assert args.command == "serve"
        assert args.root == "."
        assert args.host == "0.0.0.0"
        assert args.port == 8000
        assert args.workers == 0

    def test_serve_workers(self) -> None:
        parser = _build_parser()
        args = parser.parse_args(["serve", "--workers", "4"])
        assert args.workers == 4

    def test_no_command_returns_none(self) -> None:
        parser = _build_parser()
        args = parser.parse_args([])
        assert args.command is None

    def test_build_command_removed(self) -> None:
        parser = _build_parser()
        with pytest.raises(SystemExit):
            parser.parse_args(["build"])


class TestMain:
    """main — dispatch to howl.app entry points."""

    def test_dev_dispatch(self) -> None:
        with patch("howl.app.dev") as dev:
            main(["dev", "site/", "--port", "4000"])
        dev.assert_called_once_with(root="site/", host="127.0.0.1", port=4000)

    def test_serve_dispatch(self) -> None:
        with patch("howl.app.serve") as serve:
            main(["serve", "--workers", "2"])
        serve.assert_called_once_with(root=".", host="0.0.0.0", port=8000, workers=2)

    def test_no_command_prints_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 0
        assert "howl" in capsys.readouterr().out

    def test_howl_error_exits_with_message(self, capsys: pytest.CaptureFixture[str]) -> None:
        with patch("howl.app.dev", side_effect=ConfigError("no content")):
            with pytest.raises(SystemExit) as exc_info:
                main(["dev"])
        assert exc_info.value.code == 1
        assert "no content" in capsys.readouterr().err
