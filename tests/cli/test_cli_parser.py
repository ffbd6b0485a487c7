"""
Tests for CLI argument parser and commands.
"""

from pathlib import Path
from unittest.mock import patch

import pytest
import responses

from tordownloader.cli.parser import CLI
from tordownloader.core.platform import HostPlatform
from tordownloader.torbrowser.dictionary import Branch

REPOSITORY_URL = "https://dist.example.org/torbrowser/"


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Keep a stray ./tordownloader.yaml from leaking into tests."""
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def linux_detected(monkeypatch, linux_host):
    for target in (
        "tordownloader.config.parser.detect_host",
        "tordownloader.torbrowser.release.detect_host",
        "tordownloader.cli.commands.info.detect_host",
        "tordownloader.cli.commands.retrieve.detect_host",
    ):
        monkeypatch.setattr(target, lambda: linux_host)


class TestCLIBasics:
    """Test basic CLI functionality."""

    def test_cli_creation(self):
        cli = CLI()
        assert cli.parser is not None

    def test_no_command_shows_help(self, capsys):
        """Test that running without command shows help."""
        result = CLI().run([])

        assert result == 1
        captured = capsys.readouterr()
        assert "usage:" in captured.out.lower()

    def test_version_flag(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            CLI().run(["--version"])

        assert exc_info.value.code == 0
        assert "tordownloader" in capsys.readouterr().out

    def test_invalid_branch_rejected(self):
        with pytest.raises(SystemExit):
            CLI().parse_args(["latest", "--branch", "nightly"])


class TestParsing:
    """Test subcommand argument parsing."""

    def test_retrieve_defaults(self):
        args = CLI().parse_args(["retrieve", "out"])

        assert args.command == "retrieve"
        assert args.target == Path("out")
        assert args.branch is None
        assert args.release is None
        assert args.no_execution_rights is False

    def test_retrieve_all_options(self):
        args = CLI().parse_args(
            [
                "-v",
                "--config",
                "cfg.yaml",
                "retrieve",
                "out",
                "--branch",
                "alpha",
                "--release",
                "10.5a12",
                "--platform",
                "darwin",
                "--arch",
                "x64",
                "--repository",
                REPOSITORY_URL,
                "--no-execution-rights",
            ]
        )

        assert args.verbose is True
        assert args.config == Path("cfg.yaml")
        assert args.branch == "alpha"
        assert args.release == "10.5a12"
        assert args.platform == "darwin"
        assert args.arch == "x64"
        assert args.repository == REPOSITORY_URL
        assert args.no_execution_rights is True

    def test_latest(self):
        args = CLI().parse_args(["latest", "--branch", "alpha"])

        assert args.command == "latest"
        assert args.branch == "alpha"


class TestLatestCommand:
    """Test the latest command end to end."""

    @responses.activate
    def test_prints_latest_version(self, capsys, make_listing):
        responses.add(
            responses.GET,
            REPOSITORY_URL,
            body=make_listing(["10.0.15", "10.0.16", "10.5a11", "10.5a12"]),
        )

        result = CLI().run(["latest", "--branch", "alpha", "--repository", REPOSITORY_URL])

        assert result == 0
        assert capsys.readouterr().out.strip() == "10.5a12"

    @responses.activate
    def test_no_version_fails(self, make_listing):
        responses.add(responses.GET, REPOSITORY_URL, body=make_listing(["10.5a12"]))

        assert CLI().run(["latest", "--repository", REPOSITORY_URL]) == 1

    def test_invalid_repository(self):
        assert CLI().run(["latest", "--repository", "not-a-url"]) == 1

    def test_keyboard_interrupt(self):
        with patch(
            "tordownloader.cli.commands.latest.run", side_effect=KeyboardInterrupt
        ):
            assert CLI().run(["latest"]) == 130


class TestInfoCommand:
    """Test the info command."""

    def test_explicit_release(self, capsys, linux_detected):
        result = CLI().run(
            [
                "info",
                "--release",
                "10.5a12",
                "--platform",
                "darwin",
                "--repository",
                REPOSITORY_URL,
            ]
        )

        out = capsys.readouterr().out
        assert result == 0
        assert "10.5a12 (osx64)" in out
        assert f"{REPOSITORY_URL}10.5a12/tor-browser-osx64-10.5a12_en-US.mar" in out
        assert f"{REPOSITORY_URL}10.5a12/mar-tools-linux64.zip" in out


class TestRetrieveCommand:
    """Test the retrieve command with the downloader mocked."""

    def test_retrieve(self, capsys, tmp_path, linux_detected):
        target = tmp_path / "tor"
        with patch("tordownloader.cli.commands.retrieve.TorDownloader") as downloader_cls:
            downloader = downloader_cls.return_value
            downloader.retrieve.return_value = target
            downloader.get_tor_binary_filename.return_value = "tor"

            result = CLI().run(
                ["retrieve", str(target), "--release", "10.0.16", "--repository", REPOSITORY_URL]
            )

        assert result == 0
        release = downloader.retrieve.call_args.args[1]
        assert release.version == "10.0.16"
        assert str(release.platform_arch) == "linux64"
        assert downloader_cls.call_args.kwargs["host"] == HostPlatform("linux", "x64")
        downloader.add_execution_rights.assert_called_once_with(target, "linux")
        assert capsys.readouterr().out.strip() == str(target / "tor")

    def test_retrieve_without_execution_rights(self, tmp_path, linux_detected):
        with patch("tordownloader.cli.commands.retrieve.TorDownloader") as downloader_cls:
            downloader = downloader_cls.return_value
            downloader.retrieve.return_value = tmp_path
            downloader.get_tor_binary_filename.return_value = "tor"

            result = CLI().run(
                ["retrieve", str(tmp_path), "--release", "10.0.16", "--no-execution-rights"]
            )

        assert result == 0
        downloader.add_execution_rights.assert_not_called()

    def test_config_file_applies(self, tmp_path, linux_detected):
        config_file = tmp_path / "custom.yaml"
        config_file.write_text("branch: alpha\ndecompress_workers: 3\n")

        with patch("tordownloader.cli.commands.retrieve.TorDownloader") as downloader_cls, patch(
            "tordownloader.cli.utils.Release.from_branch"
        ) as from_branch:
            downloader_cls.return_value.retrieve.return_value = tmp_path
            downloader_cls.return_value.get_tor_binary_filename.return_value = "tor"

            result = CLI().run(["--config", str(config_file), "retrieve", str(tmp_path)])

        assert result == 0
        assert from_branch.call_args.args[0] is Branch.ALPHA
        assert downloader_cls.call_args.kwargs["decompress_workers"] == 3
