"""Tests for ffvideo.system_tools module."""

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from ffvideo.config import EngineConfig
from ffvideo.error_handling import EngineError
from ffvideo.system_tools import (
    ToolInfo,
    _run_version_cmd,
    discover_tool,
    get_available_tools,
    parse_version,
)


class TestToolInfo:
    """Tests for ToolInfo class."""

    def test_tool_info_creation(self):
        info = ToolInfo(name="ffmpeg", available=True, version="6.0")

        assert info.name == "ffmpeg"
        assert info.available is True
        assert info.version == "6.0"
        assert info.version_tuple == (6, 0)

    def test_tool_info_require_available(self):
        """Test that require() passes for available tools."""
        ToolInfo(name="ffmpeg", available=True, version="6.0").require()

    def test_tool_info_require_unavailable(self):
        """Test that require() raises for unavailable tools."""
        info = ToolInfo(name="ffmpeg", available=False, version=None)

        with pytest.raises(EngineError, match="Required tool 'ffmpeg' not found"):
            info.require()


class TestParseVersion:
    """Tests for parse_version."""

    @pytest.mark.parametrize(
        "version,expected",
        [
            ("4.4.2-0ubuntu0.22.04.1", (4, 4, 2)),
            ("6.1.1", (6, 1, 1)),
            ("0.8.17-4:0.8.17-0ubuntu0.12.04.1", (0, 8, 17)),
            ("n5.1.2", (5, 1, 2)),
            ("N-112233-gabcdef0", None),
            ("", None),
            (None, None),
        ],
    )
    def test_parse(self, version, expected):
        assert parse_version(version) == expected


class TestDiscoverTool:
    """Tests for discover_tool function."""

    def test_discover_tool_unknown_key(self):
        """Test that unknown tool keys raise ValueError."""
        with pytest.raises(ValueError, match="Unknown tool: ffprobe"):
            discover_tool("ffprobe")

    @patch("ffvideo.system_tools._find_repository_binary", return_value=None)
    @patch("ffvideo.system_tools._which")
    def test_discover_tool_with_config_found(self, mock_which, _mock_repo):
        """Test tool discovery using configuration when tool is found."""
        mock_which.return_value = "/custom/ffmpeg"
        config = EngineConfig(FFMPEG_PATH="/custom/ffmpeg")

        with patch("ffvideo.system_tools._run_version_cmd") as mock_version:
            mock_version.return_value = "4.4.2"

            info = discover_tool("ffmpeg", config)

            assert info.name == "/custom/ffmpeg"
            assert info.available is True
            assert info.version == "4.4.2"
            mock_which.assert_called_once_with("/custom/ffmpeg")
            mock_version.assert_called_once_with(
                ["/custom/ffmpeg", "-version"], r"ffmpeg version (\S+)"
            )

    @patch("ffvideo.system_tools._find_repository_binary", return_value=None)
    @patch("ffvideo.system_tools._which")
    def test_discover_tool_config_not_found_fallback_success(self, mock_which, _mock_repo):
        """Test tool discovery falls back to PATH when configured path not found."""
        mock_which.side_effect = [None, "/usr/bin/ffmpeg"]
        config = EngineConfig(FFMPEG_PATH="/custom/ffmpeg")

        with patch("ffvideo.system_tools._run_version_cmd", return_value="6.0"):
            info = discover_tool("ffmpeg", config)

        assert info.name == "ffmpeg"
        assert info.available is True
        assert info.version == "6.0"
        assert mock_which.call_count == 2
        mock_which.assert_any_call("/custom/ffmpeg")
        mock_which.assert_any_call("ffmpeg")

    @patch("ffvideo.system_tools._which")
    def test_discover_tool_uses_repository_binary(self, mock_which):
        """Test that a bundled bin/<platform>/<arch>/ffmpeg wins over PATH."""
        mock_which.return_value = None
        config = EngineConfig(FFMPEG_PATH="/missing/ffmpeg")

        with patch(
            "ffvideo.system_tools._find_repository_binary",
            return_value="/repo/bin/linux/x86_64/ffmpeg",
        ), patch("ffvideo.system_tools._run_version_cmd", return_value="6.0"):
            info = discover_tool("ffmpeg", config)

        assert info.name == "/repo/bin/linux/x86_64/ffmpeg"
        assert info.available is True

    @patch("ffvideo.system_tools._find_repository_binary", return_value=None)
    @patch("ffvideo.system_tools._which", return_value=None)
    def test_discover_tool_not_found_anywhere(self, _mock_which, _mock_repo):
        """Test tool discovery when tool is not found anywhere."""
        info = discover_tool("ffmpeg", EngineConfig(FFMPEG_PATH="/custom/ffmpeg"))

        assert info.name == "ffmpeg"
        assert info.available is False
        assert info.version is None


class TestRunVersionCmd:
    """Tests for the version probe."""

    @patch("ffvideo.system_tools.subprocess.run")
    def test_version_from_stdout(self, mock_run):
        mock_run.return_value = MagicMock(
            stdout="ffmpeg version 6.1.1 Copyright (c) 2000-2023", stderr="", returncode=0
        )

        assert _run_version_cmd(["ffmpeg", "-version"], r"ffmpeg version (\S+)") == "6.1.1"

    @patch("ffvideo.system_tools.subprocess.run", side_effect=FileNotFoundError)
    def test_missing_binary(self, _mock_run):
        assert _run_version_cmd(["ffmpeg", "-version"], r"ffmpeg version (\S+)") is None

    @patch(
        "ffvideo.system_tools.subprocess.run",
        side_effect=subprocess.TimeoutExpired(cmd="ffmpeg", timeout=5),
    )
    def test_hanging_binary(self, _mock_run):
        assert _run_version_cmd(["ffmpeg", "-version"], r"ffmpeg version (\S+)") is None

    @patch("ffvideo.system_tools.subprocess.run")
    def test_non_zero_exit_without_version(self, mock_run):
        mock_run.return_value = MagicMock(stdout="", stderr="unknown option", returncode=1)

        assert _run_version_cmd(["ffmpeg", "-version"], r"ffmpeg version (\S+)") is None


class TestToolCollections:
    """Tests for get_available_tools."""

    @patch("ffvideo.system_tools.discover_tool")
    def test_get_available_tools_never_raises(self, mock_discover):
        mock_discover.return_value = ToolInfo("ffmpeg", False, None)

        results = get_available_tools()

        assert results["ffmpeg"].available is False
