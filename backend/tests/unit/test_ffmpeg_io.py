"""Tests for shell escaping and unescaped output targets."""

import pytest

from mediatools.io import PlatformNullFile, UnescapedFile, escape_shell_arg


class TestEscapeShellArg:
    @pytest.mark.parametrize("arg,expected", [
        ("in.mp4", "'in.mp4'"),
        ("/media/my video.mp4", "'/media/my video.mp4'"),
        ("it's.mp4", "'it'\"'\"'s.mp4'"),
        ("", "''"),
        ("$(rm -rf /).mp4", "'$(rm -rf /).mp4'"),
    ])
    def test_posix(self, arg, expected):
        assert escape_shell_arg(arg, platform="posix") == expected

    def test_windows(self):
        assert escape_shell_arg('C:\\my "clip".mp4', platform="nt") == '"C:\\my  clip .mp4"'

    def test_windows_blanks_cmd_expansions(self):
        assert escape_shell_arg("C:\\%TEMP%\\go!.mp4", platform="nt") == '"C:\\ TEMP \\go .mp4"'


class TestUnescapedFile:
    def test_passthrough(self):
        assert UnescapedFile("pipe:1").get_file() == "pipe:1"

    def test_null_file_posix(self):
        assert PlatformNullFile(platform="posix").get_file() == "/dev/null"

    def test_null_file_windows(self):
        assert PlatformNullFile(platform="nt").get_file() == "NUL"

    def test_null_file_is_unescaped(self):
        assert isinstance(PlatformNullFile(), UnescapedFile)
