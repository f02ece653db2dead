"""Tests for log_utils - log injection sanitizer."""

import logging

import pytest

from mediatools.log_utils import (
    install_safe_logging,
    sanitize_log_value,
    uninstall_safe_logging,
)


class TestSanitizeLogValue:
    def test_strips_newlines(self):
        assert sanitize_log_value("line1\nline2") == "line1\\nline2"

    def test_strips_carriage_returns(self):
        assert sanitize_log_value("line1\rline2") == "line1\\rline2"

    def test_strips_crlf(self):
        assert sanitize_log_value("line1\r\nline2") == "line1\\r\\nline2"

    def test_escapes_terminal_sequences(self):
        assert sanitize_log_value("\x1b[31mred") == "\\x1b[31mred"

    def test_keeps_tabs(self):
        assert sanitize_log_value("a\tb") == "a\tb"

    def test_passes_non_strings(self):
        assert sanitize_log_value(42) == 42
        assert sanitize_log_value(None) is None

    def test_clean_command_unchanged(self):
        cmd = "ffmpeg -i 'in.mp4' -c:v libx264 'out.mp4'"
        assert sanitize_log_value(cmd) == cmd


class TestInstallSafeLogging:
    @pytest.fixture(autouse=True)
    def _restore_factory(self):
        original = logging.getLogRecordFactory()
        yield
        uninstall_safe_logging()
        logging.setLogRecordFactory(original)

    def _make_record(self, msg, args):
        return logging.getLogRecordFactory()(
            "test", logging.INFO, __file__, 0, msg, args, None,
        )

    def test_sanitizes_tuple_args(self):
        install_safe_logging()
        record = self._make_record("Input %s has %d streams", ("evil\nname.mp4", 2))

        assert record.getMessage() == "Input evil\\nname.mp4 has 2 streams"

    def test_sanitizes_dict_args(self):
        install_safe_logging()
        record = self._make_record("Output %(path)s", ({"path": "a\r\nb"},))

        assert record.getMessage() == "Output a\\r\\nb"

    def test_install_is_idempotent(self):
        install_safe_logging()
        factory = logging.getLogRecordFactory()
        install_safe_logging()

        assert logging.getLogRecordFactory() is factory

    def test_uninstall_restores_factory(self):
        original = logging.getLogRecordFactory()
        install_safe_logging()
        uninstall_safe_logging()

        assert logging.getLogRecordFactory() is original
