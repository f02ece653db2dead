"""
Logging helpers for command lines.

Assembled commands embed user-provided paths and filter expressions. A path
holding a newline or a terminal escape sequence could forge or garble log
entries (CWE-117), so such characters are escaped before they are logged.
"""

import logging
import re

# C0 control characters plus DEL, except tab
_CONTROL_CHARS_RE = re.compile(r"[\x00-\x08\x0a-\x1f\x7f]")

_NAMED_ESCAPES = {"\n": "\\n", "\r": "\\r"}

_original_factory = None


def _escape_control_char(match: "re.Match") -> str:
    char = match.group(0)
    return _NAMED_ESCAPES.get(char, f"\\x{ord(char):02x}")


def sanitize_log_value(value):
    """Escape control characters in strings; other values pass through."""
    if isinstance(value, str):
        return _CONTROL_CHARS_RE.sub(_escape_control_char, value)
    return value


def _make_safe_factory(base_factory):
    def _safe_record_factory(*args, **kwargs):
        record = base_factory(*args, **kwargs)
        if record.args:
            if isinstance(record.args, dict):
                record.args = {k: sanitize_log_value(v) for k, v in record.args.items()}
            elif isinstance(record.args, tuple):
                record.args = tuple(sanitize_log_value(a) for a in record.args)
        return record

    return _safe_record_factory


def install_safe_logging() -> None:
    """Sanitize the args of every log record created from now on.

    Calling it again is a no-op.
    """
    global _original_factory
    if _original_factory is not None:
        return
    _original_factory = logging.getLogRecordFactory()
    logging.setLogRecordFactory(_make_safe_factory(_original_factory))


def uninstall_safe_logging() -> None:
    """Restore the record factory that was active before install_safe_logging()."""
    global _original_factory
    if _original_factory is None:
        return
    logging.setLogRecordFactory(_original_factory)
    _original_factory = None
