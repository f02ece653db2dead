"""Shared types used across mediatools modules."""

import re
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Union, runtime_checkable

BITRATE_RE = re.compile(r"^(\d+)([kKmM]?)$")

_BITRATE_MULTIPLIERS = {"": 1, "k": 1_000, "m": 1_000_000}


@dataclass
class ValidationResult:
    """Result of validating a set of conversion params."""

    valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def add_error(self, msg: str) -> None:
        self.errors.append(msg)
        self.valid = False

    def add_warning(self, msg: str) -> None:
        self.warnings.append(msg)

    def merge(self, other: "ValidationResult") -> None:
        """Merge another ValidationResult into this one."""
        if not other.valid:
            self.valid = False
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)


def parse_bitrate(value: Union[int, str]) -> Optional[int]:
    """Return a bitrate in bits per second, or None if it cannot be parsed.

    Accepts plain integers and ffmpeg shorthand such as '750k' or '2M'.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    m = BITRATE_RE.match(str(value).strip())
    if not m:
        return None
    return int(m.group(1)) * _BITRATE_MULTIPLIERS[m.group(2).lower()]


@runtime_checkable
class FFMpegCLIValue(Protocol):
    """Anything that renders itself as a single ffmpeg CLI argument value."""

    def get_ffmpeg_cli_value(self) -> str:
        ...
