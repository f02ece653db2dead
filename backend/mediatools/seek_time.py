"""Seek positions rendered in ffmpeg's HH:MM:SS.mmm time syntax."""

import math
import re
from functools import total_ordering

from mediatools.exceptions import InvalidArgumentError

HMS_RE = re.compile(r"^(?:(?:(\d+):)?(\d{1,2}):)?(\d{1,2}(?:\.\d+)?)$")


@total_ordering
class SeekTime:
    """A point in time within a media file, used for -ss and -to."""

    def __init__(self, seconds: float):
        if isinstance(seconds, bool) or not isinstance(seconds, (int, float)):
            raise InvalidArgumentError(
                f"Seek time must be a number of seconds, got '{type(seconds).__name__}'"
            )
        if not math.isfinite(seconds):
            raise InvalidArgumentError(f"Seek time must be finite, got {seconds}")
        if seconds < 0:
            raise InvalidArgumentError(f"Seek time cannot be negative, got {seconds}")
        self.seconds = float(seconds)

    @classmethod
    def create_from_hms(cls, hms: str) -> "SeekTime":
        """Parse '[[HH:]MM:]SS[.mmm]', e.g. '01:02:03.5' or '90'."""
        m = HMS_RE.match(hms.strip())
        if not m:
            raise InvalidArgumentError(
                f"Invalid time '{hms}', expected [[HH:]MM:]SS[.mmm]"
            )
        hours, minutes, seconds = m.groups()
        minutes = int(minutes or 0)
        seconds = float(seconds)
        if hours is not None and minutes > 59:
            raise InvalidArgumentError(f"Invalid minutes in '{hms}'")
        if m.group(2) is not None and seconds >= 60:
            raise InvalidArgumentError(f"Invalid seconds in '{hms}'")
        return cls(int(hours or 0) * 3600 + minutes * 60 + seconds)

    @staticmethod
    def convert_seconds_to_hms(seconds: float) -> str:
        total_ms = int(round(seconds * 1000))
        hours, rest = divmod(total_ms, 3_600_000)
        minutes, rest = divmod(rest, 60_000)
        secs, ms = divmod(rest, 1000)
        return f"{hours:02d}:{minutes:02d}:{secs:02d}.{ms:03d}"

    def get_ffmpeg_cli_value(self) -> str:
        return self.convert_seconds_to_hms(self.seconds)

    def __eq__(self, other):
        if not isinstance(other, SeekTime):
            return NotImplemented
        return self.seconds == other.seconds

    def __lt__(self, other):
        if not isinstance(other, SeekTime):
            return NotImplemented
        return self.seconds < other.seconds

    def __hash__(self):
        return hash(self.seconds)

    def __repr__(self):
        return f"SeekTime({self.seconds!r})"
