"""Output targets and shell escaping for assembled commands."""

import os
import re
import shlex
from typing import Optional

_WINDOWS_UNSAFE_RE = re.compile(r'["%!]')


def escape_shell_arg(arg: str, platform: Optional[str] = None) -> str:
    """Quote a single shell argument.

    On POSIX the result is always wrapped in single quotes, even for values
    that would be safe unquoted, so commands render the same way for any path.

    On Windows the value is double-quoted and every '"', '%' and '!' is
    replaced by a space, since cmd.exe expands the last two even inside
    quotes.
    """
    platform = platform or os.name
    if platform == "nt":
        return '"' + _WINDOWS_UNSAFE_RE.sub(" ", arg) + '"'
    quoted = shlex.quote(arg)
    if quoted.startswith("'"):
        return quoted
    return f"'{arg}'"


class UnescapedFile:
    """An output target passed to the command line verbatim.

    Only use for values that are already shell safe.
    """

    def __init__(self, file: str):
        self.file = file

    def get_file(self) -> str:
        return self.file

    def __repr__(self):
        return f"{type(self).__name__}({self.file!r})"


class PlatformNullFile(UnescapedFile):
    """The null device: NUL on Windows, /dev/null elsewhere."""

    NULL_FILE_WINDOWS = "NUL"
    NULL_FILE_POSIX = "/dev/null"

    def __init__(self, platform: Optional[str] = None):
        platform = platform or os.name
        super().__init__(
            self.NULL_FILE_WINDOWS if platform == "nt" else self.NULL_FILE_POSIX
        )
