"""Mapping of conversion params to ffmpeg arguments and command assembly."""

import logging
import re
import shlex
from typing import Dict, List, Mapping, Optional, Sequence, Union

from mediatools.common import FFMpegCLIValue
from mediatools.config import FFMpegConfig, get_config
from mediatools.exceptions import (
    InvalidArgumentError,
    UnsupportedParamError,
    UnsupportedParamValueError,
)
from mediatools.io import UnescapedFile, escape_shell_arg
from mediatools.log_utils import sanitize_log_value
from mediatools.params import (
    PARAM_AUDIO_BITRATE,
    PARAM_AUDIO_CODEC,
    PARAM_AUTO_ALT_REF,
    PARAM_CRF,
    PARAM_FRAME_PARALLEL,
    PARAM_KEYFRAME_SPACING,
    PARAM_LAG_IN_FRAMES,
    PARAM_NOAUDIO,
    PARAM_OUTPUT_FORMAT,
    PARAM_OVERWRITE,
    PARAM_PASS,
    PARAM_PASSLOGFILE,
    PARAM_PIX_FMT,
    PARAM_PRESET,
    PARAM_QUALITY,
    PARAM_SEEK_END,
    PARAM_SEEK_START,
    PARAM_SPEED,
    PARAM_STREAMABLE,
    PARAM_THREADS,
    PARAM_TILE_COLUMNS,
    PARAM_TUNE,
    PARAM_VIDEO_BITRATE,
    PARAM_VIDEO_CODEC,
    PARAM_VIDEO_FILTER,
    PARAM_VIDEO_FRAMES,
    PARAM_VIDEO_MAX_BITRATE,
    PARAM_VIDEO_MIN_BITRATE,
    PARAM_VIDEO_QUALITY_SCALE,
    VideoConvertParams,
)
from mediatools.validation import FFMpegParamValidator

logger = logging.getLogger(__name__)

OutputFile = Union[str, UnescapedFile, None]

_MULTI_SPACE_RE = re.compile(r" {2,}")


class CliArgument(str):
    """A rendered CLI fragment such as '-c:v libx264'.

    Compares and prints as the joined string, and keeps the argv tokens it
    was built from so values holding spaces or quotes survive get_cli_args().
    """

    def __new__(cls, tokens: Sequence[str] = ()):
        obj = super().__new__(cls, " ".join(tokens))
        obj.tokens = list(tokens)
        return obj


# Rendered arguments: a name -> fragment mapping or a plain list of fragments
Arguments = Union[Mapping[str, str], Sequence[str]]


class FFMpegAdapter:
    """Translates VideoConvertParams into ffmpeg command line syntax."""

    def __init__(self, config: Optional[FFMpegConfig] = None):
        self.config = config if config is not None else get_config()

    def get_params_options(self) -> Dict[str, Dict[str, str]]:
        """Return the CLI pattern of every supported param.

        Patterns take at most one %s placeholder; flags such as -y take none.
        """
        return {
            PARAM_OUTPUT_FORMAT: {"pattern": "-f %s"},
            PARAM_VIDEO_CODEC: {"pattern": "-c:v %s"},
            PARAM_VIDEO_BITRATE: {"pattern": "-b:v %s"},
            PARAM_VIDEO_MIN_BITRATE: {"pattern": "-minrate %s"},
            PARAM_VIDEO_MAX_BITRATE: {"pattern": "-maxrate %s"},
            PARAM_AUDIO_CODEC: {"pattern": "-c:a %s"},
            PARAM_AUDIO_BITRATE: {"pattern": "-b:a %s"},
            PARAM_PIX_FMT: {"pattern": "-pix_fmt %s"},
            PARAM_PRESET: {"pattern": "-preset %s"},
            PARAM_SPEED: {"pattern": "-speed %s"},
            PARAM_THREADS: {"pattern": "-threads %s"},
            PARAM_KEYFRAME_SPACING: {"pattern": "-g %s"},
            PARAM_QUALITY: {"pattern": "-quality %s"},
            PARAM_VIDEO_QUALITY_SCALE: {"pattern": "-qscale:v %s"},
            PARAM_CRF: {"pattern": "-crf %s"},
            PARAM_STREAMABLE: {"pattern": "-movflags +faststart"},
            PARAM_FRAME_PARALLEL: {"pattern": "-frame-parallel %s"},
            PARAM_TILE_COLUMNS: {"pattern": "-tile-columns %s"},
            PARAM_TUNE: {"pattern": "-tune %s"},
            PARAM_VIDEO_FILTER: {"pattern": "-filter:v %s"},
            PARAM_OVERWRITE: {"pattern": "-y"},
            PARAM_VIDEO_FRAMES: {"pattern": "-frames:v %s"},
            PARAM_NOAUDIO: {"pattern": "-an"},
            PARAM_SEEK_START: {"pattern": "-ss %s"},
            PARAM_SEEK_END: {"pattern": "-to %s"},
            PARAM_PASSLOGFILE: {"pattern": "-passlogfile %s"},
            PARAM_PASS: {"pattern": "-pass %s"},
            PARAM_AUTO_ALT_REF: {"pattern": "-auto-alt-ref %s"},
            PARAM_LAG_IN_FRAMES: {"pattern": "-lag-in-frames %s"},
        }

    def get_mapped_conversion_params(
        self,
        conversion_params: VideoConvertParams,
        validate: bool = True,
    ) -> Dict[str, CliArgument]:
        """Render every param into its CLI fragment, keyed by param name.

        Overwrite (-y) is added when the params do not say otherwise. False
        flags render as an empty fragment.

        Raises:
            UnsupportedParamError: a param has no CLI pattern
            UnsupportedParamValueError: a value cannot be rendered
            ParamValidationError: validation is on and a rule is violated
        """
        supported_options = self.get_params_options()

        if not conversion_params.has_param(PARAM_OVERWRITE):
            conversion_params = conversion_params.with_builtin_param(PARAM_OVERWRITE, True)

        params = conversion_params.to_dict()
        unsupported = [name for name in params if name not in supported_options]
        if unsupported:
            raise UnsupportedParamError(
                f"FFMpegAdapter does not support param '{unsupported[0]}'",
                param_name=unsupported[0],
            )

        args: Dict[str, CliArgument] = {}
        for name, value in params.items():
            pattern = supported_options[name]["pattern"]
            # bool before int: True is an int too
            if isinstance(value, bool):
                args[name] = CliArgument(pattern.split(" ") if value else [])
            elif isinstance(value, FFMpegCLIValue):
                args[name] = _render(pattern, value.get_ffmpeg_cli_value())
            elif isinstance(value, (str, int)):
                args[name] = _render(pattern, value)
            else:
                raise UnsupportedParamValueError(
                    f"Param '{name}' has an unsupported type: '{type(value).__name__}'"
                )

        if validate:
            FFMpegParamValidator(conversion_params).validate()

        return args

    def get_cli_command(
        self,
        arguments: Arguments,
        input_file: Optional[str],
        output_file: OutputFile = None,
        prepend_arguments: Optional[Arguments] = None,
    ) -> str:
        """Assemble a single shell-ready command line.

        Layout: <binary> <prepend args> -i <input> <args> <output>

        Runs of spaces are collapsed over the whole line, file names
        included; use get_cli_args() for paths with consecutive spaces.
        """
        input_arg = ""
        if input_file is not None and not isinstance(input_file, str):
            raise InvalidArgumentError(
                f"Input file must be a string or None (type {type(input_file).__name__})"
            )
        if input_file:
            input_arg = f"-i {escape_shell_arg(input_file)}"

        output_arg = ""
        if isinstance(output_file, UnescapedFile):
            output_arg = output_file.get_file()
        elif isinstance(output_file, str):
            output_arg = escape_shell_arg(output_file)
        elif output_file is not None:
            raise InvalidArgumentError(
                "Output file must be either a non empty string, None or UnescapedFile "
                f"(type {type(output_file).__name__})"
            )

        cmd = " ".join([
            self.config.get_binary(),
            " ".join(str(f) for f in _fragments(prepend_arguments)),
            input_arg,
            " ".join(str(f) for f in _fragments(arguments)),
            output_arg,
        ])
        cmd = _MULTI_SPACE_RE.sub(" ", cmd.strip())
        logger.debug("Assembled ffmpeg command: %s", sanitize_log_value(cmd))
        return cmd

    def get_cli_args(
        self,
        arguments: Arguments,
        input_file: Optional[str],
        output_file: OutputFile = None,
        prepend_arguments: Optional[Arguments] = None,
    ) -> List[str]:
        """Same layout as get_cli_command(), as an argv list for subprocess.

        File paths stay single, unquoted elements. Fragments coming from
        get_mapped_conversion_params() keep their values as single elements;
        plain string fragments are split with shell rules.
        """
        if input_file is not None and not isinstance(input_file, str):
            raise InvalidArgumentError(
                f"Input file must be a string or None (type {type(input_file).__name__})"
            )

        cmd: List[str] = [self.config.get_binary()]
        for fragment in _fragments(prepend_arguments):
            cmd.extend(_tokens(fragment))
        if input_file:
            cmd.extend(["-i", input_file])
        for fragment in _fragments(arguments):
            cmd.extend(_tokens(fragment))

        if isinstance(output_file, UnescapedFile):
            cmd.append(output_file.get_file())
        elif isinstance(output_file, str):
            cmd.append(output_file)
        elif output_file is not None:
            raise InvalidArgumentError(
                "Output file must be either a non empty string, None or UnescapedFile "
                f"(type {type(output_file).__name__})"
            )
        return cmd

    def get_conversion_command(
        self,
        conversion_params: VideoConvertParams,
        input_file: Optional[str],
        output_file: OutputFile = None,
    ) -> str:
        """Map, validate and assemble the command for one conversion.

        The configured default thread count is used when the params don't
        set one.
        """
        default_threads = self.get_default_threads()
        if default_threads is not None and not conversion_params.has_param(PARAM_THREADS):
            conversion_params = conversion_params.with_threads(default_threads)

        arguments = self.get_mapped_conversion_params(conversion_params)
        return self.get_cli_command(arguments, input_file, output_file)

    def get_default_threads(self) -> Optional[int]:
        return self.config.get_threads()


def _render(pattern: str, value: Union[int, str]) -> CliArgument:
    # the value is substituted per token so it stays one argv element
    return CliArgument([
        token.replace("%s", str(value)) if "%s" in token else token
        for token in pattern.split(" ")
    ])


def _fragments(arguments: Optional[Arguments]) -> list:
    if not arguments:
        return []
    if isinstance(arguments, Mapping):
        return list(arguments.values())
    if isinstance(arguments, str):
        raise InvalidArgumentError("Arguments must be a mapping or a sequence of strings, got 'str'")
    return list(arguments)


def _tokens(fragment) -> List[str]:
    if isinstance(fragment, CliArgument):
        return list(fragment.tokens)
    try:
        return shlex.split(str(fragment))
    except ValueError as e:
        raise InvalidArgumentError(f"Cannot split argument {fragment!r}: {e}") from e
