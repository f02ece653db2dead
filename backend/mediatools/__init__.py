"""
mediatools - ffmpeg command building from typed conversion params.

Maps an immutable VideoConvertParams set to ffmpeg CLI arguments, validates
it, and assembles a shell-ready command line or argv list.
"""

from mediatools.adapter import CliArgument, FFMpegAdapter
from mediatools.config import FFMpegConfig
from mediatools.exceptions import (
    InvalidArgumentError,
    MediaToolsError,
    ParamValidationError,
    UnsupportedParamError,
    UnsupportedParamValueError,
)
from mediatools.filters import (
    CropFilter,
    EmptyVideoFilter,
    FFMpegVideoFilter,
    Hqdn3DVideoFilter,
    NlmeansVideoFilter,
    ScaleFilter,
    VideoFilter,
    VideoFilterChain,
    YadifVideoFilter,
)
from mediatools.io import PlatformNullFile, UnescapedFile
from mediatools.params import VideoConvertParams
from mediatools.seek_time import SeekTime

__all__ = [
    "CliArgument",
    "FFMpegAdapter",
    "FFMpegConfig",
    "VideoConvertParams",
    "SeekTime",
    "VideoFilter",
    "FFMpegVideoFilter",
    "EmptyVideoFilter",
    "CropFilter",
    "ScaleFilter",
    "YadifVideoFilter",
    "Hqdn3DVideoFilter",
    "NlmeansVideoFilter",
    "VideoFilterChain",
    "UnescapedFile",
    "PlatformNullFile",
    "MediaToolsError",
    "UnsupportedParamError",
    "UnsupportedParamValueError",
    "ParamValidationError",
    "InvalidArgumentError",
]
