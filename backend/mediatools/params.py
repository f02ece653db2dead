"""Immutable conversion parameter set with builder-style updates."""

from typing import Any, Dict, Iterator, Mapping, Optional, Union

from mediatools.common import BITRATE_RE, FFMpegCLIValue
from mediatools.exceptions import InvalidArgumentError, UnsupportedParamError
from mediatools.filters import VideoFilter
from mediatools.seek_time import SeekTime

# ---------------------------------------------------------------------------
# Parameter vocabulary
# ---------------------------------------------------------------------------

PARAM_OUTPUT_FORMAT = "OUTPUT_FORMAT"
PARAM_VIDEO_CODEC = "VIDEO_CODEC"
PARAM_VIDEO_BITRATE = "VIDEO_BITRATE"
PARAM_VIDEO_MIN_BITRATE = "VIDEO_MIN_BITRATE"
PARAM_VIDEO_MAX_BITRATE = "VIDEO_MAX_BITRATE"
PARAM_AUDIO_CODEC = "AUDIO_CODEC"
PARAM_AUDIO_BITRATE = "AUDIO_BITRATE"
PARAM_PIX_FMT = "PIX_FMT"
PARAM_PRESET = "PRESET"
PARAM_SPEED = "SPEED"
PARAM_THREADS = "THREADS"
PARAM_KEYFRAME_SPACING = "KEYFRAME_SPACING"
PARAM_QUALITY = "QUALITY"
PARAM_VIDEO_QUALITY_SCALE = "VIDEO_QUALITY_SCALE"
PARAM_CRF = "CRF"
PARAM_STREAMABLE = "STREAMABLE"
PARAM_FRAME_PARALLEL = "FRAME_PARALLEL"
PARAM_TILE_COLUMNS = "TILE_COLUMNS"
PARAM_TUNE = "TUNE"
PARAM_VIDEO_FILTER = "VIDEO_FILTER"
PARAM_OVERWRITE = "OVERWRITE"
PARAM_VIDEO_FRAMES = "VIDEO_FRAMES"
PARAM_NOAUDIO = "NOAUDIO"
PARAM_SEEK_START = "SEEK_START"
PARAM_SEEK_END = "SEEK_END"
PARAM_PASSLOGFILE = "PASSLOGFILE"
PARAM_PASS = "PASS"
PARAM_AUTO_ALT_REF = "AUTO_ALT_REF"
PARAM_LAG_IN_FRAMES = "LAG_IN_FRAMES"

BUILTIN_PARAMS = frozenset({
    PARAM_OUTPUT_FORMAT, PARAM_VIDEO_CODEC, PARAM_VIDEO_BITRATE,
    PARAM_VIDEO_MIN_BITRATE, PARAM_VIDEO_MAX_BITRATE,
    PARAM_AUDIO_CODEC, PARAM_AUDIO_BITRATE,
    PARAM_PIX_FMT, PARAM_PRESET, PARAM_SPEED, PARAM_THREADS,
    PARAM_KEYFRAME_SPACING, PARAM_QUALITY, PARAM_VIDEO_QUALITY_SCALE,
    PARAM_CRF, PARAM_STREAMABLE, PARAM_FRAME_PARALLEL, PARAM_TILE_COLUMNS,
    PARAM_TUNE, PARAM_VIDEO_FILTER, PARAM_OVERWRITE, PARAM_VIDEO_FRAMES,
    PARAM_NOAUDIO, PARAM_SEEK_START, PARAM_SEEK_END,
    PARAM_PASSLOGFILE, PARAM_PASS, PARAM_AUTO_ALT_REF, PARAM_LAG_IN_FRAMES,
})

# Values a parameter can hold; anything else is rejected by the adapter
ParamValue = Union[bool, int, str, FFMpegCLIValue]


class VideoConvertParams:
    """Immutable set of conversion params keyed by the names above.

    Every with_* method returns a new instance, the current one is never
    modified.
    """

    def __init__(self, params: Optional[Mapping[str, ParamValue]] = None):
        params = dict(params or {})
        unsupported = [name for name in params if name not in BUILTIN_PARAMS]
        if unsupported:
            raise UnsupportedParamError(
                f"Unsupported param(s): {', '.join(repr(n) for n in unsupported)}",
                param_name=unsupported[0],
            )
        self._params: Dict[str, ParamValue] = params

    # -- Generic accessors ---------------------------------------------------

    def get_param(self, name: str, default: Any = None) -> Any:
        return self._params.get(name, default)

    def has_param(self, name: str) -> bool:
        return name in self._params

    def to_dict(self) -> Dict[str, ParamValue]:
        """Snapshot of all set params, in insertion order."""
        return dict(self._params)

    def with_builtin_param(self, name: str, value: ParamValue) -> "VideoConvertParams":
        """Return a copy with `name` set to `value`.

        The name is not checked here; the adapter rejects names it cannot map.
        """
        new = self._copy()
        new._params[name] = value
        return new

    def without_param(self, name: str) -> "VideoConvertParams":
        new = self._copy()
        new._params.pop(name, None)
        return new

    def with_convert_params(self, other: "VideoConvertParams") -> "VideoConvertParams":
        """Return a copy where params from `other` take precedence."""
        new = self._copy()
        new._params.update(other.to_dict())
        return new

    def _copy(self) -> "VideoConvertParams":
        new = object.__new__(type(self))
        new._params = dict(self._params)
        return new

    # -- Codecs and format ---------------------------------------------------

    def with_output_format(self, output_format: str) -> "VideoConvertParams":
        return self.with_builtin_param(PARAM_OUTPUT_FORMAT, output_format)

    def with_video_codec(self, codec: str) -> "VideoConvertParams":
        return self.with_builtin_param(PARAM_VIDEO_CODEC, codec)

    def with_audio_codec(self, codec: str) -> "VideoConvertParams":
        return self.with_builtin_param(PARAM_AUDIO_CODEC, codec)

    def with_pix_fmt(self, pix_fmt: str) -> "VideoConvertParams":
        return self.with_builtin_param(PARAM_PIX_FMT, pix_fmt)

    # -- Bitrates ------------------------------------------------------------

    def with_video_bitrate(self, bitrate: Union[int, str]) -> "VideoConvertParams":
        """Target video bitrate, e.g. '750k', '2M' or 750000."""
        return self.with_builtin_param(PARAM_VIDEO_BITRATE, _ensure_bitrate(bitrate))

    def with_video_min_bitrate(self, bitrate: Union[int, str]) -> "VideoConvertParams":
        return self.with_builtin_param(PARAM_VIDEO_MIN_BITRATE, _ensure_bitrate(bitrate))

    def with_video_max_bitrate(self, bitrate: Union[int, str]) -> "VideoConvertParams":
        return self.with_builtin_param(PARAM_VIDEO_MAX_BITRATE, _ensure_bitrate(bitrate))

    def with_audio_bitrate(self, bitrate: Union[int, str]) -> "VideoConvertParams":
        return self.with_builtin_param(PARAM_AUDIO_BITRATE, _ensure_bitrate(bitrate))

    # -- Encoder tuning ------------------------------------------------------

    def with_preset(self, preset: str) -> "VideoConvertParams":
        return self.with_builtin_param(PARAM_PRESET, preset)

    def with_tune(self, tune: str) -> "VideoConvertParams":
        return self.with_builtin_param(PARAM_TUNE, tune)

    def with_speed(self, speed: int) -> "VideoConvertParams":
        return self.with_builtin_param(PARAM_SPEED, speed)

    def with_threads(self, threads: int) -> "VideoConvertParams":
        return self.with_builtin_param(PARAM_THREADS, threads)

    def with_keyframe_spacing(self, spacing: int) -> "VideoConvertParams":
        """Max frames between two keyframes (GOP size)."""
        return self.with_builtin_param(PARAM_KEYFRAME_SPACING, spacing)

    def with_quality(self, quality: str) -> "VideoConvertParams":
        """libvpx deadline: 'good', 'best' or 'realtime'."""
        return self.with_builtin_param(PARAM_QUALITY, quality)

    def with_video_quality_scale(self, qscale: int) -> "VideoConvertParams":
        return self.with_builtin_param(PARAM_VIDEO_QUALITY_SCALE, qscale)

    def with_crf(self, crf: int) -> "VideoConvertParams":
        return self.with_builtin_param(PARAM_CRF, crf)

    def with_streamable(self, streamable: bool = True) -> "VideoConvertParams":
        """Move the moov atom to the front (mp4 only)."""
        return self.with_builtin_param(PARAM_STREAMABLE, streamable)

    def with_frame_parallel(self, frame_parallel: bool) -> "VideoConvertParams":
        return self.with_builtin_param(PARAM_FRAME_PARALLEL, int(frame_parallel))

    def with_tile_columns(self, tile_columns: int) -> "VideoConvertParams":
        return self.with_builtin_param(PARAM_TILE_COLUMNS, tile_columns)

    def with_auto_alt_ref(self, auto_alt_ref: bool) -> "VideoConvertParams":
        return self.with_builtin_param(PARAM_AUTO_ALT_REF, int(auto_alt_ref))

    def with_lag_in_frames(self, lag_in_frames: int) -> "VideoConvertParams":
        return self.with_builtin_param(PARAM_LAG_IN_FRAMES, lag_in_frames)

    # -- Filters, streams and output -----------------------------------------

    def with_video_filter(self, video_filter: VideoFilter) -> "VideoConvertParams":
        if not isinstance(video_filter, VideoFilter):
            raise InvalidArgumentError(
                f"Video filter must be a VideoFilter, got '{type(video_filter).__name__}'"
            )
        return self.with_builtin_param(PARAM_VIDEO_FILTER, video_filter)

    def with_overwrite(self) -> "VideoConvertParams":
        return self.with_builtin_param(PARAM_OVERWRITE, True)

    def with_no_overwrite(self) -> "VideoConvertParams":
        return self.with_builtin_param(PARAM_OVERWRITE, False)

    def with_video_frames(self, frames: int) -> "VideoConvertParams":
        """Stop after writing this many video frames."""
        return self.with_builtin_param(PARAM_VIDEO_FRAMES, frames)

    def with_no_audio(self) -> "VideoConvertParams":
        return self.with_builtin_param(PARAM_NOAUDIO, True)

    def with_seek_start(self, seek_time: SeekTime) -> "VideoConvertParams":
        return self.with_builtin_param(PARAM_SEEK_START, seek_time)

    def with_seek_end(self, seek_time: SeekTime) -> "VideoConvertParams":
        return self.with_builtin_param(PARAM_SEEK_END, seek_time)

    # -- Multi-pass ----------------------------------------------------------

    def with_pass_log_file(self, file: str) -> "VideoConvertParams":
        return self.with_builtin_param(PARAM_PASSLOGFILE, file)

    def with_pass(self, pass_number: int) -> "VideoConvertParams":
        if isinstance(pass_number, bool) or pass_number not in (1, 2):
            raise InvalidArgumentError(f"Pass must be 1 or 2, got {pass_number!r}")
        return self.with_builtin_param(PARAM_PASS, pass_number)

    # -- Dunder --------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._params)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._params))

    def __contains__(self, name: object) -> bool:
        return name in self._params

    def __eq__(self, other):
        if not isinstance(other, VideoConvertParams):
            return NotImplemented
        return self._params == other._params

    __hash__ = None

    def __repr__(self):
        return f"{type(self).__name__}({self._params!r})"


def _ensure_bitrate(bitrate: Union[int, str]) -> Union[int, str]:
    if isinstance(bitrate, bool):
        raise InvalidArgumentError(f"Invalid bitrate {bitrate!r}")
    if isinstance(bitrate, int):
        if bitrate < 0:
            raise InvalidArgumentError(f"Bitrate cannot be negative: {bitrate}")
        return bitrate
    if isinstance(bitrate, str) and BITRATE_RE.match(bitrate):
        return bitrate
    raise InvalidArgumentError(
        f"Invalid bitrate format {bitrate!r}. Use e.g. '750k', '2M' or an integer"
    )
