"""Cross-parameter validation for ffmpeg conversion params."""

import logging

from mediatools.common import ValidationResult, parse_bitrate
from mediatools.exceptions import ParamValidationError
from mediatools.params import (
    PARAM_AUDIO_BITRATE,
    PARAM_AUDIO_CODEC,
    PARAM_CRF,
    PARAM_KEYFRAME_SPACING,
    PARAM_LAG_IN_FRAMES,
    PARAM_NOAUDIO,
    PARAM_OUTPUT_FORMAT,
    PARAM_PASS,
    PARAM_PASSLOGFILE,
    PARAM_SEEK_END,
    PARAM_SEEK_START,
    PARAM_STREAMABLE,
    PARAM_THREADS,
    PARAM_VIDEO_CODEC,
    PARAM_VIDEO_FRAMES,
    PARAM_VIDEO_MAX_BITRATE,
    PARAM_VIDEO_MIN_BITRATE,
    PARAM_VIDEO_QUALITY_SCALE,
    VideoConvertParams,
)
from mediatools.seek_time import SeekTime

logger = logging.getLogger(__name__)

# CRF bounds per codec family, matched against the lowercased codec name
CRF_RANGES = (
    (("264", "265", "hevc"), (0, 51)),
    (("vpx", "vp8", "vp9"), (0, 63)),
    (("av1", "aom"), (0, 63)),
)

WEBM_CODEC_MARKERS = ("vpx", "vp8", "vp9", "av1", "aom")

STREAMABLE_FORMATS = {"mp4", "mov"}

NON_NEGATIVE_INT_PARAMS = (
    PARAM_THREADS,
    PARAM_KEYFRAME_SPACING,
    PARAM_VIDEO_FRAMES,
    PARAM_LAG_IN_FRAMES,
)

QSCALE_MIN = 1
QSCALE_MAX = 31


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _codec_matches(codec: str, markers) -> bool:
    codec = codec.lower()
    return any(marker in codec for marker in markers)


class FFMpegParamValidator:
    """Checks rules that involve more than one param.

    check() collects every problem; validate() raises on the first error.
    """

    def __init__(self, params: VideoConvertParams):
        self.params = params

    def validate(self) -> None:
        result = self.check()
        for warning in result.warnings:
            logger.warning("Conversion params: %s", warning)
        if not result.valid:
            logger.debug("Param validation failed: %s", result.errors)
            raise ParamValidationError(result.errors[0], errors=result.errors)

    def check(self) -> ValidationResult:
        result = ValidationResult()
        result.merge(self._check_crf())
        result.merge(self._check_bitrate_bounds())
        result.merge(self._check_no_audio())
        result.merge(self._check_multipass())
        result.merge(self._check_seek_range())
        result.merge(self._check_integer_ranges())
        result.merge(self._check_container())
        return result

    def _check_crf(self) -> ValidationResult:
        result = ValidationResult()
        crf = self.params.get_param(PARAM_CRF)
        if not _is_int(crf):
            return result

        codec = self.params.get_param(PARAM_VIDEO_CODEC)
        low, high = 0, None
        if isinstance(codec, str):
            for markers, bounds in CRF_RANGES:
                if _codec_matches(codec, markers):
                    low, high = bounds
                    break

        if crf < low:
            result.add_error(f"CRF value {crf} is below minimum ({low})")
        elif high is not None and crf > high:
            result.add_error(
                f"CRF value {crf} exceeds maximum ({high}) for codec '{codec}'"
            )
        return result

    def _check_bitrate_bounds(self) -> ValidationResult:
        result = ValidationResult()
        min_rate = self.params.get_param(PARAM_VIDEO_MIN_BITRATE)
        max_rate = self.params.get_param(PARAM_VIDEO_MAX_BITRATE)
        if min_rate is None or max_rate is None:
            return result

        min_bps = parse_bitrate(min_rate)
        max_bps = parse_bitrate(max_rate)
        if min_bps is not None and max_bps is not None and min_bps > max_bps:
            result.add_error(
                f"Video min bitrate '{min_rate}' is greater than max bitrate '{max_rate}'"
            )
        return result

    def _check_no_audio(self) -> ValidationResult:
        result = ValidationResult()
        if self.params.get_param(PARAM_NOAUDIO) is not True:
            return result
        for name in (PARAM_AUDIO_CODEC, PARAM_AUDIO_BITRATE):
            if self.params.has_param(name):
                result.add_error(f"Param '{name}' cannot be combined with '{PARAM_NOAUDIO}'")
        return result

    def _check_multipass(self) -> ValidationResult:
        result = ValidationResult()
        has_pass = self.params.has_param(PARAM_PASS)
        if self.params.has_param(PARAM_PASSLOGFILE) and not has_pass:
            result.add_error(f"Param '{PARAM_PASSLOGFILE}' requires '{PARAM_PASS}' to be set")
        if has_pass:
            pass_number = self.params.get_param(PARAM_PASS)
            if str(pass_number) not in ("1", "2") or isinstance(pass_number, bool):
                result.add_error(f"Pass must be 1 or 2, got '{pass_number}'")
        return result

    def _check_seek_range(self) -> ValidationResult:
        result = ValidationResult()
        start = self.params.get_param(PARAM_SEEK_START)
        end = self.params.get_param(PARAM_SEEK_END)
        if isinstance(start, SeekTime) and isinstance(end, SeekTime) and end <= start:
            result.add_error(
                f"Seek end ({end.get_ffmpeg_cli_value()}) must be after "
                f"seek start ({start.get_ffmpeg_cli_value()})"
            )
        return result

    def _check_integer_ranges(self) -> ValidationResult:
        result = ValidationResult()
        qscale = self.params.get_param(PARAM_VIDEO_QUALITY_SCALE)
        if _is_int(qscale) and not QSCALE_MIN <= qscale <= QSCALE_MAX:
            result.add_error(
                f"Video quality scale {qscale} is out of range ({QSCALE_MIN}-{QSCALE_MAX})"
            )
        for name in NON_NEGATIVE_INT_PARAMS:
            value = self.params.get_param(name)
            if _is_int(value) and value < 0:
                result.add_error(f"Param '{name}' cannot be negative, got {value}")
        return result

    def _check_container(self) -> ValidationResult:
        result = ValidationResult()
        fmt = self.params.get_param(PARAM_OUTPUT_FORMAT)
        codec = self.params.get_param(PARAM_VIDEO_CODEC)
        if not isinstance(fmt, str):
            fmt = None

        if fmt == "webm" and isinstance(codec, str) and codec != "copy":
            if not _codec_matches(codec, WEBM_CODEC_MARKERS):
                result.add_error(
                    f"Codec '{codec}' is not compatible with container format 'webm'"
                )
        elif fmt == "mp4" and isinstance(codec, str) and (
            _codec_matches(codec, ("vp8",)) or codec.lower() == "libvpx"
        ):
            result.add_warning(
                f"Codec '{codec}' may not be compatible with container format 'mp4'"
            )

        if self.params.get_param(PARAM_STREAMABLE) is True and fmt and fmt not in STREAMABLE_FORMATS:
            result.add_warning(
                f"Streamable flag only applies to mp4/mov outputs, format is '{fmt}'"
            )
        return result
