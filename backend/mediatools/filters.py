"""Video filters and filter chain composition for the ffmpeg -filter:v option."""

import logging
from abc import ABC, abstractmethod
from typing import Iterable, Iterator, List, Optional, Union

from mediatools.common import FFMpegCLIValue
from mediatools.exceptions import InvalidArgumentError, UnsupportedParamValueError

logger = logging.getLogger(__name__)

# Type alias for filter dimensions: ints or ffmpeg expressions ('iw/2', 'ih')
Dimension = Union[int, str, None]


class VideoFilter:
    """Marker base class for all video filters.

    A filter only contributes to the command line when it also provides
    get_ffmpeg_cli_value(); otherwise it is an inert placeholder.
    """


class FFMpegVideoFilter(VideoFilter, ABC):
    """A video filter that renders itself for ffmpeg."""

    @abstractmethod
    def get_ffmpeg_cli_value(self) -> str:
        """Return the filter expression, e.g. 'crop=w=100'."""


class EmptyVideoFilter(VideoFilter):
    """Filter that does nothing."""


# ---------------------------------------------------------------------------
# Concrete filters
# ---------------------------------------------------------------------------

class CropFilter(FFMpegVideoFilter):
    """Crop filter.

    See https://ffmpeg.org/ffmpeg-filters.html#crop

    Args:
        width: Output width, ffmpeg defaults to 'iw'
        height: Output height, ffmpeg defaults to 'ih'
        x: Left edge of the output in the input video, defaults to '(in_w-out_w)/2'
        y: Top edge of the output in the input video, defaults to '(in_h-out_h)/2'
        keep_aspect: Keep the input display aspect ratio
        exact: Crop subsampled videos at the exact position without rounding
    """

    def __init__(
        self,
        width: Dimension = None,
        height: Dimension = None,
        x: Dimension = None,
        y: Dimension = None,
        keep_aspect: bool = False,
        exact: bool = False,
    ):
        self.width = width
        self.height = height
        self.x = x
        self.y = y
        self.keep_aspect = keep_aspect
        self.exact = exact

    def get_ffmpeg_cli_value(self) -> str:
        args = []
        if self.width is not None:
            args.append(f"w={self.width}")
        if self.height is not None:
            args.append(f"h={self.height}")
        if self.x is not None:
            args.append(f"x={self.x}")
        if self.y is not None:
            args.append(f"y={self.y}")
        if self.keep_aspect:
            args.append("keep_aspect=1")
        if self.exact:
            args.append("exact=1")
        return f"crop={':'.join(args)}"


class ScaleFilter(FFMpegVideoFilter):
    """Scale (resize) filter.

    Use -1 or -2 for one dimension to keep the aspect ratio.
    """

    OPTION_ASPECT_RATIO_INCREASE = "increase"
    OPTION_ASPECT_RATIO_DECREASE = "decrease"
    OPTION_ASPECT_RATIO_DISABLE = "disable"

    ASPECT_RATIO_OPTIONS = {
        OPTION_ASPECT_RATIO_INCREASE,
        OPTION_ASPECT_RATIO_DECREASE,
        OPTION_ASPECT_RATIO_DISABLE,
    }

    def __init__(
        self,
        width: Dimension,
        height: Dimension,
        force_original_aspect_ratio: Optional[str] = None,
    ):
        if (
            force_original_aspect_ratio is not None
            and force_original_aspect_ratio not in self.ASPECT_RATIO_OPTIONS
        ):
            raise InvalidArgumentError(
                f"Unsupported force_original_aspect_ratio '{force_original_aspect_ratio}'. "
                f"Valid: {', '.join(sorted(self.ASPECT_RATIO_OPTIONS))}"
            )
        self.width = width
        self.height = height
        self.force_original_aspect_ratio = force_original_aspect_ratio

    def get_ffmpeg_cli_value(self) -> str:
        args = [f"w={self.width}", f"h={self.height}"]
        if self.force_original_aspect_ratio is not None:
            args.append(f"force_original_aspect_ratio={self.force_original_aspect_ratio}")
        return f"scale={':'.join(args)}"


class YadifVideoFilter(FFMpegVideoFilter):
    """Yadif deinterlacer.

    mode: 0 = one frame per frame, 1 = one frame per field,
          2 and 3 do the same without spatial interlacing check
    parity: 0 = top field first, 1 = bottom field first, -1 = auto
    deint: 0 = deinterlace all frames, 1 = only frames marked interlaced
    """

    def __init__(self, mode: int = 0, parity: int = -1, deint: int = 0):
        if mode not in (0, 1, 2, 3):
            raise InvalidArgumentError(f"Yadif mode must be 0-3, got {mode}")
        if parity not in (-1, 0, 1):
            raise InvalidArgumentError(f"Yadif parity must be -1, 0 or 1, got {parity}")
        if deint not in (0, 1):
            raise InvalidArgumentError(f"Yadif deint must be 0 or 1, got {deint}")
        self.mode = mode
        self.parity = parity
        self.deint = deint

    def get_ffmpeg_cli_value(self) -> str:
        return f"yadif=mode={self.mode}:parity={self.parity}:deint={self.deint}"


class Hqdn3DVideoFilter(FFMpegVideoFilter):
    """High quality 3D denoiser."""

    def __init__(
        self,
        luma_spatial: float = 4,
        chroma_spatial: float = 3,
        luma_tmp: float = 6,
        chroma_tmp: float = 4.5,
    ):
        for name, value in (
            ("luma_spatial", luma_spatial),
            ("chroma_spatial", chroma_spatial),
            ("luma_tmp", luma_tmp),
            ("chroma_tmp", chroma_tmp),
        ):
            if value < 0:
                raise InvalidArgumentError(f"hqdn3d {name} cannot be negative, got {value}")
        self.luma_spatial = luma_spatial
        self.chroma_spatial = chroma_spatial
        self.luma_tmp = luma_tmp
        self.chroma_tmp = chroma_tmp

    def get_ffmpeg_cli_value(self) -> str:
        values = (self.luma_spatial, self.chroma_spatial, self.luma_tmp, self.chroma_tmp)
        return "hqdn3d=" + ":".join(_format_number(v) for v in values)


class NlmeansVideoFilter(FFMpegVideoFilter):
    """Non-local means denoiser.

    Args:
        s: Denoising strength, 1.0 to 30.0
        p: Patch size, odd number 1 to 99
        pc: Chroma patch size, 0 means same as p
        r: Research window size, odd number 1 to 99
        rc: Chroma research window size, 0 means same as r
    """

    def __init__(self, s: float = 1.0, p: int = 7, pc: int = 0, r: int = 15, rc: int = 0):
        if not 1.0 <= s <= 30.0:
            raise InvalidArgumentError(f"nlmeans strength must be within 1.0-30.0, got {s}")
        for name, value, allow_zero in (("p", p, False), ("pc", pc, True), ("r", r, False), ("rc", rc, True)):
            if allow_zero and value == 0:
                continue
            if not (1 <= value <= 99 and value % 2 == 1):
                raise InvalidArgumentError(f"nlmeans {name} must be an odd number within 1-99, got {value}")
        self.s = s
        self.p = p
        self.pc = pc
        self.r = r
        self.rc = rc

    def get_ffmpeg_cli_value(self) -> str:
        args = [f"s={_format_number(self.s)}", f"p={self.p}"]
        if self.pc:
            args.append(f"pc={self.pc}")
        args.append(f"r={self.r}")
        if self.rc:
            args.append(f"rc={self.rc}")
        return f"nlmeans={':'.join(args)}"


def _format_number(value: float) -> str:
    """Render 4.0 as '4' and 4.5 as '4.5'."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


# ---------------------------------------------------------------------------
# Chain
# ---------------------------------------------------------------------------

class VideoFilterChain(FFMpegVideoFilter):
    """Ordered list of video filters rendered as one filtergraph."""

    def __init__(self, filters: Optional[Iterable[VideoFilter]] = None):
        self._filters: List[VideoFilter] = []
        if filters is not None:
            self.add_filters(filters)

    def add_filter(self, video_filter: VideoFilter) -> None:
        self._check_not_cyclic(video_filter)
        self._filters.append(video_filter)

    def add_filters(self, filters: Iterable[VideoFilter]) -> None:
        """Append several filters at once.

        The whole batch is checked before anything is appended, so the chain
        is left untouched when an element is not a VideoFilter.
        """
        batch = list(filters)
        for idx, video_filter in enumerate(batch):
            if not isinstance(video_filter, VideoFilter):
                raise InvalidArgumentError(
                    f"Filter at position {idx} must be a VideoFilter, "
                    f"got '{type(video_filter).__name__}'"
                )
            self._check_not_cyclic(video_filter)
        self._filters.extend(batch)

    def _check_not_cyclic(self, video_filter: VideoFilter) -> None:
        if video_filter is self or (
            isinstance(video_filter, VideoFilterChain) and video_filter._contains(self)
        ):
            raise InvalidArgumentError("A filter chain cannot contain itself")

    def _contains(self, chain: "VideoFilterChain") -> bool:
        for video_filter in self._filters:
            if video_filter is chain:
                return True
            if isinstance(video_filter, VideoFilterChain) and video_filter._contains(chain):
                return True
        return False

    def get_filters(self) -> List[VideoFilter]:
        return list(self._filters)

    def get_ffmpeg_cli_value(self) -> str:
        values = []
        for video_filter in self._filters:
            if not isinstance(video_filter, FFMpegCLIValue):
                continue
            value = video_filter.get_ffmpeg_cli_value()
            if value:
                values.append(value)

        cli_value = ",".join(values)
        if not cli_value.strip():
            raise UnsupportedParamValueError(
                "Cannot get a valid ffmpeg cli value from an empty filter chain"
            )
        logger.debug("Rendered video filter chain: %s", cli_value)
        return cli_value

    def __len__(self) -> int:
        return len(self._filters)

    def __iter__(self) -> Iterator[VideoFilter]:
        return iter(list(self._filters))
