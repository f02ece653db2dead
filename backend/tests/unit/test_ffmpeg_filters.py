"""
Unit tests for the mediatools video filters module.

Tests single filter rendering, argument checks, and filter chain
composition (ordering, inert filters, empty chains, batch insertion).
"""
import pytest

from mediatools.exceptions import InvalidArgumentError, UnsupportedParamValueError
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

from tests.fixtures.ffmpeg_factories import (
    InertFilter,
    StaticFilter,
    create_filter_chain,
)


# ---------------------------------------------------------------------------
# Crop
# ---------------------------------------------------------------------------

class TestCropFilter:
    """Tests for crop filter rendering."""

    def test_width_only(self):
        """Only the set field is rendered."""
        assert CropFilter(width=100).get_ffmpeg_cli_value() == "crop=w=100"

    def test_no_fields(self):
        """A crop with nothing set renders an empty argument list."""
        assert CropFilter().get_ffmpeg_cli_value() == "crop="

    def test_all_fields_in_fixed_order(self):
        """Fields render as w, h, x, y, keep_aspect, exact."""
        crop = CropFilter(
            width=640, height=480, x=10, y=20, keep_aspect=True, exact=True,
        )
        assert crop.get_ffmpeg_cli_value() == (
            "crop=w=640:h=480:x=10:y=20:keep_aspect=1:exact=1"
        )

    def test_expressions_and_zero(self):
        """ffmpeg expressions pass through and 0 is not treated as missing."""
        crop = CropFilter(width="iw/2", height="ih", x=0)
        assert crop.get_ffmpeg_cli_value() == "crop=w=iw/2:h=ih:x=0"

    def test_false_flags_omitted(self):
        """keep_aspect and exact only appear when true."""
        assert CropFilter(height=200, exact=True).get_ffmpeg_cli_value() == "crop=h=200:exact=1"


# ---------------------------------------------------------------------------
# Other filters
# ---------------------------------------------------------------------------

class TestScaleFilter:
    """Tests for scale filter rendering."""

    def test_width_height(self):
        assert ScaleFilter(1280, 720).get_ffmpeg_cli_value() == "scale=w=1280:h=720"

    def test_keep_aspect_with_minus_one(self):
        assert ScaleFilter(-2, 720).get_ffmpeg_cli_value() == "scale=w=-2:h=720"

    def test_force_original_aspect_ratio(self):
        scale = ScaleFilter(1920, 1080, force_original_aspect_ratio="decrease")
        assert scale.get_ffmpeg_cli_value() == (
            "scale=w=1920:h=1080:force_original_aspect_ratio=decrease"
        )

    def test_rejects_unknown_aspect_option(self):
        with pytest.raises(InvalidArgumentError):
            ScaleFilter(1920, 1080, force_original_aspect_ratio="stretch")


class TestDeinterlaceAndDenoiseFilters:
    """Tests for yadif, hqdn3d and nlmeans filters."""

    def test_yadif_defaults(self):
        assert YadifVideoFilter().get_ffmpeg_cli_value() == "yadif=mode=0:parity=-1:deint=0"

    def test_yadif_custom(self):
        yadif = YadifVideoFilter(mode=1, parity=0, deint=1)
        assert yadif.get_ffmpeg_cli_value() == "yadif=mode=1:parity=0:deint=1"

    def test_yadif_rejects_bad_mode(self):
        with pytest.raises(InvalidArgumentError):
            YadifVideoFilter(mode=5)

    def test_hqdn3d_defaults(self):
        assert Hqdn3DVideoFilter().get_ffmpeg_cli_value() == "hqdn3d=4:3:6:4.5"

    def test_hqdn3d_rejects_negative(self):
        with pytest.raises(InvalidArgumentError):
            Hqdn3DVideoFilter(luma_spatial=-1)

    def test_nlmeans_defaults(self):
        assert NlmeansVideoFilter().get_ffmpeg_cli_value() == "nlmeans=s=1:p=7:r=15"

    def test_nlmeans_chroma_options(self):
        nlmeans = NlmeansVideoFilter(s=3.5, p=5, pc=3, r=9, rc=7)
        assert nlmeans.get_ffmpeg_cli_value() == "nlmeans=s=3.5:p=5:pc=3:r=9:rc=7"

    def test_nlmeans_rejects_even_patch(self):
        with pytest.raises(InvalidArgumentError):
            NlmeansVideoFilter(p=8)

    def test_nlmeans_rejects_strength_out_of_range(self):
        with pytest.raises(InvalidArgumentError):
            NlmeansVideoFilter(s=0.5)


# ---------------------------------------------------------------------------
# Chain
# ---------------------------------------------------------------------------

class TestVideoFilterChain:
    """Tests for filter chain composition."""

    def test_add_filter_keeps_instance(self):
        """get_filters() returns the exact instance that was added."""
        empty_filter = EmptyVideoFilter()
        chain = VideoFilterChain()
        chain.add_filter(empty_filter)

        assert chain.get_filters()[0] is empty_filter

    def test_inert_filters_contribute_nothing(self):
        """Only filters that render are part of the cli value."""
        chain = VideoFilterChain()
        chain.add_filter(InertFilter())
        chain.add_filter(StaticFilter("filter_2"))
        chain.add_filter(EmptyVideoFilter())

        assert len(chain.get_filters()) == 3
        assert chain.get_ffmpeg_cli_value() == "filter_2"

    def test_renderable_with_inert_filter_does_not_raise(self):
        chain = VideoFilterChain([StaticFilter("An ffmpeg ready filter"), InertFilter()])

        assert chain.get_ffmpeg_cli_value() == "An ffmpeg ready filter"

    def test_filters_joined_in_order(self):
        """Contributing filters are joined with ',' in insertion order."""
        chain = VideoFilterChain([
            YadifVideoFilter(),
            EmptyVideoFilter(),
            CropFilter(width=100),
        ])

        assert chain.get_ffmpeg_cli_value() == "yadif=mode=0:parity=-1:deint=0,crop=w=100"

    def test_empty_renderings_are_skipped(self):
        chain = create_filter_chain("", "scale=w=10:h=10", "")

        assert chain.get_ffmpeg_cli_value() == "scale=w=10:h=10"

    def test_empty_chain_raises(self):
        with pytest.raises(UnsupportedParamValueError):
            VideoFilterChain().get_ffmpeg_cli_value()

    def test_only_inert_filters_raises(self):
        chain = VideoFilterChain([EmptyVideoFilter(), InertFilter()])

        with pytest.raises(UnsupportedParamValueError):
            chain.get_ffmpeg_cli_value()

    def test_only_empty_renderings_raises(self):
        with pytest.raises(UnsupportedParamValueError):
            create_filter_chain("", "").get_ffmpeg_cli_value()

    def test_duck_typed_video_filter_renders(self):
        """A VideoFilter exposing get_ffmpeg_cli_value renders without the ABC."""

        class DuckFilter(VideoFilter):
            def get_ffmpeg_cli_value(self):
                return "hflip"

        chain = VideoFilterChain([DuckFilter()])
        assert chain.get_ffmpeg_cli_value() == "hflip"

    def test_nested_chain(self):
        inner = create_filter_chain("hflip", "vflip")
        outer = VideoFilterChain([inner, StaticFilter("fps=30")])

        assert isinstance(outer, FFMpegVideoFilter)
        assert outer.get_ffmpeg_cli_value() == "hflip,vflip,fps=30"

    def test_constructor_filters(self):
        filters = [EmptyVideoFilter(), EmptyVideoFilter()]
        chain = VideoFilterChain(filters)
        result = chain.get_filters()

        assert result == filters
        assert all(a is b for a, b in zip(result, filters))

    def test_add_filters(self):
        filters = [EmptyVideoFilter(), EmptyVideoFilter()]
        chain = VideoFilterChain()
        chain.add_filters(filters)

        assert chain.get_filters() == filters
        assert len(chain) == 2

    def test_add_filters_accepts_generator(self):
        chain = VideoFilterChain()
        chain.add_filters(StaticFilter(str(i)) for i in range(3))

        assert [f.value for f in chain] == ["0", "1", "2"]

    def test_get_filters_returns_copy(self):
        """Mutating the returned list does not change the chain."""
        chain = VideoFilterChain([EmptyVideoFilter()])
        chain.get_filters().append(EmptyVideoFilter())

        assert len(chain.get_filters()) == 1

    def test_add_filters_rejects_scalar(self):
        chain = VideoFilterChain()

        with pytest.raises(InvalidArgumentError):
            chain.add_filters([EmptyVideoFilter(), "cool"])

    def test_add_filters_rejects_object(self):
        chain = VideoFilterChain()

        with pytest.raises(InvalidArgumentError):
            chain.add_filters([EmptyVideoFilter(), object()])

    def test_add_filters_is_atomic(self):
        """A rejected batch leaves previously added filters untouched."""
        existing = StaticFilter("hflip")
        chain = VideoFilterChain([existing])

        with pytest.raises(InvalidArgumentError):
            chain.add_filters([StaticFilter("vflip"), 42])

        assert chain.get_filters() == [existing]
        assert chain.get_ffmpeg_cli_value() == "hflip"

    def test_constructor_rejects_non_filter(self):
        with pytest.raises(InvalidArgumentError):
            VideoFilterChain(["crop=w=100"])

    def test_add_self_rejected(self):
        chain = create_filter_chain("hflip")

        with pytest.raises(InvalidArgumentError):
            chain.add_filter(chain)
        with pytest.raises(InvalidArgumentError):
            chain.add_filters([StaticFilter("vflip"), chain])

        assert chain.get_ffmpeg_cli_value() == "hflip"

    def test_nested_cycle_rejected(self):
        outer = create_filter_chain("hflip")
        inner = VideoFilterChain([outer])

        with pytest.raises(InvalidArgumentError):
            outer.add_filter(inner)

        assert len(outer) == 1

    def test_nested_chain_allowed(self):
        outer = create_filter_chain("hflip")
        outer.add_filter(create_filter_chain("vflip"))

        assert outer.get_ffmpeg_cli_value() == "hflip,vflip"
