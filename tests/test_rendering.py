"""Tests for the tile rendering pipeline."""

import io
from unittest.mock import MagicMock

import pytest
from PIL import Image

from snapshot_worker.rendering import (
    EncodeError,
    RenderOptions,
    encode_png,
    normalize_tile_size,
    render_tile,
    render_tile_png,
    render_tile_png_async,
)
from snapshot_worker.types import Stroke, TileAddress

WHITE = (255, 255, 255)


def _address(tile_x: int = 0, tile_y: int = 0, tile_size: int = 32) -> TileAddress:
    return TileAddress(tile_x=tile_x, tile_y=tile_y, tile_size=tile_size)


def _horizontal(color: str, y: float, width: float = 6, **kwargs: object) -> Stroke:
    return Stroke(color=color, width=width, points=[[0, y], [32, y]], **kwargs)


def _decode(png_bytes: bytes) -> Image.Image:
    return Image.open(io.BytesIO(png_bytes))


class TestTileDimensions:
    """The raster is always tile_size x tile_size."""

    @pytest.mark.parametrize("tile_size", [1, 4, 7, 64, 300])
    def test_size_matches_tile_size(self, tile_size: int) -> None:
        strokes = [
            Stroke(width=3, points=[[-10, -10], [tile_size * 2, tile_size * 2]]),
            Stroke(width=1, points=[[0, 0]]),
        ]
        image = render_tile(_address(tile_size=tile_size), strokes)
        assert image.size == (tile_size, tile_size)
        assert image.mode == "RGB"

    @pytest.mark.parametrize("tile_size", [0, -1, -1024])
    def test_non_positive_size_uses_default(self, tile_size: int) -> None:
        image = render_tile(_address(tile_size=tile_size), [])
        assert image.size == (512, 512)

    def test_empty_tile_is_white(self) -> None:
        image = render_tile(_address(tile_size=16), [])
        assert image.getcolors() == [(256, WHITE)]

    def test_normalize_tile_size(self) -> None:
        assert normalize_tile_size(128) == 128
        assert normalize_tile_size(0) == 512
        assert normalize_tile_size(-3, default=64) == 64


class TestRenderOptions:
    """Tests for supersample selection."""

    def test_default_scale(self) -> None:
        assert RenderOptions().scale_for(512) == 4

    def test_large_tiles_get_lower_scale(self) -> None:
        assert RenderOptions().scale_for(4096) == 2
        assert RenderOptions().scale_for(10000) == 1

    def test_supersample_one_disables_antialiasing(self) -> None:
        image = render_tile(
            _address(tile_size=16),
            [Stroke(width=1, points=[[0, 0], [16, 7]])],
            RenderOptions(supersample=1),
        )
        # Without anti-aliasing only pure black and pure white appear
        assert {color for _, color in image.getcolors()} <= {WHITE, (0, 0, 0)}

    def test_antialiased_edges_have_intermediate_tones(self) -> None:
        image = render_tile(
            _address(tile_size=16),
            [Stroke(width=1, points=[[0, 0], [16, 7]])],
            RenderOptions(supersample=4),
        )
        colors = {color for _, color in image.getcolors()}
        assert colors - {WHITE, (0, 0, 0)}


class TestStrokeFiltering:
    """Hidden and degenerate strokes leave no mark."""

    def test_hidden_stroke_is_pixel_identical_to_absent(self) -> None:
        visible = [_horizontal("#FF0000", 10), _horizontal("#0000FF", 20)]
        hidden = _horizontal("#00FF00", 15, width=12, hidden=True)

        without = render_tile(_address(), visible)
        with_hidden = render_tile(_address(), [visible[0], hidden, visible[1]])

        assert with_hidden.tobytes() == without.tobytes()

    @pytest.mark.parametrize(
        "points",
        [
            [],
            [[5, 5]],
            [[5, 5], ["x", 9]],
            [[5, 5], [1], [None, None], [True, 3]],
        ],
    )
    def test_degenerate_stroke_paints_nothing(self, points: list) -> None:
        blank = render_tile(_address(), [])
        image = render_tile(_address(), [Stroke(width=8, points=points)])
        assert image.tobytes() == blank.tobytes()

    def test_bad_points_do_not_affect_other_strokes(self) -> None:
        good = _horizontal("#000000", 16)
        broken = Stroke(width=8, points=[["bad"], {"x": 1}])
        image = render_tile(_address(), [broken, good])
        assert image.getpixel((16, 16)) == (0, 0, 0)


class TestStrokeColors:
    """Color resolution as seen in the raster."""

    def test_declared_color(self) -> None:
        image = render_tile(_address(), [_horizontal("#FF0000", 16)])
        assert image.getpixel((16, 16)) == (255, 0, 0)

    def test_malformed_color_paints_black(self) -> None:
        image = render_tile(_address(), [_horizontal("not-a-color", 16)])
        assert image.getpixel((16, 16)) == (0, 0, 0)

    def test_unknown_tool_uses_declared_color(self) -> None:
        image = render_tile(_address(), [_horizontal("#00FF00", 16, tool="spraycan")])
        assert image.getpixel((16, 16)) == (0, 255, 0)

    def test_eraser_paints_white_over_earlier_strokes(self) -> None:
        ink = _horizontal("#000000", 16, width=10)
        eraser = Stroke(tool="eraser", color="#FF0000", width=4, points=[[16, 0], [16, 32]])
        image = render_tile(_address(), [ink, eraser])
        assert image.getpixel((16, 16)) == WHITE
        assert image.getpixel((4, 16)) == (0, 0, 0)


class TestPaintOrder:
    """Later strokes are painted over earlier ones."""

    def test_later_stroke_wins_overlap(self) -> None:
        red = _horizontal("#FF0000", 16)
        blue = Stroke(color="#0000FF", width=6, points=[[16, 0], [16, 32]])

        assert render_tile(_address(), [red, blue]).getpixel((16, 16)) == (0, 0, 255)
        assert render_tile(_address(), [blue, red]).getpixel((16, 16)) == (255, 0, 0)


class TestEndToEndScenarios:
    """Small tiles checked pixel by pixel."""

    def test_black_diagonal_on_4px_tile(self) -> None:
        stroke = Stroke(
            tool="pen", color="#000000", width=1, points=[[0, 0], [2, 2]], hidden=False
        )
        image = _decode(render_tile_png(_address(tile_size=4), [stroke]))

        assert image.format == "PNG"
        assert image.size == (4, 4)
        image = image.convert("RGB")
        assert image.getpixel((1, 1))[0] < 128
        assert image.getpixel((3, 0)) == WHITE
        assert image.getpixel((0, 3)) == WHITE
        assert image.getpixel((3, 3)) == WHITE

    def test_red_eraser_draws_white_line(self) -> None:
        stroke = Stroke(tool="eraser", color="#FF0000", points=[[0, 0], [3, 3]])
        image = _decode(render_tile_png(_address(tile_size=4), [stroke])).convert("RGB")

        assert image.size == (4, 4)
        assert image.getcolors() == [(16, WHITE)]

    def test_offset_tile_point_lands_inside(self) -> None:
        stroke = Stroke(width=2, points=[[13, 5], [17, 5]])
        image = render_tile(_address(tile_x=1, tile_y=0, tile_size=10), [stroke])
        assert image.getpixel((5, 5))[0] < 128
        assert image.getpixel((5, 0)) == WHITE


class TestEncodePng:
    """Tests for PNG serialization."""

    def test_png_magic_bytes(self) -> None:
        png_bytes = encode_png(Image.new("RGB", (3, 3), WHITE))
        assert png_bytes[:8] == b"\x89PNG\r\n\x1a\n"

    def test_optimized_png_decodes_to_same_pixels(self) -> None:
        image = render_tile(_address(), [_horizontal("#123456", 8)])
        png_bytes = encode_png(image, RenderOptions(optimize_png=True))
        assert _decode(png_bytes).convert("RGB").tobytes() == image.tobytes()

    def test_save_failure_raises_encode_error(self) -> None:
        image = MagicMock(spec=Image.Image)
        image.size = (4, 4)
        image.save.side_effect = OSError("disk full")

        with pytest.raises(EncodeError) as exc_info:
            encode_png(image)
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_render_is_deterministic(self) -> None:
        strokes = [_horizontal("#AA0000", 10), Stroke(width=3, points=[[0, 0], [32, 32]])]
        assert render_tile_png(_address(), strokes) == render_tile_png(_address(), strokes)


class TestRenderAsync:
    """Tests for the thread-pool wrapper."""

    @pytest.mark.asyncio
    async def test_matches_sync_render(self) -> None:
        strokes = [_horizontal("#00AA00", 12)]
        png_bytes = await render_tile_png_async(_address(), strokes)
        assert png_bytes == render_tile_png(_address(), strokes)
