"""Tile rendering pipeline.

Turns a tile address and an ordered stroke list into a finished raster, and
the raster into PNG bytes. Every call allocates its own surface; nothing is
shared between renders.
"""

from __future__ import annotations

import asyncio
import io
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from PIL import Image

from snapshot_worker.colors import resolve_color, to_rgb255
from snapshot_worker.rasterizer import TileSurface, paint_stroke
from snapshot_worker.types import DEFAULT_TILE_SIZE, Stroke, TileAddress

logger = logging.getLogger(__name__)

# Largest supersampled edge we allocate; bigger tiles get a lower factor
MAX_SURFACE_EDGE = 8192


class EncodeError(RuntimeError):
    """Raised when a finished tile cannot be serialized to PNG."""


@dataclass(frozen=True)
class RenderOptions:
    """Configuration for tile rendering.

    Attributes:
        supersample: Drawing resolution multiplier for anti-aliasing (1 = off)
        background_color: Hex color of the empty tile
        optimize_png: Enable PNG optimization (slower but smaller)
    """

    supersample: int = 4
    background_color: str = "#FFFFFF"
    optimize_png: bool = False

    def scale_for(self, tile_size: int) -> int:
        """Supersample factor actually used for a tile of this size."""
        limit = max(1, MAX_SURFACE_EDGE // tile_size)
        return max(1, min(self.supersample, limit))


def normalize_tile_size(tile_size: int, default: int = DEFAULT_TILE_SIZE) -> int:
    """Replace a non-positive tile size with the default."""
    return tile_size if tile_size > 0 else default


def render_tile(
    address: TileAddress,
    strokes: Sequence[Stroke],
    options: RenderOptions | None = None,
) -> Image.Image:
    """Render strokes onto a ``tile_size x tile_size`` RGB image.

    Strokes are painted in the given order, so later strokes cover earlier
    ones where they overlap.
    """
    if options is None:
        options = RenderOptions()

    tile_size = normalize_tile_size(address.tile_size)
    if tile_size != address.tile_size:
        address = address.model_copy(update={"tile_size": tile_size})

    surface = TileSurface(
        tile_size=tile_size,
        scale=options.scale_for(tile_size),
        background=to_rgb255(resolve_color(options.background_color)),
    )
    for stroke in strokes:
        paint_stroke(surface, stroke, address)

    return surface.to_image()


def encode_png(image: Image.Image, options: RenderOptions | None = None) -> bytes:
    """Serialize a rendered tile to PNG bytes."""
    optimize = options.optimize_png if options is not None else False
    buffer = io.BytesIO()
    try:
        image.save(buffer, format="PNG", optimize=optimize)
    except (OSError, ValueError) as e:
        raise EncodeError(f"PNG encoding failed for {image.size[0]}x{image.size[1]} tile") from e
    return buffer.getvalue()


def render_tile_png(
    address: TileAddress,
    strokes: Sequence[Stroke],
    options: RenderOptions | None = None,
) -> bytes:
    """Render a tile and encode it as PNG (synchronous, CPU-bound)."""
    image = render_tile(address, strokes, options)
    png_bytes = encode_png(image, options)
    logger.debug(
        f"Rendered tile [{address.tile_x},{address.tile_y}] "
        f"({image.size[0]}px, {len(strokes)} strokes, {len(png_bytes)} bytes)"
    )
    return png_bytes


async def render_tile_png_async(
    address: TileAddress,
    strokes: Sequence[Stroke],
    options: RenderOptions | None = None,
) -> bytes:
    """Async wrapper for render_tile_png (runs in thread pool)."""
    return await asyncio.to_thread(render_tile_png, address, strokes, options)
