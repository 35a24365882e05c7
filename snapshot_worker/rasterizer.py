"""Stroke rasterization onto a supersampled Pillow surface.

Anti-aliasing comes from drawing at ``scale`` times the tile resolution and
box-filtering down when the tile is finished.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from PIL import Image, ImageDraw

from snapshot_worker.colors import WHITE, resolve_color, to_rgb255
from snapshot_worker.transform import to_local
from snapshot_worker.types import PointPair, Stroke, TileAddress, ToolKind


@dataclass
class TileSurface:
    """White (or ``background``) drawing surface for one tile."""

    tile_size: int
    scale: int = 1
    background: tuple[int, int, int] = (255, 255, 255)
    image: Image.Image = field(init=False)
    _draw: ImageDraw.ImageDraw = field(init=False, repr=False)

    def __post_init__(self) -> None:
        edge = self.tile_size * self.scale
        self.image = Image.new("RGB", (edge, edge), self.background)
        self._draw = ImageDraw.Draw(self.image)

    @property
    def edge(self) -> int:
        """Edge length of the backing image in pixels."""
        return self.tile_size * self.scale

    def stroke_polyline(
        self,
        points: list[PointPair],
        ink: tuple[int, int, int],
        width: float,
    ) -> None:
        """Stroke an open polyline with round caps and joins.

        ``points`` are in tile pixel space. Fewer than two points form an
        empty path and paint nothing. A non-positive or non-finite width
        paints nothing either. Widths are capped at four times the surface edge,
        which already covers the whole surface from any vertex on it.
        """
        if len(points) < 2:
            return
        scaled_width = width * self.scale
        if not math.isfinite(scaled_width) or scaled_width <= 0:
            return
        scaled_width = min(scaled_width, 4 * self.edge)

        scaled = [(x * self.scale, y * self.scale) for x, y in points]
        self._draw.line(scaled, fill=ink, width=max(1, round(scaled_width)))

        # Discs at every vertex give round caps and round joins
        radius = scaled_width / 2
        if radius < 1:
            return
        for x, y in scaled:
            if x + radius < 0 or y + radius < 0 or x - radius > self.edge or y - radius > self.edge:
                continue
            self._draw.ellipse((x - radius, y - radius, x + radius, y + radius), fill=ink)

    def to_image(self) -> Image.Image:
        """Finished tile at its nominal resolution."""
        if self.scale == 1:
            return self.image.copy()
        return self.image.resize((self.tile_size, self.tile_size), Image.Resampling.BOX)


def stroke_ink(stroke: Stroke) -> tuple[int, int, int]:
    """8-bit color a stroke paints with. The eraser always paints white."""
    if stroke.tool_kind is ToolKind.ERASER:
        return to_rgb255(WHITE)
    return to_rgb255(resolve_color(stroke.color))


def paint_stroke(surface: TileSurface, stroke: Stroke, address: TileAddress) -> None:
    """Paint one stroke onto a tile surface.

    Hidden strokes and strokes without usable points are skipped. Each
    point is translated to tile space on its own before joining the path.
    """
    if stroke.hidden:
        return
    points = stroke.usable_points()
    if not points:
        return

    local_points = [to_local(point, address) for point in points]
    surface.stroke_polyline(local_points, stroke_ink(stroke), stroke.width)
