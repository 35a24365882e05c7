"""Canvas-global to tile-local coordinate mapping."""

import math

from snapshot_worker.types import PointPair, TileAddress


def tile_origin(address: TileAddress) -> PointPair:
    """Global coordinates of the tile's top-left corner."""
    return (
        float(address.tile_x * address.tile_size),
        float(address.tile_y * address.tile_size),
    )


def to_local(point: PointPair, address: TileAddress) -> PointPair:
    """Translate a global point into the tile's pixel space.

    No bounds checking: points off the tile map outside
    ``[0, tile_size)`` and are clipped by the surface.
    """
    origin_x, origin_y = tile_origin(address)
    return (point[0] - origin_x, point[1] - origin_y)


def tile_for_point(point: PointPair, tile_size: int) -> tuple[int, int]:
    """Grid coordinates of the tile containing a global point."""
    return (math.floor(point[0] / tile_size), math.floor(point[1] / tile_size))


def tile_bbox(address: TileAddress) -> tuple[float, float, float, float]:
    """Global ``(x1, y1, x2, y2)`` covered by a tile, right/bottom exclusive."""
    x1, y1 = tile_origin(address)
    return (x1, y1, x1 + address.tile_size, y1 + address.tile_size)
