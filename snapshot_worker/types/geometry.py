"""Core geometry types."""

import math
from collections.abc import Iterable
from numbers import Real
from typing import Any

from pydantic import BaseModel, ConfigDict

# A point as an (x, y) pair of floats
PointPair = tuple[float, float]

DEFAULT_TILE_SIZE = 512


class TileAddress(BaseModel):
    """Grid position and edge length of a square tile."""

    model_config = ConfigDict(frozen=True)

    tile_x: int
    tile_y: int
    tile_size: int = DEFAULT_TILE_SIZE


def _as_coordinate(value: Any) -> float | None:
    """Convert a wire value to a finite float, or None."""
    # bool is a Real subclass but never a coordinate
    if isinstance(value, bool) or not isinstance(value, Real):
        return None
    number = float(value)
    if not math.isfinite(number):
        return None
    return number


def parse_point(raw: Any) -> PointPair | None:
    """Decode one wire point (``[x, y]``) into a float pair.

    Returns None for anything that is not a list/tuple of at least two
    finite numbers. Elements past the second are ignored.
    """
    if not isinstance(raw, list | tuple) or len(raw) < 2:
        return None
    x = _as_coordinate(raw[0])
    y = _as_coordinate(raw[1])
    if x is None or y is None:
        return None
    return (x, y)


def parse_points(raw_points: Iterable[Any]) -> list[PointPair]:
    """Decode a sequence of wire points, dropping the malformed ones."""
    points: list[PointPair] = []
    for raw in raw_points:
        point = parse_point(raw)
        if point is not None:
            points.append(point)
    return points
