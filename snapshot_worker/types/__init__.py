"""Type definitions for the snapshot worker.

- geometry: points, tile addresses, point decoding
- strokes: stroke and render request wire models, tool kinds
"""

from snapshot_worker.types.geometry import (
    DEFAULT_TILE_SIZE,
    PointPair,
    TileAddress,
    parse_point,
    parse_points,
)
from snapshot_worker.types.strokes import (
    ERASER_TOOL,
    RenderRequest,
    Stroke,
    ToolKind,
    classify_tool,
)

__all__ = [
    "DEFAULT_TILE_SIZE",
    "ERASER_TOOL",
    "PointPair",
    "RenderRequest",
    "Stroke",
    "TileAddress",
    "ToolKind",
    "classify_tool",
    "parse_point",
    "parse_points",
]
