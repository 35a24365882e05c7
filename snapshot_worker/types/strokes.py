"""Stroke and render request models."""

from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from snapshot_worker.types.geometry import PointPair, TileAddress, parse_points

ERASER_TOOL = "eraser"


class ToolKind(str, Enum):
    """How a stroke's tool affects rendering.

    Tool names on the wire are open-ended. Only the eraser is special;
    every other name (pen, brush, marker, names added later) is pen-like.
    """

    ERASER = "eraser"
    PEN = "pen"


def classify_tool(name: str) -> ToolKind:
    """Map a wire tool name to its rendering kind."""
    if name == ERASER_TOOL:
        return ToolKind.ERASER
    return ToolKind.PEN


class WireModel(BaseModel):
    """Base for models read from camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class Stroke(WireModel):
    """A single freehand mark.

    ``points`` is kept as raw wire data; use ``usable_points()`` to get the
    decoded pairs.
    """

    id: str = ""
    timestamp: float = Field(default=0, validation_alias=AliasChoices("ts", "timestamp"))
    tool: str = "pen"
    color: str = "#000000"  # Hex color, ignored for the eraser
    width: float = 1.0  # Line width in pixels, not clamped
    points: list[Any] = []
    author_id: str | None = None
    hidden: bool = False

    @field_validator("id", "timestamp", "tool", "color", "width", "points", "hidden", mode="before")
    @classmethod
    def _null_as_default(cls, value: Any, info: ValidationInfo) -> Any:
        """Read a JSON null as the field default instead of rejecting the stroke."""
        if value is None:
            return cls.model_fields[info.field_name].get_default()
        return value

    @property
    def tool_kind(self) -> ToolKind:
        return classify_tool(self.tool)

    def usable_points(self) -> list[PointPair]:
        """Points that decode to two finite numbers, in wire order."""
        return parse_points(self.points)


class RenderRequest(WireModel):
    """Body of a tile render request.

    ``tile_size`` of zero or less means "use the default size".
    """

    tile_x: int = 0
    tile_y: int = 0
    tile_size: int = 0
    strokes: list[Stroke] = []

    def address(self, default_tile_size: int) -> TileAddress:
        """Tile address with the size normalized against a default."""
        size = self.tile_size if self.tile_size > 0 else default_tile_size
        return TileAddress(tile_x=self.tile_x, tile_y=self.tile_y, tile_size=size)
