"""Tile render endpoint."""

import logging
import time

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError

from snapshot_worker.config import settings
from snapshot_worker.rendering import EncodeError, RenderOptions, render_tile_png_async
from snapshot_worker.types import RenderRequest

logger = logging.getLogger(__name__)

router = APIRouter()


class DecodeError(ValueError):
    """Raised when a request body cannot be turned into a RenderRequest."""


def _describe_validation_error(exc: ValidationError) -> str:
    """Short, client-facing summary of the first validation problem."""
    errors = exc.errors()
    if not errors:
        return "invalid render request"
    first = errors[0]
    if first["type"] == "json_invalid":
        return "invalid json"
    location = ".".join(str(part) for part in first["loc"])
    if location:
        return f"invalid render request: {location}: {first['msg']}"
    return f"invalid render request: {first['msg']}"


def decode_render_request(body: bytes, max_tile_size: int | None = None) -> RenderRequest:
    """Parse a JSON request body into a RenderRequest.

    Only structural problems raise; malformed colors, points and unknown
    tools inside strokes are left for the renderer to absorb.

    Raises:
        DecodeError: If the body is not valid JSON, has the wrong shape, or
            asks for a tile larger than ``max_tile_size``.
    """
    try:
        render_request = RenderRequest.model_validate_json(body)
    except ValidationError as e:
        raise DecodeError(_describe_validation_error(e)) from e

    if max_tile_size is not None and render_request.tile_size > max_tile_size:
        raise DecodeError(
            f"tileSize {render_request.tile_size} exceeds maximum {max_tile_size}"
        )
    return render_request


@router.post("/render")
async def render_tile_endpoint(request: Request) -> Response:
    """Render one tile from a list of strokes and return it as PNG."""
    body = await request.body()
    try:
        render_request = decode_render_request(body, max_tile_size=settings.max_tile_size)
    except DecodeError as e:
        logger.warning(f"Rejected render request: {e}")
        return JSONResponse(status_code=400, content={"error": str(e)})

    address = render_request.address(settings.default_tile_size)
    options = RenderOptions(supersample=settings.supersample, optimize_png=settings.optimize_png)

    start = time.perf_counter()
    try:
        png_bytes = await render_tile_png_async(address, render_request.strokes, options)
    except EncodeError as e:
        logger.error(
            f"Render failed for tile [{address.tile_x},{address.tile_y}]: {e}",
            exc_info=True,
        )
        return JSONResponse(status_code=500, content={"error": "render failed"})
    elapsed_ms = int((time.perf_counter() - start) * 1000)

    logger.info(
        f"Tile [{address.tile_x},{address.tile_y}] rendered: "
        f"{len(render_request.strokes)} strokes, {len(png_bytes)} bytes ({elapsed_ms}ms)",
        extra={
            "tile_x": address.tile_x,
            "tile_y": address.tile_y,
            "tile_size": address.tile_size,
            "stroke_count": len(render_request.strokes),
            "elapsed_ms": elapsed_ms,
        },
    )
    return Response(
        content=png_bytes,
        media_type="image/png",
        headers={
            "X-Tile-X": str(address.tile_x),
            "X-Tile-Y": str(address.tile_y),
            "X-Tile-Size": str(address.tile_size),
        },
    )
