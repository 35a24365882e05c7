"""CLI for the snapshot worker.

Usage:
    snapshot-worker render request.json -o tile.png
    cat request.json | snapshot-worker render - -o tile.png
    snapshot-worker serve --port 8080
"""

import sys
from pathlib import Path

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from snapshot_worker.config import settings
from snapshot_worker.rendering import EncodeError, RenderOptions, render_tile_png
from snapshot_worker.routes.render import DecodeError, decode_render_request
from snapshot_worker.transform import tile_bbox

app = typer.Typer(
    name="snapshot-worker",
    help="Render canvas tiles from vector strokes",
    add_completion=False,
)
console = Console()


def _read_payload(source: str) -> bytes:
    """Read a request body from a file path, or stdin for '-'."""
    if source == "-":
        return sys.stdin.buffer.read()
    return Path(source).read_bytes()


@app.command("render")
def render(
    payload: str = typer.Argument(..., help="JSON render request file, or - for stdin"),
    output: Path = typer.Option(Path("tile.png"), "--output", "-o", help="PNG file to write"),
    supersample: int = typer.Option(
        settings.supersample, "--supersample", "-s", help="Anti-aliasing factor (1 = off)"
    ),
) -> None:
    """Render one tile from a JSON request and write it as PNG.

    Examples:
        snapshot-worker render request.json
        snapshot-worker render request.json -o out.png -s 1
    """
    if supersample < 1:
        console.print("[red]Supersample must be at least 1[/red]")
        raise typer.Exit(1)

    try:
        body = _read_payload(payload)
    except OSError as e:
        console.print(f"[red]Failed to read {payload}: {e}[/red]")
        raise typer.Exit(1) from e

    try:
        render_request = decode_render_request(body, max_tile_size=settings.max_tile_size)
    except DecodeError as e:
        console.print(f"[red]Invalid render request: {e}[/red]")
        raise typer.Exit(1) from e

    address = render_request.address(settings.default_tile_size)
    options = RenderOptions(supersample=supersample, optimize_png=settings.optimize_png)
    try:
        png_bytes = render_tile_png(address, render_request.strokes, options)
    except EncodeError as e:
        console.print(f"[red]Render failed: {e}[/red]")
        raise typer.Exit(1) from e

    output.write_bytes(png_bytes)

    hidden = sum(1 for stroke in render_request.strokes if stroke.hidden)
    table = Table(title="Rendered Tile", box=box.ROUNDED)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Tile", f"[{address.tile_x}, {address.tile_y}]")
    table.add_row("Size", f"{address.tile_size} x {address.tile_size}")
    x1, y1, x2, y2 = tile_bbox(address)
    table.add_row("Bounds", f"x [{x1:g}, {x2:g}) y [{y1:g}, {y2:g})")
    table.add_row("Strokes", f"{len(render_request.strokes)} ({hidden} hidden)")
    table.add_row("PNG", f"{len(png_bytes)} bytes")
    table.add_row("Output", str(output))
    console.print(table)


@app.command("serve")
def serve(
    host: str = typer.Option(settings.host, "--host", help="Interface to bind"),
    port: int = typer.Option(settings.port, "--port", "-p", help="Port to listen on"),
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes"),
) -> None:
    """Run the HTTP render service."""
    import uvicorn

    console.print(f"[green]Snapshot worker listening on {host}:{port}[/green]")
    uvicorn.run("snapshot_worker.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
