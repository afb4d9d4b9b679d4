from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Optional

import orjson
import typer
import yaml
from rich.console import Console
from rich.table import Table

from adapters.filesystem.scene_repository import FileSystemSceneRepository
from app.canvas_wiring import load_scene
from app.config import AppSettings, load_settings
from domain.models import DragStartEvent, DragUpdateEvent, SceneDocument
from domain.services.viewport_overflow import format_zoom_level

app = typer.Typer(no_args_is_help=True)
console = Console()


def _load_settings_or_exit(config_path: Path | None) -> AppSettings:
    try:
        return load_settings(config_path)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as exc:
        # ValueError also covers pydantic ValidationError.
        console.print(f"[red]Invalid configuration:[/] {exc}")
        raise typer.Exit(code=1) from exc


def _load_scene_or_exit(scene_path: Path) -> SceneDocument:
    try:
        return FileSystemSceneRepository().load(scene_path)
    except FileNotFoundError as exc:
        console.print(f"[red]File not found:[/] {scene_path}")
        raise typer.Exit(code=1) from exc
    except ValueError as exc:
        # Malformed JSON surfaces as a pydantic ValidationError, a ValueError.
        console.print(f"[red]Invalid scene:[/] {exc}")
        raise typer.Exit(code=1) from exc


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command("inspect")
def inspect_scene(
    scene_path: Path = typer.Argument(..., help="Scene JSON file with canvas size and nodes."),
    zoom: Optional[float] = typer.Option(None, help="Zoom level overriding the scene's zoom."),
    fit: bool = typer.Option(False, "--fit", help="Zoom so that every node fits the viewport."),
    config_path: Optional[Path] = typer.Option(None, "--config", help="YAML settings file."),
) -> None:
    if fit and zoom is not None:
        console.print("[red]--fit and --zoom cannot be combined[/]")
        raise typer.Exit(code=1)

    settings = _load_settings_or_exit(config_path)
    scene = _load_scene_or_exit(scene_path)
    coordinator = load_scene(settings, scene)
    tracker = coordinator.tracker

    if fit:
        result = tracker.zoom_to_fit()
    elif zoom is not None:
        result = tracker.set_zoom(zoom)
    else:
        result = tracker.calculate_overflow()

    console.print(f"Canvas: {tracker.canvas_size.width:g} x {tracker.canvas_size.height:g}")
    console.print(f"Zoom: {format_zoom_level(result.zoom)}")
    overflow_style = "yellow" if result.overflow else "green"
    console.print(f"Overflow: [{overflow_style}]{'yes' if result.overflow else 'no'}[/]")
    console.print(f"Scroll: ({result.scroll.x:g}, {result.scroll.y:g})")

    visible_ids = {node.id for node in coordinator.get_visible_nodes()}
    table = Table(title="Nodes")
    table.add_column("id")
    table.add_column("x", justify="right")
    table.add_column("y", justify="right")
    table.add_column("visible")
    for node in coordinator.get_all_node_positions():
        visible = "yes" if node.id in visible_ids else "no"
        table.add_row(node.id, f"{node.x:g}", f"{node.y:g}", visible)
    console.print(table)
    console.print(f"Visible: {len(visible_ids)}/{len(scene.nodes)}")


@app.command("drag")
def drag_node(
    scene_path: Path = typer.Argument(..., help="Scene JSON file with canvas size and nodes."),
    node_id: str = typer.Argument(..., help="Id of the node to drag."),
    dx: float = typer.Option(0.0, "--dx", help="Horizontal drag delta."),
    dy: float = typer.Option(0.0, "--dy", help="Vertical drag delta."),
    snap: bool = typer.Option(False, "--snap", help="Force grid snapping on."),
    grid_size: Optional[float] = typer.Option(None, "--grid-size", help="Grid size."),
    config_path: Optional[Path] = typer.Option(None, "--config", help="YAML settings file."),
) -> None:
    settings = _load_settings_or_exit(config_path)
    if snap:
        settings.canvas.snap_to_grid = True
    if grid_size is not None:
        if not math.isfinite(grid_size) or grid_size <= 0:
            console.print("[red]--grid-size must be positive and finite[/]")
            raise typer.Exit(code=1)
        settings.canvas.grid_size = grid_size

    scene = _load_scene_or_exit(scene_path)
    coordinator = load_scene(settings, scene)
    current = coordinator.get_node_position(node_id)
    if current is None:
        console.print(f"[red]Unknown node:[/] {node_id}")
        raise typer.Exit(code=1)

    coordinator.handle_drag_start(
        DragStartEvent(id=node_id, initial_x=current.x, initial_y=current.y)
    )
    coordinator.handle_drag_update(DragUpdateEvent(id=node_id, delta_x=dx, delta_y=dy))
    coordinator.handle_drag_end()

    position = coordinator.get_node_position(node_id) or current
    result = coordinator.last_result or coordinator.tracker.calculate_overflow()
    payload = {
        "id": node_id,
        "x": position.x,
        "y": position.y,
        "overflow": result.overflow,
        "scroll": {"x": result.scroll.x, "y": result.scroll.y},
        "zoom": result.zoom,
    }
    typer.echo(orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode("utf-8"))


@app.command("validate")
def validate(scene_path: Path = typer.Argument(..., help="Scene file to validate.")) -> None:
    scene = _load_scene_or_exit(scene_path)
    console.print(f"[green]Valid scene with {len(scene.nodes)} nodes:[/] {scene_path}")


if __name__ == "__main__":
    app()
