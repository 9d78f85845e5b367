"""Command Line Interface for floorgraph.

This module provides a simple CLI to inspect the rooms of a floorplan
document, normalize documents and draw walls into them.
"""

import logging
from pathlib import Path
from typing import Tuple

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .config import CORNER_MERGE_TOLERANCE, FloorplanSettings
from .core.topology import build_room_graph
from .engine.validators import InvalidOperation
from .io.document import InvalidFloorplan
from .io.parser import load_floorplan, save_floorplan

app = typer.Typer(
    name="floorgraph",
    help="Inspect and edit corner/wall floorplan documents",
    no_args_is_help=True,
)
console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _parse_xy(value: str) -> Tuple[float, float]:
    try:
        x, y = (float(part) for part in value.split(","))
    except ValueError as e:
        raise typer.BadParameter(f"Expected X,Y but got '{value}'") from e
    return x, y


def _load(plan: Path, merge_tolerance: float):
    try:
        floorplan = load_floorplan(plan, FloorplanSettings(merge_tolerance=merge_tolerance))
    except FileNotFoundError as e:
        console.print(f"[red]Error: File not found - {e}[/red]")
        raise typer.Exit(1)
    except InvalidFloorplan as e:
        console.print(f"[red]Error: Invalid floorplan - {e}[/red]")
        raise typer.Exit(1)
    return floorplan


PLAN_OPTION = typer.Option(..., "--plan", "-p", help="Path to floorplan JSON file")
TOLERANCE_OPTION = typer.Option(
    CORNER_MERGE_TOLERANCE, "--merge-tolerance", help="Corner merge distance"
)
VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Show debug logging")


@app.command()
def rooms(
    plan: Path = PLAN_OPTION,
    merge_tolerance: float = TOLERANCE_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """List the rooms enclosed by the walls of a floorplan."""
    _configure_logging(verbose)
    floorplan = _load(plan, merge_tolerance)

    table = Table(title=f"Rooms in {plan.name}")
    table.add_column("#", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Corners")
    table.add_column("Area", justify="right")

    for i, room in enumerate(floorplan.rooms, start=1):
        table.add_row(str(i), room.name or "-", room.signature, f"{room.area:.2f}")

    console.print(table)
    console.print(f"[green]{len(floorplan.rooms)} room(s)[/green]")


@app.command()
def info(
    plan: Path = PLAN_OPTION,
    merge_tolerance: float = TOLERANCE_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """Show counts and extent of a floorplan."""
    _configure_logging(verbose)
    floorplan = _load(plan, merge_tolerance)

    width, depth = floorplan.get_size()
    cx, cy = floorplan.get_center()

    table = Table(show_header=False)
    table.add_column("Property", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Corners", str(len(floorplan.corners)))
    table.add_row("Walls", str(len(floorplan.walls)))
    table.add_row("Rooms", str(len(floorplan.rooms)))
    table.add_row("Orphan walls", str(len(floorplan.orphan_walls())))
    table.add_row("Size", f"{width:.2f} x {depth:.2f}")
    table.add_row("Center", f"({cx:.2f}, {cy:.2f})")
    console.print(table)


@app.command()
def graph(
    plan: Path = PLAN_OPTION,
    merge_tolerance: float = TOLERANCE_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """Show which rooms share a wall."""
    _configure_logging(verbose)
    floorplan = _load(plan, merge_tolerance)
    G = build_room_graph(floorplan)

    if G.number_of_edges() == 0:
        console.print("[yellow]No rooms share a wall[/yellow]")
        return

    table = Table(title="Room adjacency")
    table.add_column("Room", style="cyan")
    table.add_column("Neighbour", style="cyan")
    table.add_column("Shared walls", justify="right")
    for r1, r2, data in G.edges(data=True):
        label1 = G.nodes[r1].get("name") or r1
        label2 = G.nodes[r2].get("name") or r2
        table.add_row(label1, label2, str(len(data["wall_ids"])))
    console.print(table)


@app.command()
def normalize(
    plan: Path = PLAN_OPTION,
    output: Path = typer.Option(..., "--out", "-o", help="Path to output JSON file"),
    merge_tolerance: float = TOLERANCE_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """Load a floorplan and save it back with merged corners and live room keys."""
    _configure_logging(verbose)
    floorplan = _load(plan, merge_tolerance)
    save_floorplan(floorplan, output)
    console.print(f"[green]Saved {len(floorplan.rooms)} room(s) to {output}[/green]")


@app.command("add-wall")
def add_wall(
    plan: Path = PLAN_OPTION,
    start: str = typer.Option(..., "--start", help="Start point as X,Y"),
    end: str = typer.Option(..., "--end", help="End point as X,Y"),
    output: Path = typer.Option(..., "--out", "-o", help="Path to output JSON file"),
    merge_tolerance: float = TOLERANCE_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """Draw a wall, splitting every wall it crosses, and save the result."""
    _configure_logging(verbose)
    start_xy = _parse_xy(start)
    end_xy = _parse_xy(end)
    floorplan = _load(plan, merge_tolerance)

    before = len(floorplan.rooms)
    try:
        first = floorplan.insert_corner(*start_xy)
        second = floorplan.insert_corner(*end_xy)
        wall = floorplan.draw_wall(first, second)
    except InvalidOperation as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if wall is None:
        console.print("[red]Error: start and end merge into the same corner[/red]")
        raise typer.Exit(1)

    save_floorplan(floorplan, output)
    console.print(
        f"[green]Rooms: {before} -> {len(floorplan.rooms)}; saved to {output}[/green]"
    )


if __name__ == "__main__":
    app()
