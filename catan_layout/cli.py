from __future__ import annotations

import functools
import json
import time
from typing import Any, Callable, Dict, List

import click
from rich.console import Console
from rich.progress import BarColumn, Progress, TimeRemainingColumn
from rich.table import Table

from catan_layout.assign.seeding import board_signature
from catan_layout.domain.board import (
    DEFAULT_HEX_RADIUS,
    DEFAULT_MAX_SEARCH_STEPS,
    AssignmentOutcome,
    Board,
    BoardShape,
    BoardSpec,
    DiceStrategy,
    InvalidBoardSpec,
)
from catan_layout.domain.validation import conflict_summary
from catan_layout.generator import generate
from catan_layout.log import configure_logging


def _spec_options(command: Callable[..., Any]) -> Callable[..., Any]:
    options = [
        click.option(
            "--shape",
            default=BoardShape.COMPACT.value,
            show_default=True,
            type=click.Choice([shape.value for shape in BoardShape], case_sensitive=False),
            help="compact = 19 tiles, expanded = 30 tiles in 7 rows.",
        ),
        click.option(
            "--hex-radius",
            default=DEFAULT_HEX_RADIUS,
            show_default=True,
            type=float,
            help="Hex radius used for tile centers and the neighbor threshold.",
        ),
        click.option(
            "--resource-rule/--no-resource-rule",
            default=True,
            show_default=True,
            help="Keep equal resources off neighboring tiles.",
        ),
        click.option(
            "--dice-rule/--no-dice-rule",
            default=True,
            show_default=True,
            help="Keep equal dice tokens off neighboring tiles.",
        ),
        click.option(
            "--stress-high-probability",
            is_flag=True,
            default=False,
            help="Place 6s and 8s first and try to keep them apart.",
        ),
        click.option(
            "--dice-strategy",
            default=DiceStrategy.BACKTRACKING.value,
            show_default=True,
            type=click.Choice([strategy.value for strategy in DiceStrategy], case_sensitive=False),
            help="Search used for dice tokens.",
        ),
        click.option(
            "--shuffle-search-order",
            is_flag=True,
            default=False,
            help="Try candidates in seeded random order instead of table order.",
        ),
        click.option(
            "--max-search-steps",
            default=DEFAULT_MAX_SEARCH_STEPS,
            show_default=True,
            type=click.IntRange(1, None),
            help="Search steps allowed per assigner before falling back.",
        ),
    ]
    for option in reversed(options):
        command = option(command)
    return command


def _build_spec(**kwargs: Any) -> BoardSpec:
    try:
        return BoardSpec(
            shape=BoardShape(kwargs["shape"].lower()),
            hex_radius=kwargs["hex_radius"],
            enforce_resource_adjacency=kwargs["resource_rule"],
            enforce_dice_adjacency=kwargs["dice_rule"],
            stress_high_probability=kwargs["stress_high_probability"],
            dice_strategy=DiceStrategy(kwargs["dice_strategy"].lower()),
            shuffle_search_order=kwargs["shuffle_search_order"],
            max_search_steps=kwargs["max_search_steps"],
        )
    except InvalidBoardSpec as exc:
        raise click.BadParameter(str(exc)) from exc


def _pass_spec(command: Callable[..., Any]) -> Callable[..., Any]:
    spec_keys = (
        "shape",
        "hex_radius",
        "resource_rule",
        "dice_rule",
        "stress_high_probability",
        "dice_strategy",
        "shuffle_search_order",
        "max_search_steps",
    )

    @functools.wraps(command)
    def wrapper(**kwargs: Any) -> Any:
        spec = _build_spec(**{key: kwargs.pop(key) for key in spec_keys})
        return command(spec=spec, **kwargs)

    return wrapper


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log search statistics.")
def cli(verbose: bool) -> None:
    """Generate Catan-style hex boards."""
    configure_logging(verbose)


@cli.command(name="generate")
@_spec_options
@click.option("--seed", default=None, type=int, help="Seed for a reproducible board.")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the board as JSON.")
@_pass_spec
def generate_board(spec: BoardSpec, seed: int | None, as_json: bool) -> None:
    """Generate one board and print its tiles."""
    board = generate(spec, seed=seed)

    if as_json:
        payload = board.to_dict()
        payload["signature"] = board_signature(board)
        payload["conflicts"] = conflict_summary(board)
        click.echo(json.dumps(payload, indent=2))
        return

    console = Console()
    console.print(_tile_table(board))
    conflicts = conflict_summary(board)
    console.print(f"Seed: {board.seed}")
    console.print(f"Signature: {board_signature(board)}")
    console.print(f"Resources: {board.resource_outcome.value}, dice: {board.dice_outcome.value}")
    console.print(
        f"Conflicts: resource={conflicts['resource_conflicts']} "
        f"dice={conflicts['dice_conflicts']} 6/8={conflicts['high_probability_pairs']}"
    )
    console.print(f"View box: {board.bounds.view_box()}")
    if board.used_fallback:
        console.print("[yellow]Search fell back; adjacency rules are not guaranteed.[/yellow]")


def _tile_table(board: Board) -> Table:
    table = Table(title=f"{board.shape.value.title()} board ({len(board.tiles)} tiles)")
    table.add_column("Tile", justify="right")
    table.add_column("X", justify="right")
    table.add_column("Y", justify="right")
    table.add_column("Resource")
    table.add_column("Dice", justify="right")
    table.add_column("Neighbors")
    for tile in board.tiles:
        table.add_row(
            str(tile.id),
            f"{tile.x:.1f}",
            f"{tile.y:.1f}",
            tile.resource.value,
            "-" if tile.dice is None else str(tile.dice),
            ",".join(str(neighbor) for neighbor in board.neighbors[tile.id]),
        )
    return table


@cli.command()
@_spec_options
@click.option("--boards", default=100, show_default=True, type=click.IntRange(1, None), help="Boards to generate.")
@click.option("--seed-start", default=0, show_default=True, type=int, help="Seed of the first board.")
@_pass_spec
def survey(spec: BoardSpec, boards: int, seed_start: int) -> None:
    """Generate many boards and report how often the rules hold."""
    console = Console()
    started = time.perf_counter()
    stats: Dict[str, List[int]] = {
        "resource_conflicts": [],
        "dice_conflicts": [],
        "high_probability_pairs": [],
    }
    fallbacks = {"resources": 0, "dice": 0}

    with Progress(
        "[progress.description]{task.description}",
        BarColumn(),
        TimeRemainingColumn(),
        console=console,
        transient=True,
    ) as progress:
        task_id = progress.add_task("Generating", total=boards)
        for seed in range(seed_start, seed_start + boards):
            board = generate(spec, seed=seed)
            if board.resource_outcome is AssignmentOutcome.FALLBACK:
                fallbacks["resources"] += 1
            if board.dice_outcome is AssignmentOutcome.FALLBACK:
                fallbacks["dice"] += 1
            for key, value in conflict_summary(board).items():
                stats[key].append(value)
            progress.advance(task_id)

    elapsed = time.perf_counter() - started
    table = Table(title=f"Survey of {boards} {spec.shape.value} boards")
    table.add_column("Metric")
    table.add_column("Boards affected", justify="right")
    table.add_column("Mean", justify="right")
    table.add_column("Max", justify="right")
    table.add_row("resource fallback", str(fallbacks["resources"]), "", "")
    table.add_row("dice fallback", str(fallbacks["dice"]), "", "")
    for key, values in stats.items():
        table.add_row(
            key.replace("_", " "),
            str(sum(1 for value in values if value)),
            f"{sum(values) / len(values):.3f}",
            str(max(values)),
        )
    console.print(table)
    console.print(f"[green]Done.[/green] Runtime: {elapsed:.2f}s")


def main() -> None:
    cli()
