"""CLI subcommand for RizzWord races."""

import asyncio
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from rizzword.display import RaceProgress, render_clue_list, render_grid, render_leaderboard, render_race_stats
from rizzword.models import available_models, default_models, invalid_models
from rizzword.player import AIPlayer
from rizzword.puzzle import CROSSWORD, Direction, build_grid, clues_in_order, find_clue
from rizzword.race import (
    DEFAULT_CLUE_DELAY,
    DEFAULT_COUNTDOWN,
    MAX_COMPETITORS,
    MIN_COMPETITORS,
    Race,
    RaceConfigError,
)
from rizzword.solving import empty_grid_state, known_letters
from shared.utils.logging import log_summary, setup_logging

app = typer.Typer(help="Race LLMs on a Gen Z slang crossword")
console = Console()


def _validate_api_key_and_models(models: List[str]):
    """Validate that the API key is present and model names are valid."""
    if not os.getenv("OPENROUTER_API_KEY"):
        console.print("[red]Error: OPENROUTER_API_KEY environment variable not set[/red]")
        console.print("[yellow]Try `source .env` if running locally[/yellow]")
        raise typer.Exit(1)

    invalid = invalid_models(models)
    if invalid:
        console.print("[red]Error: Invalid model name(s):[/red]")
        for model_name in invalid:
            console.print(f"[red]  '{model_name}'[/red]")
        console.print("\n[yellow]Use 'rizzword race list-models' for the full list[/yellow]")
        raise typer.Exit(1)

    if not MIN_COMPETITORS <= len(models) <= MAX_COMPETITORS:
        console.print(
            f"[red]Error: pick between {MIN_COMPETITORS} and {MAX_COMPETITORS} models "
            f"(got {len(models)})[/red]"
        )
        raise typer.Exit(1)


@app.command()
def run(
    models: Optional[List[str]] = typer.Option(None, "--model", "-m", help="Models to race (2-4, repeat the option)"),
    clue_delay: float = typer.Option(DEFAULT_CLUE_DELAY, help="Pause between clues, in seconds"),
    countdown: int = typer.Option(DEFAULT_COUNTDOWN, help="Pre-race countdown, in seconds"),
    log_path: str = typer.Option("logs/rizzword", help="Directory for log files"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
):
    """Race 2-4 models through the crossword and show the leaderboard."""
    models = list(models) if models else default_models()
    _validate_api_key_and_models(models)

    log_dir = Path(log_path)
    setup_logging(log_dir, verbose)
    logger = logging.getLogger(__name__)

    run_id = f"{datetime.utcnow().strftime('%Y-%m-%dT%H-%M-%S')}_rizzword_{'_vs_'.join(models)}"

    try:
        players = [AIPlayer(model, log_dir=log_dir) for model in models]
        race = Race(
            players,
            clue_delay=clue_delay,
            countdown=countdown,
            on_countdown=lambda n: console.print(f"[bold cyan]{n}...[/bold cyan]"),
        )
    except RaceConfigError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    console.print(render_clue_list(race.clues, race.grid))
    console.print(f"\n[bold]Racing {', '.join(models)}[/bold]\n")

    with RaceProgress(models, len(race.clues), console=console) as progress:
        race.on_progress = progress.update
        results = asyncio.run(race.run())

    winner = results[0]
    console.print(
        f"\n[bold green]🏆 {winner.model_name} wins! "
        f"{winner.correct_count}/{len(race.clues)} correct[/bold green]\n"
    )
    console.print(
        render_grid(
            race.grid,
            winner.final_grid,
            winner.correct_cells,
            winner.incorrect_cells,
            title="Winning crossword",
        )
    )
    console.print(render_leaderboard(results, len(race.clues)))
    console.print(render_race_stats(results, len(race.clues)))

    log_summary(log_dir, run_id, [r.to_dict() for r in results])
    logger.info(f"Race {run_id} complete; winner {winner.model_name}")


@app.command()
def list_models():
    """List available AI models for RizzWord."""
    model_mappings = available_models()
    defaults = set(default_models())

    table = Table(title="Available AI Models")
    table.add_column("CLI Name", style="cyan", min_width=15)
    table.add_column("Gateway Model ID", style="magenta", min_width=30)
    table.add_column("Provider", style="green", min_width=12)
    table.add_column("Default", justify="center")

    for model_name in sorted(model_mappings):
        model_id = model_mappings[model_name]
        provider = model_id.split("/")[0] if "/" in model_id else "Unknown"
        table.add_row(model_name, model_id, provider, "✓" if model_name in defaults else "")

    console.print(table)
    console.print(f"\n✨ Total: {len(model_mappings)} models available")
    console.print("\n💡 Usage: [bold]rizzword race run -m [model] -m [model][/bold]")


@app.command()
def show_puzzle(
    solution: bool = typer.Option(False, "--solution", help="Show the filled-in solution"),
):
    """Show the crossword grid and its clues."""
    grid = build_grid(CROSSWORD)
    state = None if solution else empty_grid_state(grid.rows, grid.cols)
    console.print(render_grid(grid, state, title="RizzWord"))
    console.print(render_clue_list(clues_in_order(CROSSWORD), grid))


@app.command()
def prompt(
    number: int = typer.Argument(..., help="Clue number"),
    direction: Direction = typer.Argument(..., help="across or down"),
    known: Optional[str] = typer.Option(None, help="Known-letter pattern, e.g. S_G_A"),
):
    """Print the solver prompt a model would receive for a clue."""
    try:
        clue = find_clue(number, direction)
    except KeyError as e:
        console.print(f"[red]Error: {e.args[0]}[/red]")
        raise typer.Exit(1)

    if known is None:
        known = known_letters(empty_grid_state(), clue)
    elif len(known) != clue.length:
        console.print(f"[red]Error: pattern must be {clue.length} characters[/red]")
        raise typer.Exit(1)

    player = AIPlayer("preview")
    console.print(player.build_prompt(clue.clue, clue.length, clue.direction.value, known.upper()))
