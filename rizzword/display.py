"""Terminal rendering of crossword grids and race standings."""

from typing import Dict, FrozenSet, Optional, Sequence

from rich.progress import BarColumn, Progress, SpinnerColumn, TaskID, TextColumn
from rich.table import Table
from rich.text import Text

from rizzword.puzzle import ClueDefinition, Direction, Grid
from rizzword.race import Cell, RaceResult, RacerSnapshot
from rizzword.solving import GridState


def format_time(ms: float) -> str:
    """m:ss.cc"""
    total_seconds = int(ms // 1000)
    mins, secs = divmod(total_seconds, 60)
    centis = int((ms % 1000) // 10)
    return f"{mins}:{secs:02d}.{centis:02d}"


def render_grid(
    grid: Grid,
    state: Optional[GridState] = None,
    correct_cells: FrozenSet[Cell] = frozenset(),
    incorrect_cells: FrozenSet[Cell] = frozenset(),
    title: Optional[str] = None,
) -> Table:
    """Render a grid; with no `state` the solution letters are shown."""
    table = Table(show_header=False, show_lines=True, title=title, padding=(0, 0))
    for _ in range(grid.cols):
        table.add_column(justify="center", width=3)

    for r in range(grid.rows):
        row_items = []
        for c in range(grid.cols):
            cell = grid.cell(r, c)
            if cell.is_blocked:
                row_items.append(Text("   ", style="on grey15"))
                continue

            letter = cell.letter if state is None else (state[r][c] or " ")
            if Cell(r, c) in incorrect_cells:
                style = "bold red"
            elif Cell(r, c) in correct_cells:
                style = "bold green"
            else:
                style = "white"

            text = Text()
            if cell.number is not None:
                text.append(str(cell.number), style="dim")
            text.append(letter, style=style)
            row_items.append(text)
        table.add_row(*row_items)

    return table


def render_clue_list(clues: Sequence[ClueDefinition], grid: Grid) -> Table:
    table = Table(title="Clues", show_lines=False)
    table.add_column("#", style="cyan", justify="right")
    table.add_column("Dir", style="magenta")
    table.add_column("Clue")
    table.add_column("Len", justify="right")
    table.add_column("Grid #", style="dim", justify="right")

    for clue in clues:
        table.add_row(
            str(clue.number),
            "A" if clue.direction is Direction.ACROSS else "D",
            clue.clue,
            str(clue.length),
            str(grid.number_at(clue.row, clue.col) or ""),
        )
    return table


def render_leaderboard(results: Sequence[RaceResult], total_clues: int) -> Table:
    table = Table(title="RizzWord Leaderboard")
    table.add_column("Rank", style="bold", justify="right")
    table.add_column("Model", style="cyan")
    table.add_column("Correct", style="green", justify="right")
    table.add_column("Wrong", style="red", justify="right")
    table.add_column("Time", style="magenta", justify="right")

    for result in results:
        rank = "🏆" if result.rank == 1 else str(result.rank)
        table.add_row(
            rank,
            result.model_name,
            f"{result.correct_count}/{total_clues}",
            str(result.incorrect_count),
            format_time(result.time_ms),
        )
    return table


def render_race_stats(results: Sequence[RaceResult], total_clues: int) -> Table:
    """Field-wide summary: average accuracy, fastest time and model count."""
    possible = len(results) * total_clues
    accuracy = sum(r.correct_count for r in results) / possible * 100 if possible else 0.0
    fastest = min((r.time_ms for r in results), default=0.0)

    table = Table(title="Race Statistics", show_header=False)
    table.add_column("Stat", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Average accuracy", f"{accuracy:.0f}%")
    table.add_row("Fastest time", format_time(fastest))
    table.add_row("Models raced", str(len(results)))
    return table


class RaceProgress:
    """One progress bar per competitor, fed by race snapshots."""

    def __init__(self, model_names: Sequence[str], total_clues: int, console=None):
        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold cyan]{task.fields[model]:<16}"),
            BarColumn(),
            TextColumn("{task.completed}/{task.total}"),
            TextColumn("[green]{task.fields[correct]}✓[/green] [red]{task.fields[wrong]}✗[/red]"),
            TextColumn("{task.fields[status]}"),
            console=console,
        )
        self._tasks: Dict[str, TaskID] = {
            name: self.progress.add_task(
                name, total=total_clues, model=name, correct=0, wrong=0, status="waiting"
            )
            for name in model_names
        }

    def __enter__(self) -> "RaceProgress":
        self.progress.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.progress.stop()

    def update(self, snapshot: RacerSnapshot) -> None:
        if snapshot.finished:
            status = f"[bold]done {format_time(snapshot.elapsed_ms)}[/bold]"
        elif snapshot.current_clue is not None:
            status = f"solving {snapshot.current_clue.label}"
        else:
            status = snapshot.status.value
        self.progress.update(
            self._tasks[snapshot.model_name],
            completed=snapshot.clue_index,
            correct=snapshot.correct_count,
            wrong=snapshot.incorrect_count,
            status=status,
        )
