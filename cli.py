"""Command-line interface for RizzWord - Gen Z slang crossword race for LLMs.

This is the unified CLI entry point:
- `rizzword race run` - Race models on the crossword
- `rizzword race list-models` - Show the model roster
- `rizzword race show-puzzle` - Show the grid and clues
- `rizzword race prompt` - Preview a solver prompt
"""

import typer
from rich.console import Console

from rizzword.cli_rizzword import app as rizzword_app

app = typer.Typer(
    help="RizzWord - Which AI has the most rizz?",
    no_args_is_help=True,
)
console = Console()

app.add_typer(rizzword_app, name="race", help="Race LLMs on a Gen Z slang crossword")


@app.callback()
def main():
    """RizzWord - LLM crossword race.

    Examples:

        # Race the default models
        rizzword race run

        # Pick the field yourself
        rizzword race run -m gemini-flash -m claude-haiku -m grok-4

        # Look at the puzzle
        rizzword race show-puzzle --solution
    """
    pass


@app.command()
def version():
    """Show version information."""
    from rizzword import __version__ as rizzword_version
    from shared import __version__ as shared_version

    console.print("[bold]RizzWord[/bold]")
    console.print(f"  rizzword: {rizzword_version}")
    console.print(f"  shared: {shared_version}")


if __name__ == "__main__":
    app()
