"""Solving helpers shared by the race loop and the CLI.

A racer's grid state is a plain list of rows holding either None (unset)
or a single uppercase letter.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from rizzword.puzzle import GRID_COLS, GRID_ROWS, ClueDefinition

PLACEHOLDER = "_"

GridState = List[List[Optional[str]]]


def empty_grid_state(rows: int = GRID_ROWS, cols: int = GRID_COLS) -> GridState:
    """Fresh all-unset grid, one per competitor."""
    return [[None] * cols for _ in range(rows)]


def copy_grid_state(state: GridState) -> GridState:
    return [list(row) for row in state]


def known_letters(state: GridState, clue: ClueDefinition) -> str:
    """Letter pattern for `clue` from what is already on the grid, e.g. "S_G_A"."""
    pattern = []
    for offset in range(clue.length):
        row, col = clue.cell_at(offset)
        letter = None
        if 0 <= row < len(state) and 0 <= col < len(state[row]):
            letter = state[row][col]
        pattern.append(letter or PLACEHOLDER)
    return "".join(pattern)


def apply_answer(state: GridState, clue: ClueDefinition, guess: str) -> GridState:
    """Return a new grid with `guess` written over the cells of `clue`.

    Only as many letters as the guess holds are written, so a short guess
    leaves the tail of the clue untouched. Letters beyond the clue's length
    are dropped.
    """
    new_state = copy_grid_state(state)
    for offset, char in enumerate(guess[:clue.length]):
        row, col = clue.cell_at(offset)
        new_state[row][col] = char.upper()
    return new_state


def placeholder_guess(length: int) -> str:
    """Guess substituted when a solver fails to answer."""
    return PLACEHOLDER * length


@dataclass(frozen=True)
class GuessVerdict:
    """Outcome of checking a guess against a clue.

    `cell_correct[i]` tells whether the letter at offset i matches the
    answer. A wrong word can still have correct cells; the clue itself only
    counts as correct on an exact match.
    """
    is_correct: bool
    cell_correct: Tuple[bool, ...]

    @property
    def correct_letters(self) -> int:
        return sum(self.cell_correct)


def judge_guess(clue: ClueDefinition, guess: str) -> GuessVerdict:
    if guess == clue.answer:
        return GuessVerdict(True, (True,) * clue.length)
    cell_correct = tuple(
        offset < len(guess) and guess[offset] == clue.answer[offset]
        for offset in range(clue.length)
    )
    return GuessVerdict(False, cell_correct)
