"""Crossword puzzle definition and grid generation for RizzWord.

Grid coordinates are (row, col) with row 0 at the top and col 0 at the left.
Across words run left-to-right, down words run top-to-bottom.

Grid layout (12 rows x 10 cols):

          0 1 2 3 4 5 6 7 8 9
       0  S I G M A # B R U V
       1  K # R S U S U # # #
       2  I # I # R # S # # #
       3  B # D # A # S # # #
       4  I # D # # # I # # #
       5  D # Y # # # N # # #
       6  I # # R I Z Z # # #
       7  # # # A # # # # # #
       8  S A L T Y # C A P #
       9  # # # I # # O # # #
      10  # # # O H I O # # #
      11  # # # # # # K # # #

Words intersect at shared letters so a competitor can use letters it has
already placed as hints for later clues.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

GRID_ROWS = 12
GRID_COLS = 10

_ANSWER_RE = re.compile(r"^[A-Z]+$")


class PuzzleDataError(ValueError):
    """Raised when clue definitions are inconsistent or out of bounds."""


class Direction(str, Enum):
    ACROSS = "across"
    DOWN = "down"


@dataclass(frozen=True)
class ClueDefinition:
    """A single clue: hint text, target answer and where it sits on the grid."""
    number: int
    direction: Direction
    clue: str
    answer: str
    row: int
    col: int

    @property
    def length(self) -> int:
        return len(self.answer)

    def cell_at(self, offset: int) -> Tuple[int, int]:
        """(row, col) of the letter at `offset` along this clue."""
        if self.direction is Direction.ACROSS:
            return self.row, self.col + offset
        return self.row + offset, self.col

    def cells(self) -> List[Tuple[int, int]]:
        return [self.cell_at(i) for i in range(self.length)]

    @property
    def label(self) -> str:
        return f"{self.number} {self.direction.value}"


def _across(number: int, clue: str, answer: str, row: int, col: int) -> ClueDefinition:
    return ClueDefinition(number, Direction.ACROSS, clue, answer, row, col)


def _down(number: int, clue: str, answer: str, row: int, col: int) -> ClueDefinition:
    return ClueDefinition(number, Direction.DOWN, clue, answer, row, col)


CROSSWORD: Tuple[ClueDefinition, ...] = (
    _across(1, "lone wolf grindset archetype, peak masculinity", "SIGMA", 0, 0),
    _across(2, "Australian term for 'bro' or 'mate'", "BRUV", 0, 6),
    _across(3, "when the imposter is acting kinda...", "SUS", 1, 3),
    _across(7, "charisma stat that gets you the number fr fr", "RIZZ", 6, 3),
    _across(8, "being bitter about taking an L", "SALTY", 8, 0),
    _across(9, "no ___ = i'm being completely serious rn", "CAP", 8, 6),
    _across(12, "state where literally anything weird can happen", "OHIO", 10, 3),
    _down(1, "toilet-dwelling menace with an absolute banger theme song", "SKIBIDI", 0, 0),
    _down(4, "post-touchdown dance that went viral", "GRIDDY", 0, 2),
    _down(5, "invisible points you gain (+100) or lose (-1000)", "AURA", 0, 4),
    _down(6, "when food is so good it's absolutely ___", "BUSSIN", 0, 6),
    _down(10, "getting L + ___ in the comments", "RATIO", 6, 3),
    _down(11, "'let him ___'", "COOK", 8, 6),
)


@dataclass(frozen=True)
class GridCell:
    """One grid square. `letter` is None for blocked cells."""
    letter: Optional[str] = None
    number: Optional[int] = None
    across_clue: Optional[int] = None
    down_clue: Optional[int] = None

    @property
    def is_blocked(self) -> bool:
        return self.letter is None


@dataclass(frozen=True)
class Grid:
    """Immutable solution grid built from a set of clue definitions."""
    cells: Tuple[Tuple[GridCell, ...], ...]
    numbers: Mapping[Tuple[int, int], int] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        object.__setattr__(self, "numbers", MappingProxyType(dict(self.numbers)))

    @property
    def rows(self) -> int:
        return len(self.cells)

    @property
    def cols(self) -> int:
        return len(self.cells[0]) if self.cells else 0

    def cell(self, row: int, col: int) -> GridCell:
        return self.cells[row][col]

    def is_blocked(self, row: int, col: int) -> bool:
        return self.cells[row][col].is_blocked

    def number_at(self, row: int, col: int) -> Optional[int]:
        return self.numbers.get((row, col))

    def active_cells(self) -> List[Tuple[int, int]]:
        return [
            (r, c)
            for r in range(self.rows)
            for c in range(self.cols)
            if not self.cells[r][c].is_blocked
        ]


def validate_clues(
    clues: Iterable[ClueDefinition],
    rows: int = GRID_ROWS,
    cols: int = GRID_COLS,
) -> None:
    """Check answers, bounds and intersection consistency.

    Raises:
        PuzzleDataError: On the first problem found.
    """
    letters: Dict[Tuple[int, int], Tuple[str, ClueDefinition]] = {}
    seen = set()

    for clue in clues:
        key = (clue.number, clue.direction)
        if key in seen:
            raise PuzzleDataError(f"Duplicate clue {clue.label}")
        seen.add(key)

        if not _ANSWER_RE.match(clue.answer):
            raise PuzzleDataError(f"Clue {clue.label} answer must be A-Z only: {clue.answer!r}")

        for offset, (row, col) in enumerate(clue.cells()):
            if not (0 <= row < rows and 0 <= col < cols):
                raise PuzzleDataError(
                    f"Clue {clue.label} runs off the {rows}x{cols} grid at ({row}, {col})"
                )
            letter = clue.answer[offset]
            if (row, col) in letters:
                other_letter, other = letters[(row, col)]
                if other_letter != letter:
                    raise PuzzleDataError(
                        f"Clues {other.label} and {clue.label} disagree at ({row}, {col}): "
                        f"{other_letter} vs {letter}"
                    )
            else:
                letters[(row, col)] = (letter, clue)


def number_positions(clues: Iterable[ClueDefinition]) -> Dict[Tuple[int, int], int]:
    """Assign display numbers to distinct start cells in row-major order.

    An across and a down clue starting on the same cell share one number.
    """
    starts = sorted({(clue.row, clue.col) for clue in clues})
    return {pos: i for i, pos in enumerate(starts, start=1)}


def build_grid(
    clues: Sequence[ClueDefinition] = CROSSWORD,
    rows: int = GRID_ROWS,
    cols: int = GRID_COLS,
) -> Grid:
    """Build the solution grid: letters, start numbers and clue membership."""
    validate_clues(clues, rows, cols)

    letters: List[List[Optional[str]]] = [[None] * cols for _ in range(rows)]
    across: List[List[Optional[int]]] = [[None] * cols for _ in range(rows)]
    down: List[List[Optional[int]]] = [[None] * cols for _ in range(rows)]

    for clue in clues:
        owners = across if clue.direction is Direction.ACROSS else down
        for offset, (row, col) in enumerate(clue.cells()):
            letters[row][col] = clue.answer[offset]
            owners[row][col] = clue.number

    numbers = number_positions(clues)

    cells = tuple(
        tuple(
            GridCell(
                letter=letters[r][c],
                number=numbers.get((r, c)),
                across_clue=across[r][c],
                down_clue=down[r][c],
            )
            for c in range(cols)
        )
        for r in range(rows)
    )
    return Grid(cells=cells, numbers=numbers)


def clues_in_order(clues: Sequence[ClueDefinition] = CROSSWORD) -> List[ClueDefinition]:
    """Clues in solving order: ascending clue number, across before down on ties."""
    return sorted(clues, key=lambda c: (c.number, c.direction is Direction.DOWN))


def find_clue(
    number: int,
    direction: Direction,
    clues: Sequence[ClueDefinition] = CROSSWORD,
) -> ClueDefinition:
    for clue in clues:
        if clue.number == number and clue.direction is direction:
            return clue
    raise KeyError(f"No clue {number} {direction.value}")
