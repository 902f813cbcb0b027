"""Race orchestration for RizzWord.

Every competitor works through the same clues in ascending clue-number
order, one at a time, using letters it has already placed as hints. All
competitors race concurrently on one event loop; the race ends once every
competitor has finished, and the field is ranked by correct clues, then by
who finished first.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, List, NamedTuple, Optional, Sequence

from rizzword.puzzle import CROSSWORD, GRID_COLS, GRID_ROWS, ClueDefinition, Grid, build_grid, clues_in_order
from rizzword.solving import (
    GridState,
    apply_answer,
    copy_grid_state,
    empty_grid_state,
    judge_guess,
    known_letters,
    placeholder_guess,
)

logger = logging.getLogger(__name__)

MIN_COMPETITORS = 2
MAX_COMPETITORS = 4

DEFAULT_CLUE_DELAY = 0.1
DEFAULT_COUNTDOWN = 3


class RaceConfigError(ValueError):
    """The race cannot be set up with the given competitors."""


class InsufficientCompetitorsError(RaceConfigError):
    """Fewer than MIN_COMPETITORS competitors were given."""


class RaceStateError(RuntimeError):
    """An operation was attempted in the wrong race phase."""


class RacerStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    FINISHED = "finished"


class CellMark(str, Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"


class Cell(NamedTuple):
    row: int
    col: int


@dataclass(frozen=True)
class RacerSnapshot:
    """Point-in-time view of one competitor for the presentation layer."""
    model_name: str
    status: RacerStatus
    grid: GridState
    correct_cells: FrozenSet[Cell]
    incorrect_cells: FrozenSet[Cell]
    clue_index: int
    total_clues: int
    current_clue: Optional[ClueDefinition]
    correct_count: int
    incorrect_count: int
    elapsed_ms: float

    @property
    def finished(self) -> bool:
        return self.status is RacerStatus.FINISHED

    @property
    def progress(self) -> float:
        """Fraction of clues answered, 0.0 to 1.0."""
        if not self.total_clues:
            return 1.0
        return self.clue_index / self.total_clues


@dataclass(frozen=True)
class RaceResult:
    """Final tally for one competitor."""
    model_name: str
    correct_count: int
    incorrect_count: int
    time_ms: float
    end_time: float
    final_grid: GridState = field(repr=False)
    correct_cells: FrozenSet[Cell] = field(repr=False)
    incorrect_cells: FrozenSet[Cell] = field(repr=False)
    rank: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "model": self.model_name,
            "rank": self.rank,
            "correct": self.correct_count,
            "incorrect": self.incorrect_count,
            "time_ms": round(self.time_ms, 1),
            "grid": ["".join(letter or "." for letter in row) for row in self.final_grid],
            "correct_cells": sorted(list(c) for c in self.correct_cells),
            "incorrect_cells": sorted(list(c) for c in self.incorrect_cells),
        }


def rank_results(results: Sequence[RaceResult]) -> List[RaceResult]:
    """Sort by correct clues (most first), then finish time (earliest first); assign ranks 1..N."""
    ordered = sorted(results, key=lambda r: (-r.correct_count, r.end_time))
    return [replace(result, rank=i) for i, result in enumerate(ordered, start=1)]


class RacerHandle:
    """Live state owned by a single competitor.

    Only that competitor's solving loop mutates it; everyone else reads
    through `snapshot()`.
    """

    def __init__(self, player, clues: Sequence[ClueDefinition], rows: int, cols: int, clock: Callable[[], float]):
        self.player = player
        self.model_name: str = player.model_name
        self._clues = clues
        self._rows = rows
        self._cols = cols
        self._clock = clock
        self._reset()

    def _reset(self) -> None:
        self.status = RacerStatus.IDLE
        self.grid: GridState = empty_grid_state(self._rows, self._cols)
        self.marks: List[List[Optional[CellMark]]] = [[None] * self._cols for _ in range(self._rows)]
        self.clue_index = 0
        self.correct_count = 0
        self.incorrect_count = 0
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None

    def _begin(self, start_time: float) -> None:
        self.status = RacerStatus.RUNNING
        self.start_time = start_time

    def _finish(self, end_time: float) -> None:
        self.status = RacerStatus.FINISHED
        self.end_time = end_time
        self.clue_index = len(self._clues)

    def record(self, clue: ClueDefinition, guess: str) -> bool:
        """Write `guess` into the grid, mark its cells and count the clue.

        Returns True when the clue was answered exactly.
        """
        self.grid = apply_answer(self.grid, clue, guess)
        verdict = judge_guess(clue, guess)
        for offset, (row, col) in enumerate(clue.cells()):
            self.marks[row][col] = CellMark.CORRECT if verdict.cell_correct[offset] else CellMark.INCORRECT
        if verdict.is_correct:
            self.correct_count += 1
        else:
            self.incorrect_count += 1
        return verdict.is_correct

    def _cells_marked(self, mark: CellMark) -> FrozenSet[Cell]:
        return frozenset(
            Cell(r, c)
            for r, row in enumerate(self.marks)
            for c, value in enumerate(row)
            if value is mark
        )

    @property
    def correct_cells(self) -> FrozenSet[Cell]:
        return self._cells_marked(CellMark.CORRECT)

    @property
    def incorrect_cells(self) -> FrozenSet[Cell]:
        return self._cells_marked(CellMark.INCORRECT)

    @property
    def finished(self) -> bool:
        return self.status is RacerStatus.FINISHED

    @property
    def elapsed_ms(self) -> float:
        if self.start_time is None:
            return 0.0
        end = self.end_time if self.end_time is not None else self._clock()
        return (end - self.start_time) * 1000

    def snapshot(self) -> RacerSnapshot:
        current = self._clues[self.clue_index] if self.clue_index < len(self._clues) else None
        return RacerSnapshot(
            model_name=self.model_name,
            status=self.status,
            grid=copy_grid_state(self.grid),
            correct_cells=self.correct_cells,
            incorrect_cells=self.incorrect_cells,
            clue_index=self.clue_index,
            total_clues=len(self._clues),
            current_clue=current if self.status is RacerStatus.RUNNING else None,
            correct_count=self.correct_count,
            incorrect_count=self.incorrect_count,
            elapsed_ms=self.elapsed_ms,
        )

    def result(self) -> RaceResult:
        if not self.finished or self.end_time is None:
            raise RaceStateError(f"{self.model_name} has not finished")
        return RaceResult(
            model_name=self.model_name,
            correct_count=self.correct_count,
            incorrect_count=self.incorrect_count,
            time_ms=self.elapsed_ms,
            end_time=self.end_time,
            final_grid=copy_grid_state(self.grid),
            correct_cells=self.correct_cells,
            incorrect_cells=self.incorrect_cells,
        )


class Race:
    """A race of several competitors over the same crossword.

    Players are any objects with a unique `model_name` and an async
    `solve_clue(clue_text, length, direction, known_letters, clue_number)`
    that returns the guessed word or raises.
    """

    def __init__(
        self,
        players: Sequence,
        clues: Sequence[ClueDefinition] = CROSSWORD,
        rows: int = GRID_ROWS,
        cols: int = GRID_COLS,
        clue_delay: float = DEFAULT_CLUE_DELAY,
        countdown: int = DEFAULT_COUNTDOWN,
        on_progress: Optional[Callable[[RacerSnapshot], None]] = None,
        on_countdown: Optional[Callable[[int], None]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        players = list(players)
        if len(players) < MIN_COMPETITORS:
            raise InsufficientCompetitorsError(
                f"A race needs at least {MIN_COMPETITORS} competitors, got {len(players)}"
            )
        if len(players) > MAX_COMPETITORS:
            raise RaceConfigError(
                f"A race allows at most {MAX_COMPETITORS} competitors, got {len(players)}"
            )
        names = [p.model_name for p in players]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise RaceConfigError(f"Duplicate competitors: {', '.join(duplicates)}")

        self.grid: Grid = build_grid(clues, rows, cols)
        self.clues: List[ClueDefinition] = clues_in_order(clues)
        self.clue_delay = clue_delay
        self.countdown = countdown
        self.on_progress = on_progress
        self.on_countdown = on_countdown
        self._clock = clock

        self._handles: Dict[str, RacerHandle] = {
            p.model_name: RacerHandle(p, self.clues, rows, cols, clock) for p in players
        }
        self._tasks: List[asyncio.Task] = []
        self._starting = False
        self.start_time: Optional[float] = None
        self.results: Optional[List[RaceResult]] = None

    @property
    def handles(self) -> List[RacerHandle]:
        return list(self._handles.values())

    def handle(self, model_name: str) -> RacerHandle:
        return self._handles[model_name]

    @property
    def is_running(self) -> bool:
        """True from the first countdown tick until every competitor task is done."""
        if self._starting:
            return True
        return bool(self._tasks) and not all(task.done() for task in self._tasks)

    @property
    def is_finished(self) -> bool:
        return all(h.finished for h in self._handles.values())

    async def start(self) -> List[RacerHandle]:
        """Count down, then launch every competitor at the same instant."""
        if self._starting or self._tasks:
            raise RaceStateError("Race already started; reset() it first")

        # Claimed before the first await so a second start() during the countdown is refused
        self._starting = True
        try:
            for n in range(self.countdown, 0, -1):
                if self.on_countdown:
                    self.on_countdown(n)
                await asyncio.sleep(1)
        except BaseException:
            self._starting = False
            raise

        self.start_time = self._clock()
        for handle in self._handles.values():
            handle._begin(self.start_time)

        logger.info(f"Race started: {', '.join(self._handles)} on {len(self.clues)} clues")

        self._tasks = [
            asyncio.create_task(self._run_racer(handle), name=f"racer:{handle.model_name}")
            for handle in self._handles.values()
        ]
        self._starting = False
        return self.handles

    async def finish(self) -> List[RaceResult]:
        """Wait for every competitor, then rank them."""
        if not self._tasks:
            raise RaceStateError("Race has not started")
        results = await asyncio.gather(*self._tasks)
        self.results = rank_results(results)
        for result in self.results:
            logger.info(
                f"#{result.rank} {result.model_name}: {result.correct_count}/{len(self.clues)} "
                f"correct in {result.time_ms:.0f}ms"
            )
        return self.results

    async def run(self) -> List[RaceResult]:
        await self.start()
        return await self.finish()

    def leader(self) -> Optional[RaceResult]:
        """Current leader, reported only once every competitor has finished."""
        if not self.is_finished:
            return None
        return rank_results([h.result() for h in self._handles.values()])[0]

    def reset(self) -> None:
        """Return every competitor to idle with an empty grid."""
        if self.is_running:
            raise RaceStateError("Cannot reset a race while it is running")
        for handle in self._handles.values():
            handle._reset()
        self._tasks = []
        self.start_time = None
        self.results = None

    def _notify(self, handle: RacerHandle) -> None:
        if self.on_progress:
            self.on_progress(handle.snapshot())

    async def _solve(self, handle: RacerHandle, clue: ClueDefinition, hint: str) -> str:
        try:
            return await handle.player.solve_clue(
                clue.clue, clue.length, clue.direction.value, hint, clue.number
            )
        except Exception as e:
            logger.error(f"{handle.model_name} failed on {clue.label}: {e}; scoring as incorrect")
            return placeholder_guess(clue.length)

    async def _run_racer(self, handle: RacerHandle) -> RaceResult:
        last = len(self.clues) - 1
        for index, clue in enumerate(self.clues):
            handle.clue_index = index
            self._notify(handle)

            hint = known_letters(handle.grid, clue)
            guess = await self._solve(handle, clue, hint)
            correct = handle.record(clue, guess)
            handle.clue_index = index + 1

            logger.info(
                f"{handle.model_name} {clue.label}: {guess} "
                f"({'correct' if correct else 'incorrect'}, hint {hint})"
            )
            self._notify(handle)

            if self.clue_delay and index < last:
                await asyncio.sleep(self.clue_delay)

        handle._finish(self._clock())
        self._notify(handle)
        return handle.result()
