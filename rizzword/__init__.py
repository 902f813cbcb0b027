"""RizzWord: an LLM race on a Gen Z slang crossword.

Several models solve the same 13-clue crossword at the same time:
- Each model answers clues in ascending clue-number order, one at a time
- Letters already placed are passed along as hints for crossing clues
- A failed call scores the clue as wrong; the race carries on
- Ranking: most correct clues first, earliest finish breaks ties
"""

from rizzword.puzzle import CROSSWORD, build_grid, clues_in_order
from rizzword.race import Race, RaceResult, rank_results

__version__ = "0.1.0"

__all__ = ["CROSSWORD", "build_grid", "clues_in_order", "Race", "RaceResult", "rank_results"]
