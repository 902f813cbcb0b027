"""Player classes for RizzWord races."""

import asyncio
import logging
import re
from pathlib import Path
from typing import Dict, Optional

import requests

from rizzword.prompt_manager import PromptManager
from rizzword.solving import PLACEHOLDER
from shared.adapters.openrouter_adapter import OpenRouterAdapter
from shared.utils.logging import log_exchange
from shared.utils.timing import Timer

logger = logging.getLogger(__name__)

DEFAULT_PROMPT_FILE = "prompts/solver.md"

_NON_LETTERS = re.compile(r"[^A-Z]")


class SolverError(Exception):
    """A competitor could not produce an answer for a clue."""


def normalize_answer(text: str) -> str:
    """Uppercase the reply and keep only A-Z."""
    return _NON_LETTERS.sub("", (text or "").strip().upper())


def build_prompt_context(
    clue_text: str, length: int, direction: str, known_letters: str
) -> Dict[str, str]:
    """Template context for the solver prompt.

    The known-letters line is only shown once at least one letter is known.
    """
    has_known = known_letters.replace(PLACEHOLDER, "") != ""
    known_line = (
        f"Known letters: {known_letters} (underscores are unknown letters)"
        if has_known
        else ""
    )
    return {
        "clue": clue_text,
        "length": str(length),
        "direction": direction,
        "known_letters_line": known_line,
    }


class AIPlayer:
    """AI competitor using a gateway model to solve crossword clues."""

    def __init__(
        self,
        model_name: str,
        prompt_file: str = DEFAULT_PROMPT_FILE,
        log_dir: Optional[Path] = None,
    ):
        self.model_name = model_name
        self.prompt_file = prompt_file
        self.log_dir = log_dir
        self._adapter = None
        self.prompt_manager = PromptManager()
        self._last_call_metadata: Optional[Dict] = None

        logger.info(f"Created AI player with model: {model_name}")

    @property
    def adapter(self):
        """Lazy initialization of the gateway adapter."""
        if self._adapter is None:
            self._adapter = OpenRouterAdapter()
        return self._adapter

    def get_last_call_metadata(self) -> Optional[Dict]:
        """Get metadata from the last AI call."""
        return self._last_call_metadata

    def build_prompt(self, clue_text: str, length: int, direction: str, known_letters: str) -> str:
        return self.prompt_manager.load_prompt(
            self.prompt_file,
            build_prompt_context(clue_text, length, direction, known_letters),
        )

    async def solve_clue(
        self,
        clue_text: str,
        length: int,
        direction: str,
        known_letters: str,
        clue_number: int,
    ) -> str:
        """Ask the model for one answer.

        The blocking HTTP call runs in a worker thread so other competitors
        keep racing while this one waits.

        Raises:
            SolverError: On transport errors, non-success responses, or a
                reply with no letters in it.
        """
        prompt = self.build_prompt(clue_text, length, direction, known_letters)

        try:
            with Timer() as timer:
                response, metadata = await asyncio.to_thread(
                    self.adapter.call_model_with_metadata, self.model_name, prompt
                )
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Error solving clue {clue_number} {direction} for {self.model_name}: {e}")
            raise SolverError(str(e)) from e

        answer = normalize_answer(response)

        self._last_call_metadata = dict(metadata)
        self._last_call_metadata.update({
            "clue_number": clue_number,
            "direction": direction,
            "wall_ms": timer.elapsed_ms,
            "answer": answer,
        })

        if self.log_dir is not None:
            log_exchange(self.log_dir, self.model_name, prompt, response, self._last_call_metadata)

        if not answer:
            logger.error(f"{self.model_name} returned no letters for clue {clue_number} {direction}: {response!r}")
            raise SolverError(f"Empty answer from {self.model_name}")

        logger.info(f"{self.model_name} answered {clue_number} {direction}: {answer}")
        return answer
