"""Prompt template loading and {{VARIABLE}} hydration."""

import logging
import re
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

_PLACEHOLDER_RE = re.compile(r"\{\{([A-Z_]+)\}\}")


class PromptManager:
    """Load markdown prompt templates and fill in context variables.

    Template variables are written as {{NAME}}; context keys are matched
    case-insensitively (``known_letters`` fills ``{{KNOWN_LETTERS}}``).
    """

    def __init__(self, base_dir: Optional[Path] = None):
        self.base_dir = Path(base_dir) if base_dir else Path(__file__).parent
        self._cache: Dict[Path, str] = {}

    def _resolve(self, prompt_file: str) -> Path:
        path = Path(prompt_file)
        if path.is_absolute() or path.exists():
            return path
        return self.base_dir / path

    def load_template(self, prompt_file: str) -> str:
        path = self._resolve(prompt_file)
        if path not in self._cache:
            self._cache[path] = path.read_text(encoding="utf-8")
        return self._cache[path]

    def load_prompt(self, prompt_file: str, context: Dict[str, Any]) -> str:
        template = self.load_template(prompt_file)
        values = {key.upper(): str(value) for key, value in context.items()}

        def _sub(match: re.Match) -> str:
            name = match.group(1)
            if name not in values:
                logger.warning(f"Prompt variable {{{{{name}}}}} missing from context for {prompt_file}")
                return match.group(0)
            return values[name]

        return _PLACEHOLDER_RE.sub(_sub, template)
