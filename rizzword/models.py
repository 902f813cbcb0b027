"""Model roster for RizzWord races, backed by shared/inputs/model_mappings.yml."""

from pathlib import Path
from typing import Dict, List, Optional

from shared.adapters import flatten_mappings, load_default_models, load_model_mappings


def available_models(mappings_file: Optional[Path] = None) -> Dict[str, str]:
    """CLI model name -> gateway model ID."""
    return flatten_mappings(load_model_mappings(mappings_file))


def default_models(mappings_file: Optional[Path] = None) -> List[str]:
    """Models pre-selected for a race, restricted to ones that are mapped."""
    mapped = available_models(mappings_file)
    return [name for name in load_default_models(mappings_file) if name in mapped]


def invalid_models(names: List[str], mappings_file: Optional[Path] = None) -> List[str]:
    """Names that do not appear in the model mappings."""
    mapped = available_models(mappings_file)
    return [name for name in names if name not in mapped]
