"""Gateway adapters for LLM calls."""

from .openrouter_adapter import (
    OpenRouterAdapter,
    flatten_mappings,
    load_default_models,
    load_model_mappings,
    resolve_model_id,
)

__all__ = [
    "OpenRouterAdapter",
    "flatten_mappings",
    "load_default_models",
    "load_model_mappings",
    "resolve_model_id",
]
