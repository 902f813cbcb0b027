"""OpenRouter API adapter for LLM calls.

This is the model-serving gateway used by RizzWord competitors. It provides:
- Function-based API (`chat`) for direct chat-completion calls
- Class-based API (`OpenRouterAdapter`) that caches model mappings
- Thinking model detection from model_mappings.yml

Failed calls are not retried; a failure is final for the clue that
triggered it.
"""

import logging
import os
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Tuple

import requests
import yaml

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"


def _get_shared_inputs_path() -> Path:
    """Get path to shared/inputs directory."""
    return Path(__file__).parent.parent / "inputs"


def _load_mappings_file(mappings_file: Optional[Path] = None) -> Dict[str, Any]:
    if mappings_file is None:
        mappings_file = _get_shared_inputs_path() / "model_mappings.yml"

    try:
        with open(mappings_file, "r") as f:
            return yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning(f"Model mappings file not found: {mappings_file}")
        return {}
    except yaml.YAMLError as e:
        logger.error(f"Error parsing model mappings: {e}")
        return {}


def load_model_mappings(mappings_file: Optional[Path] = None) -> Dict[str, Any]:
    """Load model mappings from YAML configuration file."""
    return _load_mappings_file(mappings_file).get("models", {})


def load_default_models(mappings_file: Optional[Path] = None) -> List[str]:
    """Load the list of models pre-selected for a race."""
    return list(_load_mappings_file(mappings_file).get("default_models", []))


def flatten_mappings(mappings: Dict[str, Any]) -> Dict[str, str]:
    """Collapse the thinking/non_thinking groups into one name->id dict."""
    flat: Dict[str, str] = {}
    if "thinking" in mappings:
        flat.update(mappings["thinking"])
    if "non_thinking" in mappings:
        flat.update(mappings["non_thinking"])
    for k, v in mappings.items():
        if k not in ("thinking", "non_thinking") and isinstance(v, str):
            flat[k] = v
    return flat


# Cache the thinking models set (loaded once)
_THINKING_MODELS: Optional[Set[str]] = None


def _get_thinking_models() -> Set[str]:
    """Get cached thinking models set."""
    global _THINKING_MODELS
    if _THINKING_MODELS is None:
        _THINKING_MODELS = set(load_model_mappings().get("thinking", {}).values())
    return _THINKING_MODELS


def _get_api_key() -> str:
    """Get OpenRouter API key from environment."""
    api_key = os.getenv("OPENROUTER_API_KEY")
    if not api_key:
        raise ValueError("OPENROUTER_API_KEY environment variable not set")
    return api_key


def _get_base_url() -> str:
    return os.getenv("OPENROUTER_BASE_URL", DEFAULT_BASE_URL).rstrip("/")


def resolve_model_id(model_name: str, mappings: Optional[Dict[str, Any]] = None) -> str:
    """Resolve a CLI model name to a gateway model ID.

    Args:
        model_name: CLI model name (e.g., "gemini-flash") or full model ID
        mappings: Optional pre-loaded mappings dict

    Returns:
        Gateway model ID (e.g., "google/gemini-2.5-flash")
    """
    if mappings is None:
        mappings = load_model_mappings()
    # Unknown names are assumed to already be full model IDs
    return flatten_mappings(mappings).get(model_name, model_name)


def chat(messages: List[Dict], model: str, timeout: int = 300, temperature: float = 0.1) -> Dict:
    """
    Call the Chat Completions API (function-based API).

    Args:
        messages: List of message objects with 'role' and 'content'
        model: Gateway model ID (e.g., 'openai/gpt-5-mini')
        timeout: Request timeout in seconds
        temperature: Sampling temperature for non-thinking models

    Returns:
        Raw API response JSON including usage and cost info

    Raises:
        requests.RequestException: On transport or API errors
    """
    url = f"{_get_base_url()}/chat/completions"

    headers = {
        "Authorization": f"Bearer {_get_api_key()}",
        "Content-Type": "application/json",
        "X-Title": "RizzWord",
    }

    is_thinking_model = model in _get_thinking_models()

    payload: Dict[str, Any] = {
        "model": model,
        "messages": messages,
        "usage": {"include": True},
    }

    if is_thinking_model:
        # Thinking models reject temperature and need a longer timeout
        timeout = max(timeout, 600)
    else:
        payload["temperature"] = temperature

    response = requests.post(url, json=payload, headers=headers, timeout=timeout)

    if not response.ok:
        try:
            error_msg = response.json().get("error", {}).get("message", "")
        except ValueError:
            error_msg = ""
        if error_msg:
            logger.error(f"[Gateway] {response.status_code} for {model}: {error_msg}")
            error = requests.HTTPError(f"Gateway error for model '{model}': {error_msg}")
            error.response = response
            raise error

    response.raise_for_status()

    try:
        return response.json()
    except ValueError as e:
        raise requests.RequestException(f"Malformed JSON from gateway for model '{model}'") from e


class OpenRouterAdapter:
    """Class-based adapter for calling AI models through the gateway.

    Caches model mappings so that a competitor solving many clues in a row
    resolves its model once.
    """

    def __init__(self, model_mappings_file: Optional[str] = None):
        self.api_key = _get_api_key()

        if model_mappings_file:
            self.model_mappings = load_model_mappings(Path(model_mappings_file))
        else:
            self.model_mappings = load_model_mappings()

        logger.info(f"Loaded model mappings with {len(self._flatten_mappings())} models")

    def _flatten_mappings(self) -> Dict[str, str]:
        """Flatten hierarchical mappings to simple name->id dict."""
        return flatten_mappings(self.model_mappings)

    def resolve_model(self, model_name: str) -> str:
        """Resolve CLI model name to gateway model ID."""
        return resolve_model_id(model_name, self.model_mappings)

    def call_model_with_metadata(self, model_name: str, prompt: str) -> Tuple[str, Dict]:
        """Call AI model and return the content with detailed metadata."""
        model_id = self.resolve_model(model_name)

        if model_name not in self._flatten_mappings():
            logger.warning(f"Model '{model_name}' not found in mappings, using as-is: {model_id}")

        logger.debug(f"Calling model {model_id} (from {model_name}) with prompt length: {len(prompt)}")

        start_time = time.time()
        response_data = chat([{"role": "user", "content": prompt}], model_id)
        latency_ms = (time.time() - start_time) * 1000

        content = ""
        if response_data.get("choices"):
            content = response_data["choices"][0].get("message", {}).get("content", "") or ""

        usage = response_data.get("usage", {}) or {}
        metadata = {
            "model_id": model_id,
            "latency_ms": latency_ms,
            "input_tokens": usage.get("prompt_tokens", 0),
            "output_tokens": usage.get("completion_tokens", 0),
            "total_tokens": usage.get("total_tokens", 0),
            "openrouter_cost": usage.get("cost", 0.0) or 0.0,
            "upstream_cost": 0.0,
        }

        cost_details = usage.get("cost_details", {})
        if cost_details and "upstream_inference_cost" in cost_details:
            metadata["upstream_cost"] = float(cost_details["upstream_inference_cost"])

        logger.info(
            f"Model call completed. Tokens: {metadata['total_tokens']}, "
            f"Latency: {latency_ms:.1f}ms"
        )

        return content, metadata
