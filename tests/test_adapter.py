"""Tests for the gateway adapter and model roster."""

from unittest.mock import Mock, patch

import pytest
import requests

from rizzword.models import available_models, default_models, invalid_models
from shared.adapters.openrouter_adapter import OpenRouterAdapter, chat, resolve_model_id


class TestOpenRouterAdapter:
    """Test cost extraction and metadata handling in OpenRouterAdapter."""

    def setup_method(self):
        with patch.dict("os.environ", {"OPENROUTER_API_KEY": "test_key"}):
            self.adapter = OpenRouterAdapter()

    def test_metadata_extraction(self):
        mock_api_response = {
            "choices": [{"message": {"content": "RIZZ"}}],
            "usage": {
                "prompt_tokens": 100,
                "completion_tokens": 2,
                "total_tokens": 102,
                "cost": 0.005,
                "cost_details": {"upstream_inference_cost": 0.003},
            },
        }

        with patch("shared.adapters.openrouter_adapter.chat", return_value=mock_api_response) as mock_chat:
            response, metadata = self.adapter.call_model_with_metadata("gemini-flash", "Test prompt")

        assert response == "RIZZ"
        assert mock_chat.call_args[0][1] == "google/gemini-2.5-flash"
        assert metadata["model_id"] == "google/gemini-2.5-flash"
        assert metadata["input_tokens"] == 100
        assert metadata["output_tokens"] == 2
        assert metadata["openrouter_cost"] == 0.005
        assert metadata["upstream_cost"] == 0.003

    def test_no_usage_info(self):
        mock_api_response = {"choices": [{"message": {"content": "CAP"}}], "usage": {}}

        with patch("shared.adapters.openrouter_adapter.chat", return_value=mock_api_response):
            response, metadata = self.adapter.call_model_with_metadata("gemini-flash", "Test prompt")

        assert response == "CAP"
        assert metadata["openrouter_cost"] == 0.0
        assert metadata["upstream_cost"] == 0.0

    def test_null_content(self):
        mock_api_response = {"choices": [{"message": {"content": None}}]}

        with patch("shared.adapters.openrouter_adapter.chat", return_value=mock_api_response):
            response, _ = self.adapter.call_model_with_metadata("gemini-flash", "Test prompt")

        assert response == ""

    def test_unknown_model_passed_through(self):
        assert self.adapter.resolve_model("vendor/some-model") == "vendor/some-model"

    def test_missing_api_key(self):
        with patch.dict("os.environ", {}, clear=True):
            with pytest.raises(ValueError):
                OpenRouterAdapter()

    def test_resolve_model_from_custom_mappings(self, tmp_path):
        mappings_file = tmp_path / "mappings.yml"
        mappings_file.write_text("models:\n  thinking:\n    deep: vendor/deep\n  non_thinking:\n    fast: vendor/fast\n")
        with patch.dict("os.environ", {"OPENROUTER_API_KEY": "test_key"}):
            adapter = OpenRouterAdapter(str(mappings_file))
        assert adapter.resolve_model("deep") == "vendor/deep"
        assert adapter.resolve_model("fast") == "vendor/fast"


class TestChat:
    """Test cases for the function-based chat call."""

    def _response(self, ok=True, status=200, payload=None):
        response = Mock()
        response.ok = ok
        response.status_code = status
        response.json.return_value = payload or {}
        if not ok:
            response.raise_for_status.side_effect = requests.HTTPError(f"{status} error")
        return response

    def test_success_payload(self):
        payload = {"choices": [{"message": {"content": "AURA"}}]}
        with patch.dict("os.environ", {"OPENROUTER_API_KEY": "test_key"}):
            with patch("shared.adapters.openrouter_adapter.requests.post", return_value=self._response(payload=payload)) as post:
                assert chat([{"role": "user", "content": "hi"}], "openai/gpt-5-mini") == payload

        sent = post.call_args.kwargs["json"]
        assert sent["model"] == "openai/gpt-5-mini"
        assert sent["temperature"] == 0.1
        assert post.call_args.kwargs["headers"]["Authorization"] == "Bearer test_key"

    def test_thinking_model_has_no_temperature(self):
        with patch.dict("os.environ", {"OPENROUTER_API_KEY": "test_key"}):
            with patch("shared.adapters.openrouter_adapter.requests.post", return_value=self._response(payload={})) as post:
                chat([{"role": "user", "content": "hi"}], "google/gemini-3-pro-preview")

        assert "temperature" not in post.call_args.kwargs["json"]
        assert post.call_args.kwargs["timeout"] >= 600

    def test_error_message_surfaces(self):
        response = self._response(ok=False, status=500, payload={"error": {"message": "upstream down"}})
        with patch.dict("os.environ", {"OPENROUTER_API_KEY": "test_key"}):
            with patch("shared.adapters.openrouter_adapter.requests.post", return_value=response):
                with pytest.raises(requests.HTTPError, match="upstream down"):
                    chat([{"role": "user", "content": "hi"}], "openai/gpt-5-mini")

    def test_error_without_body(self):
        response = self._response(ok=False, status=502)
        response.json.side_effect = ValueError("not json")
        with patch.dict("os.environ", {"OPENROUTER_API_KEY": "test_key"}):
            with patch("shared.adapters.openrouter_adapter.requests.post", return_value=response):
                with pytest.raises(requests.HTTPError):
                    chat([{"role": "user", "content": "hi"}], "openai/gpt-5-mini")


class TestModelRoster:
    def test_resolve_model_id(self):
        mappings = {"non_thinking": {"fast": "vendor/fast"}, "thinking": {"deep": "vendor/deep"}}
        assert resolve_model_id("fast", mappings) == "vendor/fast"
        assert resolve_model_id("deep", mappings) == "vendor/deep"
        assert resolve_model_id("other/model", mappings) == "other/model"

    def test_available_models(self):
        models = available_models()
        assert models["gpt-5-mini"] == "openai/gpt-5-mini"
        assert "gemini-3-pro" in models

    def test_default_models_are_mapped(self):
        defaults = default_models()
        assert len(defaults) >= 2
        assert not invalid_models(defaults)

    def test_invalid_models(self):
        assert invalid_models(["gemini-flash", "gpt-99"]) == ["gpt-99"]

    def test_custom_mappings_file(self, tmp_path):
        mappings_file = tmp_path / "mappings.yml"
        mappings_file.write_text(
            "models:\n  non_thinking:\n    a: vendor/a\n    b: vendor/b\ndefault_models:\n  - a\n  - missing\n"
        )
        assert available_models(mappings_file) == {"a": "vendor/a", "b": "vendor/b"}
        assert default_models(mappings_file) == ["a"]
