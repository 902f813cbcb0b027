"""RizzWord - Shared infrastructure.

This module contains common utilities used by the game package:
- adapters: OpenRouter API adapter for LLM calls
- utils: Common utilities (timing, JSON logging)
- inputs: Model mappings configuration
"""

__version__ = "0.1.0"
