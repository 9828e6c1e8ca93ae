"""Ollama client wrapper and integration layer.

This package provides the async client wrapper used by the LLM-backed
decision model.
"""

from quasar_assistant.ollama.client import OllamaClient

__all__ = ["OllamaClient"]
