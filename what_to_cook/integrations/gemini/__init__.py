"""Gemini integration for the What To Cook API."""

from what_to_cook.integrations.gemini.client import GeminiClient, GeminiError

__all__ = ["GeminiClient", "GeminiError"]
