"""AI layer -- Gemini client and prompt templates."""

from src.ai.client import GeminiAPIError, GeminiClient, RateLimitedError
from src.ai.prompts import PromptManager

__all__ = [
    "GeminiAPIError",
    "GeminiClient",
    "PromptManager",
    "RateLimitedError",
]
