"""LLM module - provides unified interface for generative text providers."""

from .base import LLMProvider, LLMMessage, LLMResponse
from .gemini_provider import GeminiProvider
from .factory import create_llm_provider

__all__ = [
    'LLMProvider',
    'LLMMessage',
    'LLMResponse',
    'GeminiProvider',
    'create_llm_provider',
]
