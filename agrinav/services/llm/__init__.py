"""LLM service implementations."""

from .gemini import GeminiLLM
from .groq import GroqLLM, OpenAICompatibleLLM
from .ollama import OllamaLLM

__all__ = ["GeminiLLM", "GroqLLM", "OpenAICompatibleLLM", "OllamaLLM"]
