"""LLM module."""

from src.llm.llm import AIServiceError, ChatLLM, get_llm

__all__ = ["AIServiceError", "ChatLLM", "get_llm"]
