"""
LLM Module
"""
from .base import BaseLLM, Message, MessageRole, LLMResponse
from .openai_llm import OpenAILLM
from .factory import get_llm, try_get_llm

__all__ = [
    "BaseLLM",
    "Message",
    "MessageRole",
    "LLMResponse",
    "OpenAILLM",
    "get_llm",
    "try_get_llm",
]
