"""
LLM Factory
Build the inference client from settings
"""
from typing import Optional
import logging

from utils.exceptions import ConfigurationError

from .base import BaseLLM
from .openai_llm import OpenAILLM


logger = logging.getLogger(__name__)


DEFAULT_MODELS = {
    "openai": "gpt-3.5-turbo",
}


def get_llm(
    provider: Optional[str] = None,
    model: Optional[str] = None,
    **kwargs,
) -> BaseLLM:
    """
    Build an inference client.

    Reads ``LLM_*`` settings; explicit arguments win.

    Raises:
        ConfigurationError: unsupported provider or missing API key
    """
    from config import get_llm_settings, get_enrichment_settings

    settings = get_llm_settings()
    provider = provider or settings.provider
    model = model or settings.model_name or DEFAULT_MODELS.get(provider)

    api_key = kwargs.pop("api_key", None) or settings.openai_api_key
    if provider != "openai":
        raise ConfigurationError(f"Unsupported LLM provider: {provider}")
    if not api_key:
        raise ConfigurationError("LLM API key not configured", {"provider": provider})

    kwargs.setdefault("temperature", settings.temperature)
    kwargs.setdefault("max_tokens", settings.max_tokens)
    kwargs.setdefault("timeout", get_enrichment_settings().request_timeout_sec)

    return OpenAILLM(
        model=model,
        api_key=api_key,
        base_url=kwargs.pop("base_url", None) or settings.base_url,
        **kwargs,
    )


def try_get_llm(**kwargs) -> Optional[BaseLLM]:
    """``get_llm`` or ``None`` when no inference client is configured"""
    try:
        return get_llm(**kwargs)
    except ConfigurationError as exc:
        logger.warning(f"Inference client unavailable, heuristic analysis only: {exc}")
        return None
