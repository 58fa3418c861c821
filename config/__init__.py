"""
Configuration Management Module
"""
from .settings import (
    Settings,
    NewsSettings,
    DiscussionSettings,
    AggregatorSettings,
    EnrichmentSettings,
    LLMSettings,
    get_settings,
    get_enrichment_settings,
    get_llm_settings,
)

__all__ = [
    "Settings",
    "NewsSettings",
    "DiscussionSettings",
    "AggregatorSettings",
    "EnrichmentSettings",
    "LLMSettings",
    "get_settings",
    "get_enrichment_settings",
    "get_llm_settings",
]
