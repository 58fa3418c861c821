"""
Intelligence Module
Inference client, enrichment queue and insights
"""
from .llm import BaseLLM, OpenAILLM, get_llm, try_get_llm
from .analysis import heuristic_analysis, parse_analysis_response
from .enrichment_queue import EnrichmentQueue, EnrichmentState, RateLimitWindow, RequestKind
from .insights import summarize, priority_events, render_executive_summary

__all__ = [
    # LLM
    "BaseLLM",
    "OpenAILLM",
    "get_llm",
    "try_get_llm",
    # Analysis
    "heuristic_analysis",
    "parse_analysis_response",
    # Queue
    "EnrichmentQueue",
    "EnrichmentState",
    "RateLimitWindow",
    "RequestKind",
    # Insights
    "summarize",
    "priority_events",
    "render_executive_summary",
]
