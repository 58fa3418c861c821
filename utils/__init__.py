"""
Utils Module
"""
from .logger import setup_logger, configure_pipeline_logging
from .exceptions import (
    CrisisPipelineError,
    ConfigurationError,
    SourceError,
    SourceTimeoutError,
    SourceNetworkError,
    SourceAuthError,
    SourceParseError,
    AllSourcesFailedError,
    EnrichmentError,
    EnrichmentParseError,
    EnrichmentRateLimitedError,
    EnrichmentExhaustedError,
    InvalidEnrichmentRequestError,
)

__all__ = [
    "setup_logger",
    "configure_pipeline_logging",
    "CrisisPipelineError",
    "ConfigurationError",
    "SourceError",
    "SourceTimeoutError",
    "SourceNetworkError",
    "SourceAuthError",
    "SourceParseError",
    "AllSourcesFailedError",
    "EnrichmentError",
    "EnrichmentParseError",
    "EnrichmentRateLimitedError",
    "EnrichmentExhaustedError",
    "InvalidEnrichmentRequestError",
]
