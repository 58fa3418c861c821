"""
Custom Exceptions
Error taxonomy for the crisis pipeline
"""


class CrisisPipelineError(Exception):
    """Base exception for the crisis pipeline"""

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(CrisisPipelineError):
    """Invalid or missing configuration"""
    pass


class SourceError(CrisisPipelineError):
    """A single source client failed; aggregation continues with the others"""

    def __init__(self, message: str, source: str = None, **kwargs):
        super().__init__(message, kwargs)
        self.source = source


class SourceTimeoutError(SourceError):
    """Source exceeded its deadline"""
    pass


class SourceNetworkError(SourceError):
    """Transport failure or non-2xx response"""
    pass


class SourceAuthError(SourceError):
    """Source rejected our credentials, or none are configured"""
    pass


class SourceParseError(SourceError):
    """Source payload could not be decoded"""
    pass


class AllSourcesFailedError(CrisisPipelineError):
    """Every live source failed and no fixture fallback is allowed"""

    def __init__(self, message: str, errors: dict = None):
        super().__init__(message, errors)
        self.errors = errors or {}


class EnrichmentError(CrisisPipelineError):
    """Inference call failure. Never escapes the enrichment queue."""

    def __init__(self, message: str, provider: str = None, **kwargs):
        super().__init__(message, kwargs)
        self.provider = provider


class EnrichmentParseError(EnrichmentError):
    """Model output did not contain a complete analysis object"""
    pass


class EnrichmentRateLimitedError(EnrichmentError):
    """Inference API answered HTTP 429"""
    pass


class EnrichmentExhaustedError(EnrichmentError):
    """All attempts for an item failed"""
    pass


class InvalidEnrichmentRequestError(CrisisPipelineError):
    """Caller passed something that cannot be enriched"""
    pass
