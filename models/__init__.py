"""
Data Models
"""
from .schemas import (
    CrisisType,
    RiskLevel,
    AnalysisProvenance,
    Coordinates,
    CrisisItem,
    CrisisAnalysis,
    EnrichedItem,
    ResultItem,
    ResultMetadata,
    InsightsSummary,
    AggregationResult,
    utc_now,
)

__all__ = [
    "CrisisType",
    "RiskLevel",
    "AnalysisProvenance",
    "Coordinates",
    "CrisisItem",
    "CrisisAnalysis",
    "EnrichedItem",
    "ResultItem",
    "ResultMetadata",
    "InsightsSummary",
    "AggregationResult",
    "utc_now",
]
