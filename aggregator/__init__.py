"""
Aggregator Module
"""
from .data_aggregator import DataAggregator
from .dedup import dedup_cross_source, dedup_intra_source, fingerprint64, normalize_prefix
from .scoring import priority_score, prioritize
from .fixtures import FIXTURE_ITEMS, FIXTURE_ANALYSES, fixture_enriched_items

__all__ = [
    "DataAggregator",
    "dedup_cross_source",
    "dedup_intra_source",
    "fingerprint64",
    "normalize_prefix",
    "priority_score",
    "prioritize",
    "FIXTURE_ITEMS",
    "FIXTURE_ANALYSES",
    "fixture_enriched_items",
]
