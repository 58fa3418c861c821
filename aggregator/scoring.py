"""Deterministic priority scoring and ranking for crisis items."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import FrozenSet, List, Optional, Sequence, TypeVar

CRITICAL_TYPES: FrozenSet[str] = frozenset({"earthquake", "tsunami", "cyclone", "nuclear"})
HIGH_IMPACT_TYPES: FrozenSet[str] = frozenset({"flood", "wildfire", "hurricane"})
TRUSTED_SOURCES: FrozenSet[str] = frozenset({"Reuters", "BBC News", "Associated Press"})

VERIFIED_WEIGHT = 2
CRITICAL_TYPE_WEIGHT = 3
HIGH_IMPACT_TYPE_WEIGHT = 2
TRUSTED_SOURCE_WEIGHT = 1

T = TypeVar("T")


def _type_value(item: object) -> str:
    value = getattr(item, "type", "")
    return str(getattr(value, "value", value) or "")


def age_hours(timestamp: Optional[datetime], now: datetime) -> float:
    if timestamp is None:
        return float("inf")
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return (now - timestamp).total_seconds() / 3600.0


def recency_points(timestamp: Optional[datetime], now: datetime) -> int:
    hours = age_hours(timestamp, now)
    if hours < 6:
        return 2
    if hours < 24:
        return 1
    return 0


def priority_score(item: object, now: datetime) -> int:
    """
    Operational priority of one item.

    verified +2, critical type +3, high-impact type +2, age <6h +2 (<24h +1),
    trusted outlet +1.
    """
    score = 0
    if getattr(item, "verified", False):
        score += VERIFIED_WEIGHT

    crisis_type = _type_value(item)
    if crisis_type in CRITICAL_TYPES:
        score += CRITICAL_TYPE_WEIGHT
    if crisis_type in HIGH_IMPACT_TYPES:
        score += HIGH_IMPACT_TYPE_WEIGHT

    score += recency_points(getattr(item, "timestamp", None), now)

    if getattr(item, "source", None) in TRUSTED_SOURCES:
        score += TRUSTED_SOURCE_WEIGHT
    return score


def _timestamp_key(item: object) -> float:
    timestamp = getattr(item, "timestamp", None)
    if timestamp is None:
        return 0.0
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return timestamp.timestamp()


def prioritize(items: Sequence[T], now: Optional[datetime] = None) -> List[T]:
    """Score descending, then newest first, then id ascending."""
    reference = now or datetime.now(timezone.utc)
    return sorted(
        items,
        key=lambda item: (
            -priority_score(item, reference),
            -_timestamp_key(item),
            str(getattr(item, "id", "")),
        ),
    )
