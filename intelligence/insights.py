"""Aggregate statistics and situation report for enriched crisis items."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional, Sequence

from models import EnrichedItem, InsightsSummary, ResultItem, utc_now

HIGH_URGENCY_THRESHOLD = 8

PRIORITY_EVENT_LINES: Dict[str, str] = {
    "earthquake": "CRITICAL: Earthquake response operations - Mass casualty event requiring international aid coordination",
    "cyclone": "CRITICAL: Cyclone impact - Coastal evacuation and storm surge management",
    "flood": "HIGH: Flood response - Evacuation and relief operations in progress",
    "wildfire": "HIGH: Wildfire containment - Air support and evacuation coordination",
    "structural_collapse": "HIGH: Building collapse - Urban search and rescue operations",
}


def _distinct(values: Sequence[str]) -> List[str]:
    seen = set()
    ordered: List[str] = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        ordered.append(value)
    return ordered


def priority_events(items: Sequence[ResultItem]) -> List[str]:
    """One headline per critical/high crisis type present, in first-seen order."""
    types = _distinct([item.type.value for item in items])
    return [PRIORITY_EVENT_LINES[name] for name in types if name in PRIORITY_EVENT_LINES]


def render_report(summary: InsightsSummary, priority_lines: Sequence[str]) -> str:
    lines = [
        "Crisis Situation Report",
        f"Total Events: {summary.total_events}",
        f"High Priority Events: {summary.high_urgency_events}",
        f"Average Urgency Level: {summary.average_urgency:.1f}/10",
        f"Affected Locations: {', '.join(summary.locations)}",
        "",
        "Event Distribution:",
    ]
    lines.extend(f"{name}: {count} events" for name, count in summary.events_by_type.items())

    if priority_lines:
        lines.extend(["", "Priority Events:"])
        lines.extend(f"- {line}" for line in priority_lines)

    lines.extend(
        [
            "",
            "Recommendations:",
            f"1. Prioritize response to high urgency events ({summary.high_urgency_events} identified)",
            "2. Focus resources on most affected areas",
            "3. Monitor developing situations closely",
            "4. Coordinate with local authorities in affected regions",
            "",
            f"Generated at: {summary.generated_at.isoformat()}",
        ]
    )
    return "\n".join(lines)


def summarize(items: Sequence[EnrichedItem], now: Optional[datetime] = None) -> InsightsSummary:
    """
    Summarize enriched items.

    Pure apart from ``now`` (defaults to the current UTC time), which only
    stamps the summary.
    """
    total = len(items)
    urgencies = [item.analysis.urgency for item in items]
    locations = _distinct([item.location for item in items])

    events_by_type: Dict[str, int] = {}
    for item in items:
        key = item.type.value
        events_by_type[key] = events_by_type.get(key, 0) + 1

    summary = InsightsSummary(
        total_events=total,
        high_urgency_events=sum(1 for value in urgencies if value >= HIGH_URGENCY_THRESHOLD),
        average_urgency=(sum(urgencies) / total) if total else 0.0,
        locations=locations,
        location_count=len(locations),
        events_by_type=events_by_type,
        generated_at=now or utc_now(),
    )
    return summary.model_copy(update={"report": render_report(summary, priority_events(items))})


def render_executive_summary(items: Sequence[ResultItem], now: Optional[datetime] = None) -> str:
    """Leadership briefing rendered locally when the model cannot write one."""
    locations = _distinct([item.location for item in items])[:3]
    high_urgency = sum(
        1
        for item in items
        if isinstance(item, EnrichedItem) and item.analysis.urgency >= HIGH_URGENCY_THRESHOLD
    )
    generated_at = now or utc_now()
    first = locations[0] if locations else "affected areas"
    second = locations[1] if len(locations) > 1 else "affected areas"

    lines = [
        "CRISIS INTELLIGENCE EXECUTIVE SUMMARY",
        f"Generated: {generated_at.strftime('%Y-%m-%d %H:%M UTC')}",
        "",
        "CURRENT SITUATION:",
        f"{len(items)} active crisis events detected across {len(locations)} regions. "
        f"{high_urgency} events classified as high priority requiring immediate response.",
        "",
        "PRIORITY EVENTS:",
    ]
    lines.extend(f"• {line}" for line in priority_events(items))
    lines.extend(
        [
            "",
            "RESOURCE ALLOCATION PRIORITY:",
            f"1. Deploy emergency response teams to {first} and {second}",
            "2. Activate international aid protocols for large-scale disasters",
            "3. Coordinate with local authorities for evacuation and relief support",
            "4. Establish emergency communication networks",
            "",
            "IMMEDIATE ACTIONS REQUIRED:",
            "1. Continuous real-time monitoring of all developing situations",
            "2. Resource deployment coordination with federal/state agencies",
            "3. Public emergency communication and alert systems activation",
            "4. Preparation of international humanitarian aid requests",
            "",
            "ESTIMATED RESPONSE TIMELINE:",
            "- Initial deployment: 2-4 hours",
            "- Full operational capacity: 6-12 hours",
            "- Relief operations: 24-72 hours",
            "",
            "RECOMMENDATION: Maintain heightened alert status and prepare for "
            "potential escalation of current events.",
        ]
    )
    return "\n".join(lines)
