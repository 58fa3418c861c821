from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest

from intelligence.analysis import (
    build_analysis_prompt,
    build_executive_prompt,
    heuristic_analysis,
    heuristic_urgency,
    parse_analysis_response,
    parse_executive_summary,
)
from intelligence.insights import priority_events, render_executive_summary, summarize
from models import (
    AnalysisProvenance,
    CrisisAnalysis,
    CrisisItem,
    CrisisType,
    EnrichedItem,
    RiskLevel,
)
from utils.exceptions import EnrichmentParseError


NOW = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)


def _payload(**overrides) -> dict:
    payload = {
        "urgency": 8,
        "estimatedCasualties": "Dozens injured",
        "resourcesNeeded": ["Medical teams", "Shelter"],
        "immediateActions": ["Open shelters"],
        "riskLevel": "High",
        "stakeholders": ["Civil Defense"],
        "confidence": 0.6,
    }
    payload.update(overrides)
    return payload


def _enriched(item_id: str, urgency: int, location: str, crisis_type: CrisisType) -> EnrichedItem:
    item = CrisisItem(
        id=item_id,
        text=f"{crisis_type.value} report",
        source="Reuters",
        timestamp=NOW,
        location=location,
        type=crisis_type,
        verified=True,
    )
    analysis = CrisisAnalysis(
        urgency=urgency,
        estimated_casualties="Unknown",
        risk_level=RiskLevel.HIGH,
        confidence=0.8,
        generated_at=NOW,
    )
    return EnrichedItem(item=item, analysis=analysis)


def test_parse_analysis_accepts_fenced_json_and_clamps() -> None:
    content = "Here you go:\n```json\n" + json.dumps(_payload(urgency=14, confidence=1.7)) + "\n```"

    analysis = parse_analysis_response(content, now=NOW)

    assert analysis.urgency == 10
    assert analysis.confidence == 1.0
    assert analysis.resources_needed == ["Medical teams", "Shelter"]
    assert analysis.provenance == AnalysisProvenance.MODEL
    assert analysis.generated_at == NOW


def test_parse_analysis_normalizes_risk_level() -> None:
    assert parse_analysis_response(json.dumps(_payload(riskLevel="critical"))).risk_level == RiskLevel.CRITICAL
    # unknown labels fall back to the urgency banding
    assert parse_analysis_response(json.dumps(_payload(riskLevel="extreme", urgency=6))).risk_level == RiskLevel.HIGH


@pytest.mark.parametrize(
    "content",
    [
        "",
        "no json here",
        "{not valid json}",
        json.dumps({key: value for key, value in _payload().items() if key != "confidence"}),
        json.dumps(_payload(urgency="very high")),
        json.dumps(_payload(urgency=float("inf"))),
        json.dumps(_payload(urgency=float("nan"))),
    ],
)
def test_parse_analysis_rejects_unusable_answers(content) -> None:
    with pytest.raises(EnrichmentParseError):
        parse_analysis_response(content)


def test_missing_fields_are_reported() -> None:
    content = json.dumps({"urgency": 5})
    with pytest.raises(EnrichmentParseError) as excinfo:
        parse_analysis_response(content)
    assert "confidence" in excinfo.value.details["missing"]


def test_null_fields_count_as_missing() -> None:
    content = json.dumps(_payload(estimatedCasualties=None))
    with pytest.raises(EnrichmentParseError) as excinfo:
        parse_analysis_response(content)
    assert excinfo.value.details["missing"] == ["estimatedCasualties"]


@pytest.mark.parametrize(
    "text,expected",
    [
        ("Quiet flooding in a field", 5),
        ("Emergency declared", 7),
        ("Severe emergency", 9),
        ("Critical severe emergency, casualties and death", 10),
    ],
)
def test_heuristic_urgency(text, expected) -> None:
    assert heuristic_urgency(text) == expected


def test_heuristic_analysis_shape() -> None:
    item = _enriched("a", 5, "Assam", CrisisType.FLOOD).item
    analysis = heuristic_analysis(item, now=NOW)

    assert analysis.provenance == AnalysisProvenance.HEURISTIC
    assert analysis.confidence == 0.7
    assert analysis.risk_level == RiskLevel.MEDIUM
    assert analysis.resources_needed
    assert analysis.immediate_actions
    assert analysis.stakeholders


def test_build_analysis_prompt_mentions_item_fields() -> None:
    item = _enriched("a", 5, "Assam", CrisisType.FLOOD).item
    prompt = build_analysis_prompt(item)
    assert "Location: Assam" in prompt
    assert "Type: flood" in prompt
    assert item.text in prompt


def test_summarize_counts_and_report() -> None:
    items = [
        _enriched("a", 9, "Tokyo", CrisisType.EARTHQUAKE),
        _enriched("b", 5, "Assam", CrisisType.FLOOD),
        _enriched("c", 8, "Tokyo", CrisisType.EARTHQUAKE),
    ]

    summary = summarize(items, now=NOW)

    assert summary.total_events == 3
    assert summary.high_urgency_events == 2
    assert summary.average_urgency == pytest.approx(22 / 3)
    assert summary.locations == ["Tokyo", "Assam"]
    assert summary.location_count == 2
    assert summary.events_by_type == {"earthquake": 2, "flood": 1}
    assert summary.generated_at == NOW

    report = summary.report
    assert report.startswith("Crisis Situation Report")
    assert "Total Events: 3" in report
    assert "Average Urgency Level: 7.3/10" in report
    assert "earthquake: 2 events" in report
    assert report.index("Priority Events:") < report.index("Recommendations:")
    assert "(2 identified)" in report


def test_summarize_empty_and_without_priority_types() -> None:
    empty = summarize([], now=NOW)
    assert empty.total_events == 0
    assert empty.average_urgency == 0.0
    assert "Priority Events:" not in empty.report

    storms = [_enriched("s", 6, "Texas", CrisisType.STORM)]
    assert priority_events(storms) == []
    assert "Priority Events:" not in summarize(storms, now=NOW).report


def test_summarize_leaves_executive_summary_empty() -> None:
    summary = summarize([_enriched("a", 9, "Tokyo", CrisisType.EARTHQUAKE)], now=NOW)
    assert summary.executive_summary == ""


def test_executive_prompt_and_reply_parsing() -> None:
    items = [_enriched("a", 9, "Tokyo", CrisisType.EARTHQUAKE), _enriched("b", 5, "Assam", CrisisType.FLOOD)]

    prompt = build_executive_prompt(items)

    assert prompt.startswith("Generate an executive summary from these 2 crisis reports:\n\n")
    assert "Tokyo: EARTHQUAKE - earthquake report\n\nAssam: FLOOD - flood report" in prompt
    assert parse_executive_summary("\n Brief \n") == "Brief"
    with pytest.raises(EnrichmentParseError):
        parse_executive_summary("  ")


def test_render_executive_summary_sections() -> None:
    items = [
        _enriched("a", 9, "Tokyo", CrisisType.EARTHQUAKE),
        _enriched("b", 8, "Miami", CrisisType.CYCLONE),
        _enriched("c", 5, "Assam", CrisisType.FLOOD),
        _enriched("d", 6, "Texas", CrisisType.STORM),
    ]

    briefing = render_executive_summary(items, now=NOW)
    lines = briefing.splitlines()

    assert lines[0] == "CRISIS INTELLIGENCE EXECUTIVE SUMMARY"
    assert lines[1] == "Generated: 2026-10-17 12:00 UTC"
    assert "4 active crisis events detected across 3 regions. 2 events classified as high priority" in briefing
    assert [line for line in lines if line.startswith("• ")] == [
        "• CRITICAL: Earthquake response operations - Mass casualty event requiring international aid coordination",
        "• CRITICAL: Cyclone impact - Coastal evacuation and storm surge management",
        "• HIGH: Flood response - Evacuation and relief operations in progress",
    ]
    assert "1. Deploy emergency response teams to Tokyo and Miami" in briefing
    assert briefing.index("IMMEDIATE ACTIONS REQUIRED:") < briefing.index("ESTIMATED RESPONSE TIMELINE:")
    assert lines[-1].startswith("RECOMMENDATION: Maintain heightened alert status")
