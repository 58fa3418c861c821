"""
Crisis analysis prompts, response validation and the heuristic fallback.
"""

from __future__ import annotations

from datetime import datetime
import json
import re
from typing import Any, Dict, List, Optional, Sequence

from pydantic import ValidationError

from models import AnalysisProvenance, CrisisAnalysis, CrisisItem, ResultItem, RiskLevel, utc_now
from utils.exceptions import EnrichmentParseError


REQUIRED_FIELDS = (
    "urgency",
    "estimatedCasualties",
    "resourcesNeeded",
    "immediateActions",
    "riskLevel",
    "stakeholders",
    "confidence",
)

URGENCY_KEYWORDS = ("emergency", "critical", "severe", "casualties", "death")

HEURISTIC_CONFIDENCE = 0.7
HEURISTIC_CASUALTIES = "Unknown - Requires assessment"
HEURISTIC_RESOURCES = ["Emergency Response Teams", "Medical Supplies", "Communication Equipment"]
HEURISTIC_ACTIONS = ["Deploy assessment team", "Alert local authorities", "Set up crisis command center"]
HEURISTIC_STAKEHOLDERS = ["Local Government", "Emergency Services", "Medical Teams"]

SYSTEM_PROMPT = """You are a crisis analysis AI expert. Analyze crisis reports and extract structured information.

RESPOND ONLY IN VALID JSON FORMAT with these exact fields:
{
  "urgency": number (1-10, where 10 is most critical),
  "estimatedCasualties": "string description",
  "resourcesNeeded": ["array", "of", "resources"],
  "immediateActions": ["array", "of", "actions"],
  "riskLevel": "Critical|High|Medium|Low",
  "stakeholders": ["array", "of", "organizations"],
  "confidence": number (0.0-1.0)
}"""

EXECUTIVE_SYSTEM_PROMPT = (
    "You are a senior crisis intelligence analyst for emergency response leadership. "
    "Create a concise, actionable executive summary that includes: "
    "1. Current situation overview "
    "2. Priority events requiring immediate attention "
    "3. Resource allocation recommendations "
    "4. Next actions for leadership "
    "5. Estimated response timeline. "
    "Keep it professional, clear, and decision-focused. Maximum 300 words."
)
SUMMARY_MAX_TOKENS = 400
SUMMARY_TEMPERATURE = 0.2

_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


def build_analysis_prompt(item: CrisisItem) -> str:
    location = item.location or "Unknown"
    crisis_type = item.type.value if item.type else "Unspecified"
    return (
        "Analyze this crisis:\n"
        f"Location: {location}\n"
        f"Type: {crisis_type}\n"
        f"Report: {item.text}\n\n"
        "Provide a structured analysis in the specified JSON format."
    )


def build_executive_prompt(items: Sequence[ResultItem]) -> str:
    reports = "\n\n".join(
        f"{item.location or 'Unknown'}: {item.type.value.upper()} - {item.text}" for item in items
    )
    return f"Generate an executive summary from these {len(items)} crisis reports:\n\n{reports}"


def parse_executive_summary(content: str) -> str:
    text = str(content or "").strip()
    if not text:
        raise EnrichmentParseError("Empty executive summary from inference API")
    return text


def risk_level_for(urgency: int) -> RiskLevel:
    if urgency >= 8:
        return RiskLevel.CRITICAL
    if urgency >= 6:
        return RiskLevel.HIGH
    return RiskLevel.MEDIUM


def heuristic_urgency(text: str) -> int:
    """5 + round(10 * matched / total) over the urgency keywords, within [5, 10]."""
    lowered = str(text or "").lower()
    matched = sum(1 for keyword in URGENCY_KEYWORDS if keyword in lowered)
    return max(5, min(10, 5 + round(10 * matched / len(URGENCY_KEYWORDS))))


def heuristic_analysis(item: CrisisItem, now: Optional[datetime] = None) -> CrisisAnalysis:
    """Locally computed analysis used whenever the model's answer is unusable."""
    urgency = heuristic_urgency(item.text)
    return CrisisAnalysis(
        urgency=urgency,
        estimated_casualties=HEURISTIC_CASUALTIES,
        resources_needed=list(HEURISTIC_RESOURCES),
        immediate_actions=list(HEURISTIC_ACTIONS),
        risk_level=risk_level_for(urgency),
        stakeholders=list(HEURISTIC_STAKEHOLDERS),
        confidence=HEURISTIC_CONFIDENCE,
        provenance=AnalysisProvenance.HEURISTIC,
        generated_at=now or utc_now(),
    )


def extract_json_object(content: str) -> Dict[str, Any]:
    text = str(content or "").strip()
    if not text:
        raise EnrichmentParseError("Empty response from inference API")

    match = _JSON_OBJECT_RE.search(text)
    if not match:
        raise EnrichmentParseError("No JSON found in response")

    try:
        payload = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        raise EnrichmentParseError(f"Invalid JSON in response: {exc.msg}") from exc
    if not isinstance(payload, dict):
        raise EnrichmentParseError("Response JSON is not an object")
    return payload


def _string_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(entry) for entry in value]
    return [str(value)]


def _risk_level(value: Any, urgency: int) -> RiskLevel:
    token = str(value or "").strip().capitalize()
    try:
        return RiskLevel(token)
    except ValueError:
        return risk_level_for(urgency)


def parse_analysis_response(content: str, now: Optional[datetime] = None) -> CrisisAnalysis:
    """
    Validate model output and build a model-provenance analysis.

    Raises:
        EnrichmentParseError: no JSON object, a required field is missing,
            or a field has an unusable value
    """
    payload = extract_json_object(content)

    # an explicit null counts as missing
    missing = [name for name in REQUIRED_FIELDS if payload.get(name) is None]
    if missing:
        raise EnrichmentParseError(
            f"Missing fields in analysis: {', '.join(missing)}",
            missing=missing,
        )

    try:
        urgency = max(1, min(10, int(round(float(payload["urgency"])))))
        return CrisisAnalysis(
            urgency=urgency,
            estimated_casualties=str(payload["estimatedCasualties"]),
            resources_needed=_string_list(payload["resourcesNeeded"]),
            immediate_actions=_string_list(payload["immediateActions"]),
            risk_level=_risk_level(payload["riskLevel"], urgency),
            stakeholders=_string_list(payload["stakeholders"]),
            confidence=payload["confidence"],
            provenance=AnalysisProvenance.MODEL,
            generated_at=now or utc_now(),
        )
    except (TypeError, ValueError, OverflowError, ValidationError) as exc:
        raise EnrichmentParseError(f"Invalid analysis values: {exc}") from exc
