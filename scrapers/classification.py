"""Keyword rules shared by the source clients: type, relevance, location."""

from __future__ import annotations

import re
from typing import Optional, Pattern, Sequence, Tuple

from models import CrisisType


UNKNOWN_LOCATION = "Location Unknown"
RELEVANCE_THRESHOLD = 0.3

# Evaluated top to bottom; the first rule with any keyword hit wins.
TYPE_RULES: Tuple[Tuple[Tuple[str, ...], CrisisType], ...] = (
    (("earthquake", "seismic", "tremor", "quake", "tectonic"), CrisisType.EARTHQUAKE),
    (("flood", "flooding", "deluge", "inundation", "waterlog", "overflow"), CrisisType.FLOOD),
    (("wildfire", "forest fire", "bushfire", "fire", "blaze", "burning"), CrisisType.WILDFIRE),
    (("hurricane", "typhoon", "tropical storm", "cyclonic storm"), CrisisType.HURRICANE),
    (("cyclone", "tropical cyclone", "super cyclone"), CrisisType.CYCLONE),
    (("tornado", "twister", "whirlwind"), CrisisType.TORNADO),
    (("tsunami", "tidal wave", "seismic sea wave"), CrisisType.TSUNAMI),
    (("landslide", "mudslide", "rockslide", "slope failure"), CrisisType.LANDSLIDE),
    (("volcano", "volcanic", "eruption", "lava", "ash cloud"), CrisisType.VOLCANO),
    (("storm", "thunderstorm", "hailstorm", "severe weather"), CrisisType.STORM),
    (("drought", "water crisis", "dry spell", "water shortage"), CrisisType.DROUGHT),
    (
        ("building collapse", "structure collapse", "collapsed", "building fall"),
        CrisisType.STRUCTURAL_COLLAPSE,
    ),
)

EMERGENCY_TERMS: Tuple[str, ...] = ("emergency", "disaster", "crisis", "calamity", "catastrophe")

CRISIS_KEYWORDS: Tuple[str, ...] = (
    "earthquake",
    "flood",
    "hurricane",
    "wildfire",
    "tsunami",
    "cyclone",
    "disaster",
    "emergency",
    "evacuation",
    "rescue",
    "landslide",
    "tornado",
    "storm",
    "crisis",
    "calamity",
)

# (terms, weight per matched term)
RELEVANCE_WEIGHTS: Tuple[Tuple[Tuple[str, ...], float], ...] = (
    (("death", "deaths", "killed", "destroyed", "devastating", "emergency", "catastrophic"), 0.3),
    (("injured", "damage", "evacuation", "warning", "threat"), 0.2),
    (CRISIS_KEYWORDS, 0.15),
)

_PLACE = r"([A-Z][a-z]+(?:\s+[A-Z][a-z]+)*)"

# Most specific first. Each rule returns its capture groups joined by ", ".
LOCATION_RULES: Tuple[Pattern[str], ...] = (
    re.compile(r"(?i:\b(?:in|at|near))\s+" + _PLACE + r",\s*([A-Z][a-z]+)"),
    re.compile(r"(?i:\b(?:in|at|near))\s+" + _PLACE + r"\s+(?i:state|province)\b"),
    re.compile(r"(?i:\b(?:in|at|near))\s+" + _PLACE),
    re.compile(_PLACE + r"\s+(?:hit|struck|affected|damaged)\b"),
)

GAZETTEER: Tuple[str, ...] = (
    "India",
    "China",
    "United States",
    "Japan",
    "Indonesia",
    "Philippines",
    "Turkey",
    "Iran",
    "Pakistan",
    "Bangladesh",
    "Myanmar",
    "Thailand",
    "California",
    "Florida",
    "Texas",
    "New York",
    "Kerala",
    "Mumbai",
    "Delhi",
    "Chennai",
    "Kolkata",
    "Bangalore",
    "Hyderabad",
)


def _contains_any(text: str, keywords: Sequence[str]) -> bool:
    return any(keyword in text for keyword in keywords)


def detect_crisis_type(text: str) -> Optional[CrisisType]:
    """Classify text; ``None`` means not a crisis report."""
    lowered = str(text or "").lower()
    for keywords, crisis_type in TYPE_RULES:
        if _contains_any(lowered, keywords):
            return crisis_type
    if _contains_any(lowered, EMERGENCY_TERMS):
        return CrisisType.GENERAL_EMERGENCY
    return None


def relevance_score(text: str) -> float:
    lowered = str(text or "").lower()
    score = 0.0
    for terms, weight in RELEVANCE_WEIGHTS:
        score += weight * sum(1 for term in terms if term in lowered)
    return min(round(score, 4), 1.0)


def extract_location(text: str) -> str:
    """
    Best-effort place name.

    Tries the pattern cascade, then the gazetteer, then gives up with
    ``UNKNOWN_LOCATION``. The first hit wins; there is no scoring.
    """
    raw = str(text or "")
    for pattern in LOCATION_RULES:
        match = pattern.search(raw)
        if match:
            return ", ".join(group for group in match.groups() if group)

    lowered = raw.lower()
    for place in GAZETTEER:
        if place.lower() in lowered:
            return place

    return UNKNOWN_LOCATION
