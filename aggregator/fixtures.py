"""Static fallback data set used for offline runs and total source failure."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List

from models import (
    AnalysisProvenance,
    Coordinates,
    CrisisAnalysis,
    CrisisItem,
    CrisisType,
    EnrichedItem,
    RiskLevel,
)

FIXTURE_SOURCE = "fixture-data"
FIXTURE_PROCESSING_TIME_MS = 500
FIXTURE_GENERATED_AT = datetime(2025, 9, 14, 14, 0, tzinfo=timezone.utc)

FIXTURE_EXECUTIVE_SUMMARY = """CRISIS SITUATION REPORT - September 14, 2025

Multiple high-severity events are currently affecting various regions globally:

1. Pacific Ring Earthquake (Critical):
- 8.1 magnitude event with tsunami risks
- Multiple coastal populations threatened
- International response mobilizing

2. Hurricane Marcus (Critical):
- Category 5 hurricane approaching Florida
- 2 million+ in evacuation zones
- Storm surge up to 20 feet expected

3. Climate Emergencies:
- Arctic permafrost collapse releasing methane
- Mediterranean heat dome affecting 20M+
- Amazon mega-fire threatening ecosystems

4. Technology Crisis:
- AI system failure in Singapore affecting critical infrastructure
- Highlights emerging risks in smart city systems

RECOMMENDATIONS:
- Immediate international coordination required
- Climate crisis impacts intensifying globally
- Tech infrastructure vulnerabilities need addressing

Current global crisis index indicates an unprecedented level of simultaneous major events requiring coordinated international response."""


FIXTURE_ITEMS: List[CrisisItem] = [
    CrisisItem(
        id="fixture_1",
        text=(
            "Devastating 8.1 magnitude earthquake hits Pacific Ring of Fire. Multiple tsunamis "
            "reported. Coastal cities in Japan and Philippines on high alert. International aid "
            "mobilizing."
        ),
        source="Pacific Disaster Center",
        timestamp="2025-09-14T08:30:00Z",
        location="Western Pacific",
        type=CrisisType.EARTHQUAKE,
        verified=True,
        coordinates=Coordinates(lat=20.7783, lng=130.0017),
    ),
    CrisisItem(
        id="fixture_2",
        text=(
            "Hurricane Marcus strengthens to Category 5, approaching Florida coast. Storm surge "
            "expected to reach 20 feet. Mandatory evacuation ordered for coastal counties."
        ),
        source="National Hurricane Center",
        timestamp="2025-09-14T09:45:00Z",
        location="Florida, USA",
        type=CrisisType.CYCLONE,
        verified=True,
        coordinates=Coordinates(lat=25.7617, lng=-80.1918),
    ),
    CrisisItem(
        id="fixture_3",
        text=(
            "Arctic permafrost collapse triggers massive methane release in Siberia. Local "
            "communities evacuated. Global climate impact warnings issued by scientists."
        ),
        source="Russian Environmental Monitor",
        timestamp="2025-09-14T10:15:00Z",
        location="Northern Siberia",
        type=CrisisType.OTHER,
        verified=True,
        coordinates=Coordinates(lat=71.2854, lng=127.2547),
    ),
    CrisisItem(
        id="fixture_4",
        text=(
            "Unprecedented heat dome forms over Mediterranean Europe. Multiple cities report "
            "record-breaking temperatures. Health services overwhelmed with heat-related emergencies."
        ),
        source="European Weather Alert System",
        timestamp="2025-09-14T11:20:00Z",
        location="Mediterranean Region",
        type=CrisisType.OTHER,
        verified=True,
        coordinates=Coordinates(lat=41.9028, lng=12.4964),
    ),
    CrisisItem(
        id="fixture_5",
        text=(
            "Mega-wildfire complex in Amazon rainforest threatens indigenous territories. Smoke "
            "affecting multiple countries. International firefighting teams requested."
        ),
        source="Brazilian Forest Service",
        timestamp="2025-09-14T12:30:00Z",
        location="Amazon Basin",
        type=CrisisType.WILDFIRE,
        verified=True,
        coordinates=Coordinates(lat=-3.4653, lng=-62.2159),
    ),
    CrisisItem(
        id="fixture_6",
        text=(
            "AI-powered dam control system failure causes flash flooding in smart city network. "
            "Multiple infrastructure systems affected. Emergency protocols activated."
        ),
        source="Global Infrastructure Alert",
        timestamp="2025-09-14T13:10:00Z",
        location="Singapore",
        type=CrisisType.FLOOD,
        verified=True,
        coordinates=Coordinates(lat=1.3521, lng=103.8198),
    ),
]


def _canned(**fields) -> CrisisAnalysis:
    return CrisisAnalysis(
        provenance=AnalysisProvenance.MODEL,
        generated_at=FIXTURE_GENERATED_AT,
        **fields,
    )


FIXTURE_ANALYSES: Dict[str, CrisisAnalysis] = {
    "fixture_1": _canned(
        urgency=9,
        estimated_casualties="Critical - Potentially 50,000+ affected across multiple countries",
        resources_needed=["International SAR teams", "Mobile hospitals", "Emergency communications", "Navy vessels"],
        immediate_actions=["Activate tsunami warning systems", "Deploy international aid", "Establish emergency command centers"],
        risk_level=RiskLevel.CRITICAL,
        stakeholders=["UN Disaster Response", "Pacific Rim Emergency Services", "WHO", "International Red Cross"],
        confidence=0.95,
    ),
    "fixture_2": _canned(
        urgency=9,
        estimated_casualties="Severe - 2 million+ in evacuation zones",
        resources_needed=["Mass evacuation transport", "Emergency shelters", "Medical facilities", "Power generators"],
        immediate_actions=["Execute mass evacuation", "Activate FEMA response", "Deploy National Guard"],
        risk_level=RiskLevel.CRITICAL,
        stakeholders=["FEMA", "National Guard", "Florida Emergency Management", "Coast Guard"],
        confidence=0.92,
    ),
    "fixture_3": _canned(
        urgency=8,
        estimated_casualties="Moderate - 10,000+ requiring relocation",
        resources_needed=["Environmental monitoring", "Evacuation support", "Scientific equipment", "Hazmat teams"],
        immediate_actions=["Monitor methane levels", "Establish exclusion zones", "Deploy research teams"],
        risk_level=RiskLevel.HIGH,
        stakeholders=["Russian Emergency Ministry", "Climate Scientists", "UN Environment Programme", "Local Authorities"],
        confidence=0.88,
    ),
    "fixture_4": _canned(
        urgency=8,
        estimated_casualties="High - 20 million+ affected by extreme heat",
        resources_needed=["Cooling centers", "Medical supplies", "Water distribution", "Power grid support"],
        immediate_actions=["Open cooling shelters", "Distribute water", "Support vulnerable populations"],
        risk_level=RiskLevel.HIGH,
        stakeholders=["EU Civil Protection", "National Health Services", "Red Cross", "Power Companies"],
        confidence=0.91,
    ),
    "fixture_5": _canned(
        urgency=9,
        estimated_casualties="Critical - 100,000+ at risk, multiple species threatened",
        resources_needed=["Firefighting aircraft", "Satellite monitoring", "Indigenous protection", "Medical support"],
        immediate_actions=["Coordinate international response", "Protect communities", "Create firebreaks"],
        risk_level=RiskLevel.CRITICAL,
        stakeholders=["Amazon Protection Force", "Indigenous Groups", "UN Environmental Teams", "Multiple Nations"],
        confidence=0.89,
    ),
    "fixture_6": _canned(
        urgency=8,
        estimated_casualties="High - 500,000+ affected in urban areas",
        resources_needed=["AI systems experts", "Flood control equipment", "Emergency power systems", "Evacuation support"],
        immediate_actions=["Manual system override", "Flood mitigation", "Emergency communications"],
        risk_level=RiskLevel.HIGH,
        stakeholders=["Smart City Authority", "Tech Emergency Teams", "Civil Defense", "AI Safety Board"],
        confidence=0.87,
    ),
}


def fixture_enriched_items() -> List[EnrichedItem]:
    """Fixture items paired with their canned analyses, in declaration order"""
    return [EnrichedItem(item=item, analysis=FIXTURE_ANALYSES[item.id]) for item in FIXTURE_ITEMS]
