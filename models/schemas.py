"""
Data Models / Schemas
Canonical shapes shared by the source clients, aggregator and enrichment queue
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: Any) -> Any:
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class CrisisType(str, Enum):
    """Closed set of incident categories"""
    EARTHQUAKE = "earthquake"
    FLOOD = "flood"
    WILDFIRE = "wildfire"
    CYCLONE = "cyclone"
    HURRICANE = "hurricane"
    TORNADO = "tornado"
    TSUNAMI = "tsunami"
    LANDSLIDE = "landslide"
    VOLCANO = "volcano"
    STORM = "storm"
    DROUGHT = "drought"
    STRUCTURAL_COLLAPSE = "structural_collapse"
    GENERAL_EMERGENCY = "general_emergency"
    OTHER = "other"


class RiskLevel(str, Enum):
    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class AnalysisProvenance(str, Enum):
    """Who produced an analysis"""
    MODEL = "model"
    HEURISTIC = "heuristic"


class Coordinates(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float
    lng: float


class CrisisItem(BaseModel):
    """One normalized incident report from a source"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., description="Source-qualified identifier")
    text: str = Field(..., description="Free-form description")
    source: str = Field(..., description="Originating outlet name")
    timestamp: datetime = Field(..., description="Event/publish time")
    location: str = Field(default="Location Unknown", description="Best-effort place string")
    type: CrisisType = Field(..., description="Incident category")
    verified: bool = Field(default=False, description="Provenance flag")
    coordinates: Optional[Coordinates] = Field(None, description="Optional lat/lng")
    url: Optional[str] = Field(None, description="Link to the original report")
    image_url: Optional[str] = Field(None, alias="imageUrl", description="Preview image")
    author: Optional[str] = Field(None, description="Report author")
    title: Optional[str] = Field(None, description="Original headline")

    @field_validator("timestamp")
    @classmethod
    def _timestamp_utc(cls, value: datetime) -> datetime:
        return _as_utc(value)


class CrisisAnalysis(BaseModel):
    """Structured severity analysis attached to a crisis item"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    urgency: int = Field(..., description="1 (low) .. 10 (critical)")
    estimated_casualties: str = Field(..., alias="estimatedCasualties")
    resources_needed: List[str] = Field(default_factory=list, alias="resourcesNeeded")
    immediate_actions: List[str] = Field(default_factory=list, alias="immediateActions")
    risk_level: RiskLevel = Field(..., alias="riskLevel")
    stakeholders: List[str] = Field(default_factory=list)
    confidence: float = Field(..., description="0.0 .. 1.0")
    provenance: AnalysisProvenance = Field(default=AnalysisProvenance.MODEL)
    generated_at: datetime = Field(default_factory=utc_now, alias="generatedAt")

    @field_validator("urgency", mode="before")
    @classmethod
    def _clamp_urgency(cls, value: Any) -> int:
        return max(1, min(10, int(round(float(value)))))

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp_confidence(cls, value: Any) -> float:
        return max(0.0, min(1.0, float(value)))

    @field_validator("generated_at")
    @classmethod
    def _generated_utc(cls, value: datetime) -> datetime:
        return _as_utc(value)


class EnrichedItem(BaseModel):
    """A crisis item paired with its analysis"""

    model_config = ConfigDict(frozen=True)

    item: CrisisItem
    analysis: CrisisAnalysis

    @property
    def id(self) -> str:
        return self.item.id

    @property
    def text(self) -> str:
        return self.item.text

    @property
    def source(self) -> str:
        return self.item.source

    @property
    def timestamp(self) -> datetime:
        return self.item.timestamp

    @property
    def location(self) -> str:
        return self.item.location

    @property
    def type(self) -> CrisisType:
        return self.item.type

    @property
    def verified(self) -> bool:
        return self.item.verified


ResultItem = Union[EnrichedItem, CrisisItem]


class ResultMetadata(BaseModel):
    """Envelope metadata for one aggregation call"""

    last_update: datetime = Field(default_factory=utc_now)
    processing_time_ms: int = 0
    sources_used: List[str] = Field(default_factory=list)
    total_results: Optional[int] = None
    limited_results: Optional[int] = None
    error: Optional[str] = None
    source_errors: Dict[str, str] = Field(default_factory=dict)

    @property
    def is_partial(self) -> bool:
        return bool(self.source_errors) and bool(self.sources_used)


class InsightsSummary(BaseModel):
    """Aggregate statistics plus a rendered situation report"""

    total_events: int = 0
    high_urgency_events: int = 0
    average_urgency: float = 0.0
    locations: List[str] = Field(default_factory=list)
    location_count: int = 0
    events_by_type: Dict[str, int] = Field(default_factory=dict)
    report: str = ""
    executive_summary: str = Field(default="", description="Leadership briefing; empty until requested")
    generated_at: datetime = Field(default_factory=utc_now)


class AggregationResult(BaseModel):
    """Result envelope returned by ``DataAggregator.fetch_all``"""

    items: List[ResultItem] = Field(default_factory=list)
    metadata: ResultMetadata = Field(default_factory=ResultMetadata)
    insights: Optional[InsightsSummary] = None
