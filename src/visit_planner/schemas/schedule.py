"""Scheduling request/response schemas."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ..config import CLOCK_PATTERN
from ..models.domain import Category, DiagnosticCode, Priority


class GeoPointModel(BaseModel):
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)


class VisitCandidateModel(BaseModel):
    id: str = Field(..., min_length=1, description="Candidate identifier, unique within the request.")
    name: str
    category: Category = Category.BRANCH
    location: GeoPointModel
    priority: Priority = Priority.MEDIUM
    address: Optional[str] = None
    zone_name: Optional[str] = None


class ScheduleConfigModel(BaseModel):
    """Working-day overrides. Omitted fields fall back to the service defaults."""

    work_start: Optional[str] = Field(None, pattern=CLOCK_PATTERN, description="Start of the working day (HH:MM).")
    work_end: Optional[str] = Field(None, pattern=CLOCK_PATTERN)
    lunch_start: Optional[str] = Field(None, pattern=CLOCK_PATTERN)
    lunch_duration_minutes: Optional[int] = Field(None, ge=0)
    visit_duration_minutes: Optional[int] = Field(None, ge=1)


class ScheduleRequest(BaseModel):
    candidates: List[VisitCandidateModel] = Field(default_factory=list)
    config: Optional[ScheduleConfigModel] = None
    fixed_times: Dict[str, str] = Field(
        default_factory=dict,
        description="Candidate id to required arrival time (HH:MM).",
    )
    priority_overrides: Dict[str, Priority] = Field(
        default_factory=dict,
        description="Per-run priority changes applied before scheduling.",
    )
    start_location: Optional[GeoPointModel] = Field(
        default=None,
        description="Where the agent starts the day. Defaults to the configured start position.",
    )


class ScheduledVisitModel(BaseModel):
    id: str
    name: str
    category: Category
    priority: Priority
    location: GeoPointModel
    address: Optional[str] = None
    zone_name: Optional[str] = None
    arrival_time: str
    distance_from_prev_km: float
    is_fixed: bool
    is_unscheduled: bool


class DiagnosticModel(BaseModel):
    code: DiagnosticCode
    candidate_id: str
    message: str


class ScheduleResponse(BaseModel):
    metadata: dict
    visits: List[ScheduledVisitModel]
    diagnostics: List[DiagnosticModel]


class ScheduleDefaultsResponse(BaseModel):
    config: ScheduleConfigModel
    start_location: GeoPointModel
