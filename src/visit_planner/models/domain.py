"""Domain models for visit candidates, day configuration and schedule output."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from ..errors import InvalidConfigurationError
from ..timeclock import parse_clock

UNSCHEDULED = "UNSCHEDULED"


class Category(str, Enum):
    HEADQUARTERS = "HEADQUARTERS"
    BRANCH = "BRANCH"


class Priority(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class DiagnosticCode(str, Enum):
    FIXED_OVERLAPS_LUNCH = "FIXED_OVERLAPS_LUNCH"
    FIXED_OUTSIDE_WORKING_HOURS = "FIXED_OUTSIDE_WORKING_HOURS"
    INVALID_FIXED_TIME = "INVALID_FIXED_TIME"
    UNKNOWN_CONSTRAINT = "UNKNOWN_CONSTRAINT"


@dataclass(frozen=True, slots=True)
class GeoPoint:
    latitude: float
    longitude: float


@dataclass(frozen=True, slots=True)
class VisitCandidate:
    """A client location (headquarters or branch) that may be visited during the day."""

    candidate_id: str
    name: str
    position: GeoPoint
    category: Category = Category.BRANCH
    priority: Priority = Priority.MEDIUM
    address: Optional[str] = None
    zone_name: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ScheduleConfig:
    """Working-day layout, with every time expressed in minutes since midnight."""

    work_start: int
    work_end: int
    lunch_start: int
    lunch_duration_minutes: int
    visit_duration_minutes: int

    @classmethod
    def from_clock(
        cls,
        *,
        work_start: str,
        work_end: str,
        lunch_start: str,
        lunch_duration_minutes: int,
        visit_duration_minutes: int,
    ) -> "ScheduleConfig":
        try:
            return cls(
                work_start=parse_clock(work_start),
                work_end=parse_clock(work_end),
                lunch_start=parse_clock(lunch_start),
                lunch_duration_minutes=lunch_duration_minutes,
                visit_duration_minutes=visit_duration_minutes,
            )
        except ValueError as exc:
            raise InvalidConfigurationError(str(exc)) from exc

    @property
    def lunch_end(self) -> int:
        return self.lunch_start + self.lunch_duration_minutes

    def validate(self) -> None:
        if self.work_start >= self.work_end:
            raise InvalidConfigurationError(
                f"Working day must start before it ends (start={self.work_start}, end={self.work_end})."
            )
        if self.lunch_duration_minutes < 0:
            raise InvalidConfigurationError("Lunch duration cannot be negative.")
        if self.visit_duration_minutes <= 0:
            raise InvalidConfigurationError("Visit duration must be a positive number of minutes.")
        if self.lunch_start < self.work_start or self.lunch_end > self.work_end:
            raise InvalidConfigurationError("Lunch break must lie within working hours.")


@dataclass(frozen=True, slots=True)
class ScheduledVisit:
    candidate: VisitCandidate
    arrival_time: str
    arrival_minutes: Optional[int]
    distance_from_prev_km: float
    is_fixed: bool = False
    is_unscheduled: bool = False

    @classmethod
    def unscheduled(cls, candidate: VisitCandidate, distance_km: float) -> "ScheduledVisit":
        return cls(
            candidate=candidate,
            arrival_time=UNSCHEDULED,
            arrival_minutes=None,
            distance_from_prev_km=round(distance_km, 2),
            is_unscheduled=True,
        )

    @property
    def candidate_id(self) -> str:
        return self.candidate.candidate_id


@dataclass(frozen=True, slots=True)
class Diagnostic:
    code: DiagnosticCode
    candidate_id: str
    message: str


@dataclass(slots=True)
class ScheduleResult:
    visits: List[ScheduledVisit]
    diagnostics: List[Diagnostic] = field(default_factory=list)
    metadata: dict = field(default_factory=dict)
