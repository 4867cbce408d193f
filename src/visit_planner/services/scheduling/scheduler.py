"""Greedy day scheduler for field visits.

The working day is modelled as a timeline of immovable events (the lunch break
and every visit with a caller-fixed arrival time). Flexible visits are packed
into the gaps between those events with a nearest-neighbour search biased by
priority, and whatever does not fit before the end of the day is reported as
unscheduled instead of being dropped.

Selection is quadratic in the number of flexible candidates per gap, which is
fine for a supervisor's daily list (tens of stops). Larger inputs should be
bounded by the caller.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence

from ...models.domain import (
    Diagnostic,
    DiagnosticCode,
    GeoPoint,
    Priority,
    ScheduleConfig,
    ScheduledVisit,
    ScheduleResult,
    VisitCandidate,
)
from ...timeclock import format_clock, parse_clock
from ..geospatial import distance_between, travel_minutes

logger = logging.getLogger(__name__)

LUNCH = "LUNCH"
VISIT = "VISIT"

DEFAULT_PRIORITY_PENALTIES: dict[Priority, float] = {
    Priority.HIGH: 0.0,
    Priority.MEDIUM: 5.0,
    Priority.LOW: 10.0,
}


@dataclass(frozen=True, slots=True)
class SchedulerParameters:
    minutes_per_km: float = 3.0
    overhead_minutes: int = 5
    # Added to the distance as virtual kilometres when scoring a candidate.
    priority_penalties: Mapping[Priority, float] = field(
        default_factory=lambda: dict(DEFAULT_PRIORITY_PENALTIES)
    )

    def travel_minutes(self, distance_km: float) -> int:
        return travel_minutes(distance_km, self.minutes_per_km, self.overhead_minutes)

    def penalty_for(self, priority: Priority) -> float:
        return self.priority_penalties.get(priority, 0.0)


@dataclass(slots=True)
class _TimelineEvent:
    kind: str
    start: int
    end: int
    candidate: Optional[VisitCandidate] = None
    # Fixed visits report the arrival exactly as the caller wrote it.
    label: Optional[str] = None


@dataclass(slots=True)
class _Cursor:
    time: int
    position: GeoPoint


def schedule(
    candidates: Sequence[VisitCandidate],
    config: ScheduleConfig,
    fixed_constraints: Mapping[str, str] | None,
    start_position: GeoPoint,
    parameters: SchedulerParameters | None = None,
) -> ScheduleResult:
    """Assign arrival times to every candidate, or mark it unscheduled.

    Args:
        candidates: Locations to visit. Ids must be unique within the run.
        config: Working day layout. Validated before anything else.
        fixed_constraints: Candidate id to required arrival time ("HH:MM").
        start_position: Where the agent is when the day starts.
        parameters: Travel model and priority penalties.

    Returns:
        ScheduleResult with scheduled visits in arrival order followed by the
        unscheduled ones, plus advisory diagnostics.
    """
    config.validate()
    params = parameters or SchedulerParameters()
    constraints = dict(fixed_constraints or {})
    diagnostics: list[Diagnostic] = []

    known_ids = {candidate.candidate_id for candidate in candidates}
    for candidate_id in constraints:
        if candidate_id not in known_ids and constraints[candidate_id]:
            _report(
                diagnostics,
                DiagnosticCode.UNKNOWN_CONSTRAINT,
                candidate_id,
                f"Fixed time given for unknown candidate '{candidate_id}', ignoring it.",
            )

    timeline, pool = _build_timeline(candidates, config, constraints, diagnostics)

    visits: list[ScheduledVisit] = []
    cursor = _Cursor(time=config.work_start, position=start_position)

    for event in timeline:
        _fill_gap(pool, cursor, event.start, config, params, visits)

        if event.kind == VISIT and event.candidate is not None:
            distance = distance_between(cursor.position, event.candidate.position)
            visits.append(
                ScheduledVisit(
                    candidate=event.candidate,
                    arrival_time=event.label or format_clock(event.start),
                    arrival_minutes=event.start,
                    distance_from_prev_km=round(distance, 2),
                    is_fixed=True,
                )
            )
            cursor.position = event.candidate.position

        # Arriving early at a fixed event means waiting; the idle time is not recorded.
        cursor.time = max(cursor.time, event.end)

    _fill_gap(pool, cursor, config.work_end, config, params, visits)

    for candidate in pool:
        visits.append(ScheduledVisit.unscheduled(candidate, distance_between(cursor.position, candidate.position)))

    scheduled = sorted((visit for visit in visits if not visit.is_unscheduled), key=lambda visit: visit.arrival_minutes)
    unscheduled = [visit for visit in visits if visit.is_unscheduled]
    ordered = scheduled + unscheduled

    return ScheduleResult(
        visits=ordered,
        diagnostics=diagnostics,
        metadata=_summarize(ordered, config),
    )


def _build_timeline(
    candidates: Sequence[VisitCandidate],
    config: ScheduleConfig,
    constraints: dict[str, str],
    diagnostics: list[Diagnostic],
) -> tuple[list[_TimelineEvent], list[VisitCandidate]]:
    timeline = [_TimelineEvent(kind=LUNCH, start=config.lunch_start, end=config.lunch_end)]
    pool: list[VisitCandidate] = []

    for candidate in candidates:
        fixed_time = constraints.get(candidate.candidate_id)
        if not fixed_time:
            pool.append(candidate)
            continue

        try:
            start = parse_clock(fixed_time)
        except ValueError:
            _report(
                diagnostics,
                DiagnosticCode.INVALID_FIXED_TIME,
                candidate.candidate_id,
                f"Fixed time '{fixed_time}' for {candidate.name} is not a valid HH:MM; scheduling it as flexible.",
            )
            pool.append(candidate)
            continue

        end = start + config.visit_duration_minutes
        if start < config.work_start or end > config.work_end:
            _report(
                diagnostics,
                DiagnosticCode.FIXED_OUTSIDE_WORKING_HOURS,
                candidate.candidate_id,
                f"Fixed time {fixed_time} for {candidate.name} falls outside working hours; scheduling it as flexible.",
            )
            pool.append(candidate)
            continue

        if start < config.lunch_end and end > config.lunch_start:
            _report(
                diagnostics,
                DiagnosticCode.FIXED_OVERLAPS_LUNCH,
                candidate.candidate_id,
                f"Fixed time {fixed_time} for {candidate.name} overlaps the lunch break; keeping it anyway.",
            )

        timeline.append(_TimelineEvent(kind=VISIT, start=start, end=end, candidate=candidate, label=fixed_time))

    timeline.sort(key=lambda event: event.start)
    return timeline, pool


def _fill_gap(
    pool: list[VisitCandidate],
    cursor: _Cursor,
    gap_end: int,
    config: ScheduleConfig,
    params: SchedulerParameters,
    visits: list[ScheduledVisit],
) -> None:
    """Greedily place flexible candidates between the cursor and ``gap_end``."""

    while pool and gap_end - cursor.time > 0:
        index = _select_candidate(pool, cursor.position, gap_end - cursor.time, config, params)
        if index is None:
            break

        candidate = pool.pop(index)
        if visits:
            distance = distance_between(cursor.position, candidate.position)
            travel = params.travel_minutes(distance)
        else:
            # The day's first stop: the agent starts on site.
            distance = 0.0
            travel = 0

        arrival = cursor.time + travel
        visits.append(
            ScheduledVisit(
                candidate=candidate,
                arrival_time=format_clock(arrival),
                arrival_minutes=arrival,
                distance_from_prev_km=round(distance, 2),
            )
        )
        cursor.time = arrival + config.visit_duration_minutes
        cursor.position = candidate.position


def _select_candidate(
    pool: Sequence[VisitCandidate],
    position: GeoPoint,
    time_available: int,
    config: ScheduleConfig,
    params: SchedulerParameters,
) -> Optional[int]:
    best_index: Optional[int] = None
    best_score = math.inf

    for index, candidate in enumerate(pool):
        distance = distance_between(position, candidate.position)
        if params.travel_minutes(distance) + config.visit_duration_minutes > time_available:
            continue
        score = distance + params.penalty_for(candidate.priority)
        if score < best_score:
            best_score = score
            best_index = index

    return best_index


def _report(diagnostics: list[Diagnostic], code: DiagnosticCode, candidate_id: str, message: str) -> None:
    logger.warning(message)
    diagnostics.append(Diagnostic(code=code, candidate_id=candidate_id, message=message))


def _summarize(visits: Sequence[ScheduledVisit], config: ScheduleConfig) -> dict:
    scheduled = [visit for visit in visits if not visit.is_unscheduled]
    day_end = None
    if scheduled:
        last = max(visit.arrival_minutes for visit in scheduled)
        day_end = format_clock(last + config.visit_duration_minutes)
    return {
        "candidate_count": len(visits),
        "scheduled_count": len(scheduled),
        "unscheduled_count": len(visits) - len(scheduled),
        "fixed_count": sum(1 for visit in scheduled if visit.is_fixed),
        "total_distance_km": round(sum(visit.distance_from_prev_km for visit in scheduled), 2),
        "day_end": day_end,
    }
