"""Scheduling orchestration service."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Sequence

from ...config import settings
from ...errors import InvalidScheduleRequestError
from ...models.domain import GeoPoint, Priority, ScheduleConfig, ScheduleResult, VisitCandidate
from ...schemas.schedule import (
    DiagnosticModel,
    GeoPointModel,
    ScheduleConfigModel,
    ScheduleDefaultsResponse,
    ScheduledVisitModel,
    ScheduleRequest,
    ScheduleResponse,
    VisitCandidateModel,
)
from ..outputs.schedule_formatter import schedule_result_to_json
from .scheduler import SchedulerParameters, schedule

logger = logging.getLogger(__name__)


def _build_config(payload: ScheduleRequest) -> ScheduleConfig:
    overrides = payload.config or ScheduleConfigModel()
    return ScheduleConfig.from_clock(
        work_start=overrides.work_start or settings.default_work_start,
        work_end=overrides.work_end or settings.default_work_end,
        lunch_start=overrides.lunch_start or settings.default_lunch_start,
        lunch_duration_minutes=overrides.lunch_duration_minutes
        if overrides.lunch_duration_minutes is not None
        else settings.default_lunch_duration_minutes,
        visit_duration_minutes=overrides.visit_duration_minutes
        if overrides.visit_duration_minutes is not None
        else settings.default_visit_duration_minutes,
    )


def _build_parameters() -> SchedulerParameters:
    return SchedulerParameters(
        minutes_per_km=settings.travel_minutes_per_km,
        overhead_minutes=settings.travel_overhead_minutes,
        priority_penalties={
            Priority.HIGH: settings.priority_penalty_high_km,
            Priority.MEDIUM: settings.priority_penalty_medium_km,
            Priority.LOW: settings.priority_penalty_low_km,
        },
    )


def _start_position(payload: ScheduleRequest) -> GeoPoint:
    if payload.start_location is not None:
        return GeoPoint(latitude=payload.start_location.latitude, longitude=payload.start_location.longitude)
    return GeoPoint(latitude=settings.default_start_latitude, longitude=settings.default_start_longitude)


def _to_candidate(model: VisitCandidateModel) -> VisitCandidate:
    return VisitCandidate(
        candidate_id=model.id,
        name=model.name,
        category=model.category,
        position=GeoPoint(latitude=model.location.latitude, longitude=model.location.longitude),
        priority=model.priority,
        address=model.address,
        zone_name=model.zone_name,
    )


def _validate_candidates(candidates: Sequence[VisitCandidateModel]) -> None:
    if len(candidates) > settings.max_candidates_per_run:
        raise InvalidScheduleRequestError(
            f"Too many candidates ({len(candidates)}); at most {settings.max_candidates_per_run} per run."
        )
    seen: set[str] = set()
    duplicates: list[str] = []
    for candidate in candidates:
        if candidate.id in seen and candidate.id not in duplicates:
            duplicates.append(candidate.id)
        seen.add(candidate.id)
    if duplicates:
        raise InvalidScheduleRequestError(f"Duplicate candidate ids: {', '.join(duplicates)}.")


def apply_priority_overrides(
    candidates: Sequence[VisitCandidate], overrides: dict[str, Priority]
) -> list[VisitCandidate]:
    """Return new candidates with per-run priorities applied; the inputs are left untouched."""

    known_ids = {candidate.candidate_id for candidate in candidates}
    for candidate_id in overrides:
        if candidate_id not in known_ids:
            logger.info("Ignoring priority override for unknown candidate '%s'", candidate_id)
    return [
        replace(candidate, priority=overrides[candidate.candidate_id])
        if candidate.candidate_id in overrides
        else candidate
        for candidate in candidates
    ]


def run_schedule(payload: ScheduleRequest) -> ScheduleResult:
    _validate_candidates(payload.candidates)
    config = _build_config(payload)
    candidates = apply_priority_overrides(
        [_to_candidate(model) for model in payload.candidates],
        dict(payload.priority_overrides),
    )

    result = schedule(
        candidates,
        config,
        dict(payload.fixed_times),
        _start_position(payload),
        _build_parameters(),
    )

    metadata = result.metadata
    logger.info(
        "Scheduled %s of %s visits (%s fixed, %s unscheduled), %.2f km",
        metadata["scheduled_count"],
        metadata["candidate_count"],
        metadata["fixed_count"],
        metadata["unscheduled_count"],
        metadata["total_distance_km"],
    )
    return result


def plan_visits(payload: ScheduleRequest) -> ScheduleResponse:
    result = run_schedule(payload)
    document = schedule_result_to_json(result)
    return ScheduleResponse(
        metadata=document["metadata"],
        visits=[ScheduledVisitModel(**visit) for visit in document["visits"]],
        diagnostics=[DiagnosticModel(**diagnostic) for diagnostic in document["diagnostics"]],
    )


def schedule_defaults() -> ScheduleDefaultsResponse:
    return ScheduleDefaultsResponse(
        config=ScheduleConfigModel(
            work_start=settings.default_work_start,
            work_end=settings.default_work_end,
            lunch_start=settings.default_lunch_start,
            lunch_duration_minutes=settings.default_lunch_duration_minutes,
            visit_duration_minutes=settings.default_visit_duration_minutes,
        ),
        start_location=GeoPointModel(
            latitude=settings.default_start_latitude,
            longitude=settings.default_start_longitude,
        ),
    )
