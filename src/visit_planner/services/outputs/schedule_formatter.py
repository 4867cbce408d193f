"""Serializers for schedule outputs."""

from __future__ import annotations

import csv
import io
from dataclasses import asdict

from ...models.domain import ScheduledVisit, ScheduleResult

CSV_FIELDS = [
    "sequence",
    "candidate_id",
    "name",
    "category",
    "priority",
    "arrival_time",
    "distance_from_prev_km",
    "is_fixed",
    "is_unscheduled",
    "address",
    "zone_name",
]


def _visit_to_json(visit: ScheduledVisit) -> dict:
    candidate = visit.candidate
    return {
        "id": candidate.candidate_id,
        "name": candidate.name,
        "category": candidate.category.value,
        "priority": candidate.priority.value,
        "location": asdict(candidate.position),
        "address": candidate.address,
        "zone_name": candidate.zone_name,
        "arrival_time": visit.arrival_time,
        "distance_from_prev_km": visit.distance_from_prev_km,
        "is_fixed": visit.is_fixed,
        "is_unscheduled": visit.is_unscheduled,
    }


def schedule_result_to_json(result: ScheduleResult) -> dict:
    return {
        "metadata": result.metadata,
        "visits": [_visit_to_json(visit) for visit in result.visits],
        "diagnostics": [
            {
                "code": diagnostic.code.value,
                "candidate_id": diagnostic.candidate_id,
                "message": diagnostic.message,
            }
            for diagnostic in result.diagnostics
        ],
    }


def schedule_result_to_csv(result: ScheduleResult) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=CSV_FIELDS)
    writer.writeheader()
    sequence = 0
    for visit in result.visits:
        candidate = visit.candidate
        if not visit.is_unscheduled:
            sequence += 1
        writer.writerow(
            {
                "sequence": "" if visit.is_unscheduled else sequence,
                "candidate_id": candidate.candidate_id,
                "name": candidate.name,
                "category": candidate.category.value,
                "priority": candidate.priority.value,
                "arrival_time": visit.arrival_time,
                "distance_from_prev_km": f"{visit.distance_from_prev_km:.2f}",
                "is_fixed": visit.is_fixed,
                "is_unscheduled": visit.is_unscheduled,
                "address": candidate.address or "",
                "zone_name": candidate.zone_name or "",
            }
        )
    return buffer.getvalue()
