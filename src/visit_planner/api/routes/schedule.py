"""Visit scheduling endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Response, status

from ...schemas.schedule import ScheduleDefaultsResponse, ScheduleRequest, ScheduleResponse
from ...services.outputs.schedule_formatter import schedule_result_to_csv
from ...services.scheduling.service import plan_visits, run_schedule, schedule_defaults

router = APIRouter(prefix="/schedule", tags=["schedule"])


@router.get("/defaults", response_model=ScheduleDefaultsResponse, status_code=status.HTTP_200_OK)
def defaults() -> ScheduleDefaultsResponse:
    """Working-day defaults used when a request leaves fields out."""
    return schedule_defaults()


@router.post("/optimize", response_model=ScheduleResponse, status_code=status.HTTP_200_OK)
def optimize(payload: ScheduleRequest) -> ScheduleResponse:
    try:
        return plan_visits(payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error scheduling visits: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to schedule visits: {str(exc)}",
        ) from exc


@router.post("/optimize/csv", status_code=status.HTTP_200_OK)
def optimize_csv(payload: ScheduleRequest) -> Response:
    """Same as /optimize, rendered as a CSV sheet for download."""
    try:
        result = run_schedule(payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error exporting visit schedule: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to export schedule: {str(exc)}",
        ) from exc
    return Response(
        content=schedule_result_to_csv(result),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="visit_schedule.csv"'},
    )
