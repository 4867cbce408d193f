import pytest

from visit_planner.config import settings
from visit_planner.models.domain import GeoPoint, Priority, VisitCandidate
from visit_planner.schemas.schedule import ScheduleRequest
from visit_planner.services.scheduling import service as schedule_service
from visit_planner.errors import InvalidConfigurationError, InvalidScheduleRequestError

START = {"latitude": -3.99313, "longitude": -79.20422}


def _candidate_payload(cid: str, lat_offset: float = 0.0, **extra) -> dict:
    payload = {
        "id": cid,
        "name": f"Client {cid}",
        "location": {"latitude": START["latitude"] + lat_offset, "longitude": START["longitude"]},
    }
    payload.update(extra)
    return payload


def test_plan_visits_uses_settings_defaults(monkeypatch):
    monkeypatch.setattr(settings, "default_work_start", "09:00")

    request = ScheduleRequest(candidates=[_candidate_payload("C1")])
    response = schedule_service.plan_visits(request)

    assert len(response.visits) == 1
    visit = response.visits[0]
    assert visit.id == "C1"
    assert visit.arrival_time == "09:00"
    assert visit.priority == Priority.MEDIUM
    assert response.metadata["scheduled_count"] == 1


def test_plan_visits_defaults_start_location_from_settings(monkeypatch):
    monkeypatch.setattr(settings, "default_start_latitude", START["latitude"])
    monkeypatch.setattr(settings, "default_start_longitude", START["longitude"])
    request = ScheduleRequest(
        candidates=[_candidate_payload("FIXED", lat_offset=0.01)],
        fixed_times={"FIXED": "10:00"},
    )

    response = schedule_service.plan_visits(request)

    assert response.visits[0].is_fixed
    assert response.visits[0].distance_from_prev_km == pytest.approx(1.11)


def test_request_config_overrides_defaults():
    request = ScheduleRequest(
        candidates=[_candidate_payload("A"), _candidate_payload("B")],
        config={"work_start": "07:30", "visit_duration_minutes": 45},
        start_location=START,
    )

    response = schedule_service.plan_visits(request)

    assert [v.arrival_time for v in response.visits] == ["07:30", "08:20"]


def test_priority_overrides_change_selection_without_touching_inputs():
    candidates = [_candidate_payload("NORTH", 0.01), _candidate_payload("SOUTH", -0.01)]
    request = ScheduleRequest(candidates=candidates, start_location=START)

    baseline = schedule_service.plan_visits(request)
    assert baseline.visits[0].id == "NORTH"

    overridden = schedule_service.plan_visits(
        request.model_copy(update={"priority_overrides": {"SOUTH": Priority.HIGH, "GHOST": Priority.LOW}})
    )
    assert overridden.visits[0].id == "SOUTH"
    assert overridden.visits[0].priority == Priority.HIGH
    assert request.candidates[1].priority == Priority.MEDIUM


def test_apply_priority_overrides_returns_new_values():
    original = VisitCandidate(candidate_id="C1", name="Client", position=GeoPoint(0.0, 0.0))

    updated = schedule_service.apply_priority_overrides([original], {"C1": Priority.LOW})

    assert updated[0].priority == Priority.LOW
    assert original.priority == Priority.MEDIUM


def test_duplicate_candidate_ids_are_rejected():
    request = ScheduleRequest(candidates=[_candidate_payload("C1"), _candidate_payload("C1", 0.01)])

    with pytest.raises(InvalidScheduleRequestError, match="C1"):
        schedule_service.plan_visits(request)


def test_candidate_limit_is_enforced(monkeypatch):
    monkeypatch.setattr(settings, "max_candidates_per_run", 2)
    request = ScheduleRequest(candidates=[_candidate_payload(f"C{i}", i * 0.001) for i in range(3)])

    with pytest.raises(InvalidScheduleRequestError):
        schedule_service.plan_visits(request)


def test_invalid_working_day_raises_configuration_error():
    request = ScheduleRequest(
        candidates=[_candidate_payload("C1")],
        config={"work_start": "18:00", "work_end": "08:00"},
    )

    with pytest.raises(InvalidConfigurationError):
        schedule_service.plan_visits(request)


def test_diagnostics_are_returned_in_response():
    request = ScheduleRequest(
        candidates=[_candidate_payload("C1")],
        fixed_times={"C1": "13:15"},
        start_location=START,
    )

    response = schedule_service.plan_visits(request)

    assert response.visits[0].is_fixed
    assert [d.code.value for d in response.diagnostics] == ["FIXED_OVERLAPS_LUNCH"]


def test_schedule_defaults_mirror_settings():
    defaults = schedule_service.schedule_defaults()

    assert defaults.config.work_start == settings.default_work_start
    assert defaults.config.visit_duration_minutes == settings.default_visit_duration_minutes
    assert defaults.start_location.latitude == settings.default_start_latitude
