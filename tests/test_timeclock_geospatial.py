import inspect

import pytest

from visit_planner.models import domain
from visit_planner.models.domain import GeoPoint
from visit_planner.services.geospatial import distance_between, haversine_km, travel_minutes
from visit_planner.timeclock import format_clock, parse_clock


def test_parse_clock_accepts_padded_and_unpadded_hours():
    assert parse_clock("08:00") == 480
    assert parse_clock("7:05") == 425
    assert parse_clock("23:59") == 1439


@pytest.mark.parametrize("value", ["", "8", "08-00", "24:00", "12:60", "ab:cd"])
def test_parse_clock_rejects_malformed_values(value):
    with pytest.raises(ValueError):
        parse_clock(value)


def test_format_clock_pads_hours_and_minutes():
    assert format_clock(485) == "08:05"
    assert format_clock(0) == "00:00"


def test_haversine_zero_for_identical_points():
    assert haversine_km(-3.99313, -79.20422, -3.99313, -79.20422) == 0.0


def test_haversine_one_degree_of_latitude():
    assert haversine_km(0.0, 0.0, 1.0, 0.0) == pytest.approx(111.195, rel=1e-3)


def test_distance_between_is_symmetric():
    a = GeoPoint(latitude=-3.99, longitude=-79.20)
    b = GeoPoint(latitude=-4.01, longitude=-79.25)
    assert distance_between(a, b) == pytest.approx(distance_between(b, a))


def test_travel_minutes_linear_model_with_overhead():
    assert travel_minutes(0.0) == 5
    assert travel_minutes(0.01) == 6
    assert travel_minutes(1.0) == 8
    assert travel_minutes(1.0, minutes_per_km=2.0, overhead_minutes=0) == 2


def test_domain_model_does_not_import_service_layer():
    source = inspect.getsource(domain)

    assert "services" not in source
    assert "from ..timeclock import parse_clock" in source
