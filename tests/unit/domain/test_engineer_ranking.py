"""Tests for candidate filtering, ranking and weekday derivation."""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest
from fakes import BENGALURU, make_engineer

from fieldservice.domain.policies.engineer_ranking import (
    filter_candidates,
    rank_engineers,
    weekday_name,
)
from fieldservice.domain.value_objects.enums import ServiceType, Specialization
from fieldservice.domain.value_objects.geo_point import GeoPoint

NEAR = GeoPoint(latitude=12.98, longitude=77.59)
FAR = GeoPoint(latitude=13.10, longitude=77.59)


# ─── Ranking ─────────────────────────────────────────────────────────


def test_excludes_engineers_without_location():
    located = make_engineer("a@x.com", location=NEAR)
    missing = make_engineer("b@x.com", location=None)
    broken = make_engineer("c@x.com", location=GeoPoint(latitude=float("nan"), longitude=77.0))

    ranked = rank_engineers([missing, located, broken], BENGALURU)

    assert [r.engineer.email for r in ranked] == ["a@x.com"]


def test_orders_by_distance():
    far = make_engineer("far@x.com", location=FAR)
    near = make_engineer("near@x.com", location=NEAR, current_tasks=9)

    ranked = rank_engineers([far, near], BENGALURU)

    assert [r.engineer.email for r in ranked] == ["near@x.com", "far@x.com"]
    assert ranked[0].distance_km < ranked[1].distance_km


def test_equal_distance_goes_by_load():
    busy = make_engineer("busy@x.com", location=NEAR, current_tasks=3)
    idle = make_engineer("idle@x.com", location=NEAR, current_tasks=1)

    ranked = rank_engineers([busy, idle], BENGALURU)

    assert [r.engineer.email for r in ranked] == ["idle@x.com", "busy@x.com"]


def test_full_tie_keeps_input_order():
    a = make_engineer("a@x.com", location=NEAR)
    b = make_engineer("b@x.com", location=NEAR)
    assert [r.engineer.email for r in rank_engineers([b, a], BENGALURU)] == ["b@x.com", "a@x.com"]


def test_ungeocoded_ticket_ranks_by_load_only():
    busy = make_engineer("busy@x.com", location=NEAR, current_tasks=4)
    idle = make_engineer("idle@x.com", location=FAR, current_tasks=0)
    nowhere = make_engineer("nowhere@x.com", location=None)

    ranked = rank_engineers([busy, idle, nowhere], None)

    assert [r.engineer.email for r in ranked] == ["idle@x.com", "busy@x.com"]
    assert all(r.distance_km is None for r in ranked)


def test_empty_candidates():
    assert rank_engineers([], BENGALURU) == []


# ─── Filtering ───────────────────────────────────────────────────────


def test_filter_by_weekday_and_specialization():
    ok = make_engineer("ok@x.com", availability=("Monday", "Tuesday"))
    wrong_day = make_engineer("day@x.com", availability=("Friday",))
    wrong_spec = make_engineer("spec@x.com", specialization=Specialization.FAULT)

    result = filter_candidates([ok, wrong_day, wrong_spec], "Monday", ServiceType.INSTALLATION)

    assert [e.email for e in result] == ["ok@x.com"]


def test_specialization_match_is_case_insensitive():
    eng = make_engineer(specialization=Specialization.FAULT)
    assert filter_candidates([eng], "Monday", "FAULT") == [eng]


# ─── Weekday ─────────────────────────────────────────────────────────


def test_weekday_in_utc():
    assert weekday_name(datetime(2024, 6, 3, 12, 0, tzinfo=timezone.utc)) == "Monday"


def test_weekday_uses_local_timezone():
    # 20:00 UTC Sunday is 01:30 Monday in India
    moment = datetime(2024, 6, 2, 20, 0, tzinfo=timezone.utc)
    assert weekday_name(moment) == "Sunday"
    assert weekday_name(moment, ZoneInfo("Asia/Kolkata")) == "Monday"


@pytest.mark.parametrize("naive,expected", [
    (datetime(2024, 6, 8, 10, 0), "Saturday"),
    (datetime(2024, 6, 9, 23, 59), "Sunday"),
])
def test_naive_datetimes_are_utc(naive, expected):
    assert weekday_name(naive) == expected
