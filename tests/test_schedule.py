"""Tests for study schedule generation."""
from datetime import date, timedelta

import pytest

from aurum_planner.schedule import (
    DIFFICULTY_WEEKS, STUDY_TOPICS, build_test, generate_schedule, session_duration,
)


@pytest.mark.parametrize("difficulty", [1, 2, 3, 4, 5])
def test_session_count_is_one_per_prep_day(difficulty):
    sessions = generate_schedule("Physics", date(2024, 6, 1), difficulty)
    assert len(sessions) == 7 * difficulty


@pytest.mark.parametrize("difficulty", [1, 3, 5])
def test_sessions_cover_prep_window_in_order(difficulty):
    test_date = date(2024, 6, 1)
    sessions = generate_schedule("Physics", test_date, difficulty)
    dates = [s.date for s in sessions]
    assert dates == sorted(set(dates))
    assert dates[0] == test_date - timedelta(days=7 * difficulty)
    assert dates[-1] == test_date - timedelta(days=1)


def test_difficulty_two_scenario():
    sessions = generate_schedule("Mathematics", date(2024, 3, 15), 2)
    assert len(sessions) == 14
    assert sessions[0].date == date(2024, 3, 1)
    assert sessions[-1].date == date(2024, 3, 14)
    assert all(s.duration_minutes == 55 for s in sessions)
    assert not any(s.is_completed for s in sessions)


def test_topics_cycle_through_default_list():
    sessions = generate_schedule("Biology", date(2024, 3, 15), 2)
    topics = STUDY_TOPICS["default"]
    assert sessions[0].topic == f"Day 1: {topics[0]}"
    assert sessions[6].topic == f"Day 7: {topics[6]}"
    assert sessions[7].topic == f"Day 8: {topics[0]}"
    assert sessions[13].topic == "Day 14: Final review"


def test_session_ids_are_unique():
    sessions = generate_schedule("Art", date(2024, 3, 15), 5)
    assert len({s.id for s in sessions}) == len(sessions)


def test_same_inputs_give_same_plan_except_ids():
    a = generate_schedule("Art", date(2024, 3, 15), 3)
    b = generate_schedule("Art", date(2024, 3, 15), 3)
    strip = lambda ss: [(s.date, s.topic, s.duration_minutes, s.is_completed) for s in ss]
    assert strip(a) == strip(b)
    assert {s.id for s in a}.isdisjoint({s.id for s in b})


def test_zero_difficulty_gives_empty_schedule():
    assert generate_schedule("Art", date(2024, 3, 15), 0) == []


def test_difficulty_weeks_lookup():
    assert DIFFICULTY_WEEKS == {1: 1, 2: 2, 3: 3, 4: 4, 5: 5}


def test_session_duration():
    assert session_duration(1) == 50
    assert session_duration(5) == 70


def test_build_test_attaches_schedule():
    t = build_test("Chemistry", date(2024, 3, 15), 1, title="  ")
    assert t.title == "Chemistry"
    assert t.difficulty == 1
    assert len(t.sessions) == 7
    assert t.sessions[-1].date == date(2024, 3, 14)


def test_build_test_keeps_custom_title():
    t = build_test("Chemistry", date(2024, 3, 15), 1, title="Organic final")
    assert t.title == "Organic final"
