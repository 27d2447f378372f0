import math

import pytest

from app.core.milestones import (
    build_milestones,
    crossed_milestones,
    crossing_event,
    format_badge,
    format_miles,
    goal_crossed,
    goal_or_default,
    milestone_state,
    next_milestone,
    progress_fraction,
    round_miles,
)


def test_default_goal_ladder():
    assert build_milestones(250) == (10, 25, 50, 100, 150, 200, 250)


def test_goal_below_every_rung():
    assert build_milestones(5) == (5,)


def test_goal_replaces_top_rung():
    assert build_milestones(120) == (10, 25, 50, 100, 120)
    assert build_milestones(500) == (10, 25, 50, 100, 150, 200, 500)


def test_goal_equal_to_a_rung_is_not_duplicated():
    assert build_milestones(100) == (10, 25, 50, 100)


@pytest.mark.parametrize("goal", [0.5, 5, 10, 12.5, 25, 99.99, 100, 149, 250, 1000])
def test_ladder_invariants(goal):
    ms = build_milestones(goal)
    assert all(a < b for a, b in zip(ms, ms[1:]))
    assert all(0 < m <= goal for m in ms)
    assert len(set(ms)) == len(ms)
    assert max(ms) == goal
    # no hidden state
    assert build_milestones(goal) == ms


def test_next_milestone():
    ms = build_milestones(100)
    assert next_milestone(ms, 100) is None
    assert next_milestone(ms, 99.99) == 100
    assert next_milestone(ms, 0) == 10
    assert next_milestone(ms, 10) == 25


def test_crossed_milestones():
    assert crossed_milestones(9, 11, build_milestones(100)) == (10,)
    assert crossed_milestones(10, 10, build_milestones(100)) == ()
    assert crossed_milestones(0, 300, build_milestones(250)) == (10, 25, 50, 100, 150, 200, 250)


def test_decrease_crosses_nothing():
    assert crossed_milestones(60, 5, build_milestones(250)) == ()
    assert not goal_crossed(300, 100, 250)


def test_progress_fraction_is_clamped():
    assert progress_fraction(125, 250) == 0.5
    assert progress_fraction(300, 250) == 1.0
    assert progress_fraction(-5, 250) == 0.0


def test_goal_reached_scenario():
    event = crossing_event(240, 260, 250)
    assert event.thresholds == (250,)
    assert event.goal_reached is True
    assert not event.empty


def test_crossing_event_without_goal():
    event = crossing_event(20, 30, 250)
    assert event.thresholds == (25,)
    assert event.goal_reached is False
    assert crossing_event(30, 30, 250).empty


def test_milestone_state():
    state = milestone_state(30, 100)
    assert state.milestones == (10, 25, 50, 100)
    assert [b.earned for b in state.badges] == [True, True, False, False]
    assert [b.is_next for b in state.badges] == [False, False, True, False]
    assert state.next == 50
    assert state.goal_reached is False
    assert state.fraction == pytest.approx(0.3)

    done = milestone_state(100, 100)
    assert done.next is None
    assert done.goal_reached is True
    assert all(b.earned for b in done.badges)


@pytest.mark.parametrize(
    "goal, expected",
    [(None, 250.0), (0, 250.0), (-3, 250.0), ("abc", 250.0), (math.nan, 250.0),
     (math.inf, 250.0), (80, 80.0), ("42.5", 42.5)],
)
def test_goal_or_default(goal, expected):
    assert goal_or_default(goal) == expected


def test_formatting():
    assert format_miles(7.345) == "7.35"
    assert format_miles(2.675) == "2.68"
    assert format_miles(10) == "10.00"
    assert format_miles(-1.005) == "-1.01"
    assert round_miles(3.14159) == 3.14
    assert round_miles(0.125) == 0.13
    assert format_badge(10.0) == "10"
    assert format_badge(12.5) == "12.5"
    assert format_badge(1500) == "1500"
