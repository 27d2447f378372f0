from app.schemas.group import GroupStats
from app.services.celebrations import (
    CelebrationTracker,
    celebrations_between,
    scope_celebrations,
)


def stats(group_total, my_total, goal=250, my_goal=100):
    return GroupStats(
        group_id="g1",
        group_name="Trail Crew",
        goal_miles=goal,
        group_total=group_total,
        my_total=my_total,
        my_goal=my_goal,
    )


def test_first_observation_only_sets_baseline():
    tracker = CelebrationTracker()
    assert tracker.baseline is None
    assert tracker.observe(stats(240, 5)) == []
    assert tracker.baseline == (240, 5)


def test_group_goal_scenario():
    tracker = CelebrationTracker()
    tracker.observe(stats(240, 5))
    out = tracker.observe(stats(260, 5))
    assert [(c.scope, c.kind, c.miles) for c in out] == [
        ("group", "badge", 250),
        ("group", "goal", 250),
    ]
    assert out[0].message == "Group earned the 250-mile badge!"
    assert out[1].message == "Group goal achieved: 250.00 miles!"


def test_personal_badges_in_order():
    tracker = CelebrationTracker()
    tracker.observe(stats(0, 0))
    out = tracker.observe(stats(30, 30))
    mine = [c for c in out if c.scope == "mine"]
    assert [c.miles for c in mine] == [10, 25]
    assert mine[0].message == "You earned the 10-mile badge!"
    group = [c for c in out if c.scope == "group"]
    assert [c.miles for c in group] == [10, 25]


def test_decrease_is_a_ratchet():
    tracker = CelebrationTracker()
    tracker.observe(stats(0, 12))
    assert [c.miles for c in tracker.observe(stats(0, 26)) if c.scope == "mine"] == [25]
    # entry deleted: nothing emitted, baseline kept
    assert tracker.observe(stats(0, 20)) == []
    assert tracker.baseline == (0, 26)
    # climbing back over 25 is not celebrated twice
    assert tracker.observe(stats(0, 27)) == []


def test_no_change_no_celebration():
    tracker = CelebrationTracker()
    tracker.observe(stats(10, 10))
    assert tracker.observe(stats(10, 10)) == []


def test_personal_goal_message():
    out = scope_celebrations("mine", 95, 100.5, 100)
    assert [c.kind for c in out] == ["badge", "goal"]
    assert out[-1].message == "You hit your goal: 100.00 miles!"


def test_celebrations_between_skips_unknown_scope():
    out = celebrations_between(None, 0, stats(300, 11))
    assert [(c.scope, c.miles) for c in out] == [("mine", 10)]
    assert celebrations_between(None, None, stats(300, 300)) == []


def test_zero_goal_falls_back_to_default():
    s = stats(0, 0, goal=0, my_goal=None)
    assert s.goal_miles == 250
    assert s.my_goal == 250
