"""Badge and goal celebrations ("toasts") between two observations of a group.

The milestone math is stateless, so whoever wants celebrations must keep
the previous totals. `CelebrationTracker` is that holder; a request handler
that already has a before/after pair can call `celebrations_between`
directly.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from app.core.milestones import crossing_event, format_badge, format_miles
from app.schemas.group import GroupStats

logger = logging.getLogger(__name__)

GROUP = "group"
MINE = "mine"

_BADGE_MESSAGES = {
    GROUP: "Group earned the {m}-mile badge!",
    MINE: "You earned the {m}-mile badge!",
}
_GOAL_MESSAGES = {
    GROUP: "Group goal achieved: {goal} miles!",
    MINE: "You hit your goal: {goal} miles!",
}


@dataclass(frozen=True)
class Celebration:
    scope: str
    kind: str   # "badge" or "goal"
    miles: float
    message: str


def scope_celebrations(scope: str, previous: float, current: float, goal: float) -> list[Celebration]:
    """Celebrations for one total moving from `previous` to `current`.

    Nothing is emitted unless the total went up.
    """
    if current <= previous:
        return []
    event = crossing_event(previous, current, goal)
    out = [
        Celebration(scope, "badge", m, _BADGE_MESSAGES[scope].format(m=format_badge(m)))
        for m in event.thresholds
    ]
    if event.goal_reached:
        out.append(
            Celebration(scope, "goal", goal, _GOAL_MESSAGES[scope].format(goal=format_miles(goal)))
        )
    return out


def celebrations_between(
    previous_group_total: Optional[float],
    previous_my_total: Optional[float],
    current: GroupStats,
) -> list[Celebration]:
    """Celebrations for a caller-supplied previous observation.

    A scope whose previous total is unknown (None) emits nothing.
    """
    out: list[Celebration] = []
    if previous_group_total is not None:
        out += scope_celebrations(GROUP, previous_group_total, current.group_total, current.goal_miles)
    if previous_my_total is not None:
        out += scope_celebrations(MINE, previous_my_total, current.my_total, current.my_goal)
    return out


class CelebrationTracker:
    """Remembers the highest totals seen for one group/user pair.

    Badges only ratchet upward: a drop in the total (say an entry is deleted)
    emits nothing and does not lower the baseline, so climbing back over an
    already-celebrated badge is not celebrated twice.
    """

    def __init__(self):
        self._group: Optional[float] = None
        self._mine: Optional[float] = None

    @property
    def baseline(self) -> Optional[tuple]:
        """Highest (group, mine) totals seen so far, or None before the first observation."""
        if self._group is None:
            return None
        return (self._group, self._mine)

    def observe(self, stats: GroupStats) -> list[Celebration]:
        if self._group is None or self._mine is None:
            # first sighting only sets the baseline
            self._group = stats.group_total
            self._mine = stats.my_total
            return []

        out = celebrations_between(self._group, self._mine, stats)
        self._group = max(self._group, stats.group_total)
        self._mine = max(self._mine, stats.my_total)
        if out:
            logger.info(
                "group %s: %d celebration(s) %s",
                stats.group_id,
                len(out),
                [c.message for c in out],
            )
        return out
