"""Milestone (badge) and goal-progress math.

Everything here is a pure function of its numeric inputs; callers fetch
totals and goals and pass them in on every call.

    >>> build_milestones(120)
    (10, 25, 50, 100, 120)
    >>> next_milestone(build_milestones(120), 60)
    100
"""
import math
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Sequence

from app.core.constants import BASE_MILESTONES, DEFAULT_GOAL_MILES, GOAL_SENTINEL


@dataclass(frozen=True)
class Badge:
    miles: float
    earned: bool
    is_next: bool


@dataclass(frozen=True)
class MilestoneState:
    goal: float
    total: float
    milestones: tuple
    badges: tuple
    next: Optional[float]
    goal_reached: bool
    fraction: float


@dataclass(frozen=True)
class CrossingEvent:
    thresholds: tuple
    goal_reached: bool

    @property
    def empty(self) -> bool:
        return not self.thresholds and not self.goal_reached


def goal_or_default(goal) -> float:
    """Return `goal` if it is a finite number > 0, else the default goal."""
    try:
        g = float(goal)
    except (TypeError, ValueError):
        return DEFAULT_GOAL_MILES
    if not math.isfinite(g) or g <= 0:
        return DEFAULT_GOAL_MILES
    return g


def build_milestones(goal: float) -> tuple:
    """Badge thresholds for `goal`, ascending and unique, all in (0, goal].

    The 250 rung is replaced by the goal itself, so the goal is always the
    top badge.
    """
    ladder = [goal if m == GOAL_SENTINEL else m for m in BASE_MILESTONES]
    return tuple(sorted({m for m in ladder if 0 < m <= goal}))


def next_milestone(milestones: Sequence[float], total: float) -> Optional[float]:
    for m in milestones:
        if total < m:
            return m
    return None


def crossed_milestones(
    previous_total: float, current_total: float, milestones: Sequence[float]
) -> tuple:
    return tuple(m for m in milestones if previous_total < m <= current_total)


def goal_reached(total: float, goal: float) -> bool:
    return total >= goal


def goal_crossed(previous_total: float, current_total: float, goal: float) -> bool:
    return previous_total < goal <= current_total


def progress_fraction(total: float, goal: float) -> float:
    """total / goal clamped to [0, 1] (progress bar width)."""
    return max(0.0, min(1.0, total / goal))


def milestone_state(total: float, goal: float) -> MilestoneState:
    milestones = build_milestones(goal)
    upcoming = next_milestone(milestones, total)
    badges = tuple(
        Badge(miles=m, earned=total >= m, is_next=(m == upcoming))
        for m in milestones
    )
    return MilestoneState(
        goal=goal,
        total=total,
        milestones=milestones,
        badges=badges,
        next=upcoming,
        goal_reached=goal_reached(total, goal),
        fraction=progress_fraction(total, goal),
    )


def crossing_event(previous_total: float, current_total: float, goal: float) -> CrossingEvent:
    return CrossingEvent(
        thresholds=crossed_milestones(previous_total, current_total, build_milestones(goal)),
        goal_reached=goal_crossed(previous_total, current_total, goal),
    )


def round_miles(value: float) -> float:
    """Round a user-entered distance to 2 decimals before it is stored."""
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def format_miles(value) -> str:
    """Display form: exactly two decimals, half away from zero. '7.35'"""
    return str(Decimal(str(float(value))).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def format_badge(miles: float) -> str:
    """Badge label without trailing zeros: 10.0 -> '10', 12.5 -> '12.5'."""
    return format_miles(miles).rstrip("0").rstrip(".")
