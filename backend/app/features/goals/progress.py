"""
Goal progress calculation.

Progress is derived, never stored:
- current distance: sum of session distances inside the goal window
- percentage: current / target, capped at 100
- expected distance: linear share of the target by elapsed time,
  with "now" clamped to the goal window
- status: Completed / Behind / Ahead / On Track
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional

from app.shared.dates import to_naive_utc, utcnow

STATUS_COMPLETED = "Completed"
STATUS_BEHIND = "Behind"
STATUS_AHEAD = "Ahead"
STATUS_ON_TRACK = "On Track"

# Ahead only when more than 10% over the expected distance
AHEAD_MARGIN = 1.1


@dataclass
class GoalProgress:
    current_distance: float
    progress_percentage: float
    expected_distance: float
    status: str
    sessions: list = field(default_factory=list)


def expected_distance(
    target_distance: float,
    start: datetime,
    end: datetime,
    now: datetime
) -> float:
    """Distance that should be covered by `now` at an even pace."""
    calc_date = min(max(now, start), end)

    total_seconds = (end - start).total_seconds()
    if total_seconds <= 0:
        return 0.0

    elapsed_seconds = (calc_date - start).total_seconds()
    return (elapsed_seconds / total_seconds) * target_distance


def classify_progress(current: float, target: float, expected: float) -> str:
    if current >= target:
        return STATUS_COMPLETED
    if current < expected:
        return STATUS_BEHIND
    if current > expected * AHEAD_MARGIN:
        return STATUS_AHEAD
    return STATUS_ON_TRACK


def calculate_goal_progress(
    goal,
    sessions: Iterable,
    now: Optional[datetime] = None
) -> GoalProgress:
    """
    Compute progress for a goal from the sessions inside its window.

    Args:
        goal: Object with target_distance, start_date, end_date
        sessions: Sessions already filtered to the goal window
        now: Reference time (defaults to current UTC time)
    """
    sessions = list(sessions)
    now = to_naive_utc(now) if now else utcnow()
    start = to_naive_utc(goal.start_date)
    end = to_naive_utc(goal.end_date)

    total = sum(s.distance for s in sessions)
    expected = expected_distance(goal.target_distance, start, end, now)

    percentage = 0.0
    if goal.target_distance > 0:
        percentage = min((total / goal.target_distance) * 100, 100.0)

    return GoalProgress(
        current_distance=round(total, 2),
        progress_percentage=round(percentage, 2),
        expected_distance=round(expected, 2),
        status=classify_progress(total, goal.target_distance, expected),
        sessions=sessions,
    )
