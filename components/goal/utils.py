from datetime import date
from decimal import Decimal
from typing import NamedTuple

from components.core.money import to_money


class GoalHealth(NamedTuple):
    progress: float
    remaining: Decimal
    days_remaining: int
    status: str


def days_between(start: date, end: date) -> int:
    return (end - start).days


def goal_health(target_amount, current_amount, target_date: date, status: str, today: date) -> GoalHealth:
    """
    Derive progress and time-based health for a goal.

    Only active goals get a projected status; paused, completed and
    cancelled goals keep the stored one.
    """
    target = to_money(target_amount)
    current = to_money(current_amount)
    progress = current * 100 / target if target > 0 else Decimal(0)
    days_remaining = days_between(today, target_date)

    health = status
    if status == "active":
        if progress >= 100:
            health = "completed"
        elif days_remaining < 0:
            health = "overdue"
        elif progress >= 75:
            health = "on_track"
        elif days_remaining <= 30 and progress < 50:
            health = "at_risk"
        else:
            health = "behind"

    return GoalHealth(
        progress=float(min(progress, Decimal(100))),
        remaining=max(target - current, Decimal(0)),
        days_remaining=days_remaining,
        status=health,
    )
