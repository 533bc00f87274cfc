from datetime import date

OPEN_STATUSES = ("pending", "overdue")


def days_until_due(due_date: date, today: date) -> int:
    return (due_date - today).days


def is_overdue(due_date: date, status: str, today: date) -> bool:
    """A payment is overdue once its due date has passed and it is still open."""
    return days_until_due(due_date, today) < 0 and status in OPEN_STATUSES
