from decimal import Decimal
from typing import NamedTuple

from components.core.money import to_money


class BudgetHealth(NamedTuple):
    spent: Decimal
    remaining: Decimal
    percentage: float
    status: str


def budget_health(amount, spent, alert_threshold: float = 0.8) -> BudgetHealth:
    """
    Derive spending health for a budget.

    The status uses the unclamped percentage: exceeded from 100%,
    warning from alert_threshold * 100%, good below that. The reported
    percentage is clamped to 100.
    """
    amount = to_money(amount)
    spent = to_money(spent)
    percentage = spent * 100 / amount if amount > 0 else Decimal(0)
    threshold = Decimal(repr(float(alert_threshold))) * 100

    if percentage >= 100:
        status = "exceeded"
    elif percentage >= threshold:
        status = "warning"
    else:
        status = "good"

    return BudgetHealth(
        spent=spent,
        remaining=max(amount - spent, Decimal(0)),
        percentage=float(min(percentage, Decimal(100))),
        status=status,
    )
