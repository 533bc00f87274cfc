"""Sign convention helpers for ledger amounts."""

from decimal import Decimal

from components.core.money import to_money


def signed_amount(amount: float | Decimal, transaction_type: str) -> Decimal:
    """Expenses are stored negative, income positive."""
    magnitude = abs(to_money(amount))
    return -magnitude if transaction_type == "expense" else magnitude


def type_for_amount(amount: Decimal) -> str:
    return "expense" if amount < 0 else "income"
