# services/evaluator.py
"""Budget status evaluation.

`evaluate` is a pure function of a budget and the spending measured against
it. Thresholds are fixed:

    status       spending > amount -> Exceeded, pct >= 90 -> Critical,
                 pct >= 80 -> Warning, otherwise On Track
    alert level  pct >= 100 -> Alert, pct >= 90 -> Warning, pct >= 80 -> Info

"Exceeded" compares the raw amounts strictly, so spending exactly equal to
the budget is "Critical" while its alert level is already "Alert".
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..config import format_money

INFO_THRESHOLD = Decimal("80")
CRITICAL_THRESHOLD = Decimal("90")
EXCEEDED_THRESHOLD = Decimal("100")

STATUS_ON_TRACK = "On Track"
STATUS_WARNING = "Warning"
STATUS_CRITICAL = "Critical"
STATUS_EXCEEDED = "Exceeded"

ALERT_NONE = "None"
ALERT_INFO = "Info"
ALERT_WARNING = "Warning"
ALERT_ALERT = "Alert"

OVERALL_CATEGORY_NAME = "Overall"


@dataclass(frozen=True)
class BudgetStatus:
    budget_id: Optional[int]
    user_id: int
    category_id: Optional[int]
    category_name: str
    month_year: str
    budget_amount: Decimal
    current_spending: Decimal
    remaining_budget: Decimal
    percentage_used: Decimal
    status: str
    alert_level: str
    should_alert: bool
    alert_message: Optional[str]


def percentage_used(amount: Decimal, spending: Decimal) -> Decimal:
    if amount > 0:
        return (spending / amount) * 100
    return Decimal("0")


def budget_state(amount: Decimal, spending: Decimal, pct: Decimal) -> str:
    if spending > amount:
        return STATUS_EXCEEDED
    if pct >= CRITICAL_THRESHOLD:
        return STATUS_CRITICAL
    if pct >= INFO_THRESHOLD:
        return STATUS_WARNING
    return STATUS_ON_TRACK


def alert_level(pct: Decimal) -> str:
    if pct >= EXCEEDED_THRESHOLD:
        return ALERT_ALERT
    if pct >= CRITICAL_THRESHOLD:
        return ALERT_WARNING
    if pct >= INFO_THRESHOLD:
        return ALERT_INFO
    return ALERT_NONE


def alert_message(pct: Decimal, spending: Decimal, amount: Decimal) -> Optional[str]:
    level = alert_level(pct)
    if level == ALERT_ALERT:
        return (
            f"Budget exceeded! You've spent {format_money(spending)} of "
            f"{format_money(amount)} ({pct:.1f}%)."
        )
    if level == ALERT_WARNING:
        return (
            f"Warning: You've used {pct:.1f}% of your budget. "
            f"{format_money(spending)} / {format_money(amount)}."
        )
    if level == ALERT_INFO:
        return (
            f"Info: You've used {pct:.1f}% of your budget. "
            f"{format_money(spending)} / {format_money(amount)}."
        )
    return None


def evaluate(budget, current_spending: Decimal, category_name: Optional[str] = None) -> BudgetStatus:
    """Derive the status record of `budget` given the spending measured against it.

    `budget` is anything exposing id, owner_id, category_id, month_year and
    amount (normally a models.Budget). `category_name` overrides the name the
    budget reports for itself.
    """
    amount = Decimal(budget.amount)
    spending = Decimal(current_spending)
    pct = percentage_used(amount, spending)
    should_alert = pct >= INFO_THRESHOLD

    if category_name is None:
        category_name = getattr(budget, "category_name", None) or OVERALL_CATEGORY_NAME

    return BudgetStatus(
        budget_id=budget.id,
        user_id=budget.owner_id,
        category_id=budget.category_id,
        category_name=category_name,
        month_year=budget.month_year,
        budget_amount=amount,
        current_spending=spending,
        remaining_budget=amount - spending,
        percentage_used=pct,
        status=budget_state(amount, spending, pct),
        alert_level=alert_level(pct),
        should_alert=should_alert,
        alert_message=alert_message(pct, spending, amount) if should_alert else None,
    )
