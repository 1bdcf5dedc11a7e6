# services/alerts.py
"""Budget alert dispatch and other system notifications.

The dispatcher runs on the heels of an expense or budget write. It never
raises: each call returns an AlertOutcome the caller is free to ignore, and
work that outlives the configured timeout is abandoned and reported as
TIMED_OUT; a notification it had not yet committed is never written.
Repeated qualifying writes each produce a new notification.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FuturesTimeoutError
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Callable, Optional, Tuple

from sqlalchemy.orm import Session

from .. import config
from ..config import format_money
from .budget_store import BudgetStore
from .evaluator import ALERT_ALERT, ALERT_INFO, ALERT_WARNING, BudgetStatus, evaluate
from .notification_store import NotificationStore
from .spending import SpendingQuery, current_spending, expense_count

logger = logging.getLogger(__name__)


class AlertResult(str, Enum):
    SENT = "sent"
    NO_BUDGET = "no_budget"
    BELOW_THRESHOLD = "below_threshold"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True)
class AlertOutcome:
    result: AlertResult
    notification_id: Optional[int] = None
    alert_level: Optional[str] = None
    error: Optional[str] = None

    @property
    def sent(self) -> bool:
        return self.result is AlertResult.SENT


def budget_alert_content(status: BudgetStatus) -> Tuple[str, str, str]:
    """Title, message and notification type for a status that should alert."""
    name = status.category_name
    pct = status.percentage_used
    spent = format_money(status.current_spending)
    budget = format_money(status.budget_amount)

    if status.alert_level == ALERT_ALERT:
        return (
            f"Budget Exceeded: {name}",
            f"You've exceeded your {name} budget! Current spending: {spent} / {budget} "
            f"({pct:.1f}%). Please review your expenses.",
            "Alert",
        )
    if status.alert_level == ALERT_WARNING:
        return (
            f"Budget Warning: {name}",
            f"You've used {pct:.1f}% of your {name} budget. Current spending: {spent} / {budget}. "
            f"Consider reducing expenses.",
            "Warning",
        )
    if status.alert_level == ALERT_INFO:
        return (
            f"Budget Alert: {name}",
            f"You've used {pct:.1f}% of your {name} budget. Current spending: {spent} / {budget}",
            "Info",
        )
    raise ValueError(f"No alert content for alert level {status.alert_level!r}")


def expense_added_content(amount: Decimal, category_name: str) -> Tuple[str, str, str]:
    return (
        "Expense Added Successfully",
        f"Your expense of {format_money(amount)} in {category_name or 'Unknown'} category has been recorded.",
        "Success",
    )


def monthly_summary_content(month_year: str, total: Decimal, count: int) -> Tuple[str, str, str]:
    return (
        f"Monthly Summary - {month_year}",
        f"You spent {format_money(total)} across {count} transactions this month. "
        f"View detailed breakdown in reports.",
        "Info",
    )


class _Deadline:
    """Decides, under a lock, whether a worker's notification write may still land.

    Once the caller gives up the deadline is expired and any later write is
    rolled back instead of committed. A write that committed before the
    caller gave up is reported through `written`.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._expired = False
        self.written: Optional[int] = None

    def expire(self) -> Optional[int]:
        with self._lock:
            self._expired = True
            return self.written

    def create_notification(self, db: Session, owner_id: int, title: str, message: str, kind: str):
        """Insert the notification unless the deadline has passed; None when skipped."""
        with self._lock:
            if self._expired:
                db.rollback()
                return None
            notification = NotificationStore(db).create(owner_id, title, message, kind)
            self.written = notification.id
            return notification


class AlertDispatcher:
    """Evaluates a budget key and writes the matching notification, best effort.

    Each call opens its own session from `session_factory` on a worker thread,
    so the caller's session is never shared across threads.
    """

    def __init__(self, session_factory: Callable[[], Session], timeout: Optional[float] = None):
        self.session_factory = session_factory
        self.timeout = config.ALERT_TIMEOUT_SECONDS if timeout is None else timeout

    def _bounded(self, label: str, work: Callable[[Session, _Deadline], AlertOutcome]) -> AlertOutcome:
        deadline = _Deadline()
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="budget-alert")
        future = executor.submit(self._in_session, work, deadline)
        try:
            return future.result(timeout=self.timeout)
        except FuturesTimeoutError:
            written = deadline.expire()
            if written is not None:
                # Committed just before the deadline
                return AlertOutcome(AlertResult.SENT, written)
            logger.warning(f"{label} abandoned after {self.timeout}s")
            return AlertOutcome(AlertResult.TIMED_OUT, error=f"timed out after {self.timeout}s")
        except Exception as exc:
            logger.exception(f"{label} failed")
            return AlertOutcome(AlertResult.FAILED, error=str(exc))
        finally:
            # Do not wait for an abandoned worker
            executor.shutdown(wait=False)

    def _in_session(self, work: Callable[[Session, _Deadline], AlertOutcome], deadline: _Deadline) -> AlertOutcome:
        with self.session_factory() as db:
            return work(db, deadline)

    def check_and_alert(self, owner_id: int, category_id: Optional[int], month_year: str) -> AlertOutcome:
        """Notify the owner if the budget for this key is at 80% or more.

        A missing budget is not an error: the outcome is NO_BUDGET.
        """
        def work(db: Session, deadline: _Deadline) -> AlertOutcome:
            budget = BudgetStore(db).find_for_key(owner_id, category_id, month_year)
            if budget is None:
                return AlertOutcome(AlertResult.NO_BUDGET)

            spending = current_spending(
                db, SpendingQuery(owner_id=owner_id, category_id=category_id, month_year=month_year)
            )
            status = evaluate(budget, spending)
            if not status.should_alert:
                return AlertOutcome(AlertResult.BELOW_THRESHOLD, alert_level=status.alert_level)

            title, message, kind = budget_alert_content(status)
            notification = deadline.create_notification(db, owner_id, title, message, kind)
            if notification is None:
                logger.info(f"Late budget alert for user {owner_id} dropped")
                return AlertOutcome(AlertResult.TIMED_OUT, alert_level=status.alert_level)
            logger.info(
                f"Budget alert '{status.alert_level}' for user {owner_id} "
                f"({status.category_name}, {month_year}) at {status.percentage_used:.1f}%"
            )
            return AlertOutcome(AlertResult.SENT, notification.id, status.alert_level)

        return self._bounded(f"Budget alert check {owner_id}/{category_id}/{month_year}", work)

    def alert_after_expense_write(self, owner_id: int, category_id: int, month_year: str) -> Tuple[AlertOutcome, AlertOutcome]:
        """Check the expense's category budget, then the overall budget of its month."""
        return (
            self.check_and_alert(owner_id, category_id, month_year),
            self.check_and_alert(owner_id, None, month_year),
        )

    def notify(self, owner_id: int, title: str, message: str, kind: str) -> AlertOutcome:
        def work(db: Session, deadline: _Deadline) -> AlertOutcome:
            notification = deadline.create_notification(db, owner_id, title, message, kind)
            if notification is None:
                return AlertOutcome(AlertResult.TIMED_OUT)
            return AlertOutcome(AlertResult.SENT, notification.id)

        return self._bounded(f"Notification '{title}' for user {owner_id}", work)

    def notify_expense_added(self, owner_id: int, amount: Decimal, category_name: str) -> AlertOutcome:
        return self.notify(owner_id, *expense_added_content(amount, category_name))

    def send_monthly_summary(self, owner_id: int, month_year: str) -> AlertOutcome:
        def work(db: Session, deadline: _Deadline) -> AlertOutcome:
            query = SpendingQuery(owner_id=owner_id, month_year=month_year)
            title, message, kind = monthly_summary_content(
                month_year, current_spending(db, query), expense_count(db, query)
            )
            notification = deadline.create_notification(db, owner_id, title, message, kind)
            if notification is None:
                return AlertOutcome(AlertResult.TIMED_OUT)
            return AlertOutcome(AlertResult.SENT, notification.id)

        return self._bounded(f"Monthly summary {owner_id}/{month_year}", work)
