import threading
import time
from decimal import Decimal

from sqlalchemy.orm import Session

from conftest import BrokenSession, add_expense, category_id
from expense_tracker import models
from expense_tracker.database import SessionLocal, engine
from expense_tracker.services.alerts import (
    AlertDispatcher,
    AlertResult,
    budget_alert_content,
    expense_added_content,
    monthly_summary_content,
)
from expense_tracker.services.budget_store import BudgetStore
from expense_tracker.services.evaluator import evaluate


def _notifications(db, owner_id=1):
    db.expire_all()
    return db.query(models.Notification).filter(models.Notification.owner_id == owner_id).order_by(
        models.Notification.id
    ).all()


def test_missing_budget_sends_nothing(db):
    outcome = AlertDispatcher(SessionLocal).check_and_alert(1, category_id(db), "2024-06")

    assert outcome.result is AlertResult.NO_BUDGET
    assert outcome.notification_id is None
    assert _notifications(db) == []


def test_below_threshold_sends_nothing(db):
    food = category_id(db)
    BudgetStore(db).create(1, food, "2024-06", Decimal("1000"))
    add_expense(db, 1, food, "799.99")

    outcome = AlertDispatcher(SessionLocal).check_and_alert(1, food, "2024-06")

    assert outcome.result is AlertResult.BELOW_THRESHOLD
    assert outcome.alert_level == "None"
    assert _notifications(db) == []


def test_alert_is_written_at_eighty_five_percent(db):
    food = category_id(db)
    BudgetStore(db).create(1, food, "2024-06", Decimal("1000"))
    add_expense(db, 1, food, "850")

    outcome = AlertDispatcher(SessionLocal).check_and_alert(1, food, "2024-06")

    assert outcome.sent
    assert outcome.alert_level == "Info"
    [notification] = _notifications(db)
    assert notification.id == outcome.notification_id
    assert notification.type == "Info"
    assert notification.is_read is False
    assert notification.title == "Budget Alert: Food & Dining"
    assert notification.message == (
        "You've used 85.0% of your Food & Dining budget. Current spending: ₹850.00 / ₹1,000.00"
    )


def test_repeated_checks_each_notify(db):
    food = category_id(db)
    BudgetStore(db).create(1, food, "2024-06", Decimal("100"))
    add_expense(db, 1, food, "120")

    dispatcher = AlertDispatcher(SessionLocal)
    dispatcher.check_and_alert(1, food, "2024-06")
    dispatcher.check_and_alert(1, food, "2024-06")

    notifications = _notifications(db)
    assert len(notifications) == 2
    assert {n.title for n in notifications} == {"Budget Exceeded: Food & Dining"}
    assert {n.type for n in notifications} == {"Alert"}


def test_expense_write_checks_category_then_overall(db):
    food = category_id(db)
    store = BudgetStore(db)
    store.create(1, food, "2024-06", Decimal("100"))
    store.create(1, None, "2024-06", Decimal("1000"))
    add_expense(db, 1, food, "95")

    category_outcome, overall_outcome = AlertDispatcher(SessionLocal).alert_after_expense_write(1, food, "2024-06")

    assert category_outcome.result is AlertResult.SENT
    assert category_outcome.alert_level == "Warning"
    assert overall_outcome.result is AlertResult.BELOW_THRESHOLD
    assert [n.type for n in _notifications(db)] == ["Warning"]


def test_store_failure_is_reported_not_raised():
    def broken_factory():
        raise RuntimeError("connection refused")

    outcome = AlertDispatcher(broken_factory).check_and_alert(1, 1, "2024-06")

    assert outcome.result is AlertResult.FAILED
    assert "connection refused" in outcome.error


class _StalledSession:
    def __init__(self, release):
        self.release = release

    def __enter__(self):
        self.release.wait(5)
        raise RuntimeError("released")

    def __exit__(self, *exc_info):
        return False


def test_slow_alert_is_abandoned_after_timeout():
    release = threading.Event()
    dispatcher = AlertDispatcher(lambda: _StalledSession(release), timeout=0.05)
    try:
        outcome = dispatcher.check_and_alert(1, 1, "2024-06")
    finally:
        release.set()

    assert outcome.result is AlertResult.TIMED_OUT
    assert not outcome.sent


def test_monthly_summary_counts_the_month(db):
    food = category_id(db)
    add_expense(db, 1, food, "1200")
    add_expense(db, 1, food, "34.50")

    outcome = AlertDispatcher(SessionLocal).send_monthly_summary(1, "2024-06")

    assert outcome.sent
    [notification] = _notifications(db)
    assert notification.title == "Monthly Summary - 2024-06"
    assert notification.message.startswith("You spent ₹1,234.50 across 2 transactions this month.")


def test_expense_added_notification(db):
    outcome = AlertDispatcher(SessionLocal).notify_expense_added(1, Decimal("42"), "Shopping")

    assert outcome.sent
    [notification] = _notifications(db)
    assert notification.type == "Success"
    assert notification.message == "Your expense of ₹42.00 in Shopping category has been recorded."


def test_alert_content_by_level():
    budget = models.Budget(id=1, owner_id=1, category_id=None, month_year="2024-06", amount=Decimal("1000"))

    title, message, kind = budget_alert_content(evaluate(budget, Decimal("920")))
    assert (title, kind) == ("Budget Warning: Overall", "Warning")
    assert message.endswith("Consider reducing expenses.")

    title, message, kind = budget_alert_content(evaluate(budget, Decimal("1000")))
    assert (title, kind) == ("Budget Exceeded: Overall", "Alert")
    assert "(100.0%)" in message


def test_other_content_builders():
    assert expense_added_content(Decimal("5"), None)[1].endswith("in Unknown category has been recorded.")
    assert monthly_summary_content("2024-06", Decimal("0"), 0)[0] == "Monthly Summary - 2024-06"


def _slow_session_factory(finished, delay=0.3):
    """Sessions that open after `delay` seconds and set `finished` once closed."""
    class TrackedSession(Session):
        def close(self):
            super().close()
            finished.set()

    def factory():
        time.sleep(delay)
        return TrackedSession(bind=engine)

    return factory


def test_late_alert_is_not_written_after_timeout(db):
    food = category_id(db)
    BudgetStore(db).create(1, food, "2024-06", Decimal("100"))
    add_expense(db, 1, food, "120")
    finished = threading.Event()
    slow_factory = _slow_session_factory(finished)

    outcome = AlertDispatcher(slow_factory, timeout=0.05).check_and_alert(1, food, "2024-06")

    assert outcome.result is AlertResult.TIMED_OUT
    assert finished.wait(5)
    assert _notifications(db) == []


def test_late_notification_is_not_written_after_timeout(db):
    finished = threading.Event()
    slow_factory = _slow_session_factory(finished)

    outcome = AlertDispatcher(slow_factory, timeout=0.05).notify_expense_added(1, Decimal("5"), "Shopping")

    assert outcome.result is AlertResult.TIMED_OUT
    assert finished.wait(5)
    assert _notifications(db) == []


def test_database_errors_are_reported_as_failures():
    outcome = AlertDispatcher(lambda: BrokenSession(bind=engine)).check_and_alert(1, 1, "2024-06")

    assert outcome.result is AlertResult.FAILED
    assert "database is locked" in outcome.error
