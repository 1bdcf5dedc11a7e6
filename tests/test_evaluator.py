from decimal import Decimal
from types import SimpleNamespace

import pytest

from expense_tracker.services.evaluator import evaluate


def _budget(amount, category_id=None, category_name=None):
    return SimpleNamespace(
        id=1,
        owner_id=1,
        category_id=category_id,
        category_name=category_name,
        month_year="2024-06",
        amount=Decimal(amount),
    )


def test_scenario_partial_spend_is_warning_with_info_alert():
    status = evaluate(_budget("1000"), Decimal("850"))

    assert status.percentage_used == Decimal("85")
    assert status.status == "Warning"
    assert status.alert_level == "Info"
    assert status.should_alert is True
    assert status.remaining_budget == Decimal("150")
    assert status.category_name == "Overall"


def test_scenario_spending_equal_to_budget_is_critical_not_exceeded():
    status = evaluate(_budget("1000"), Decimal("1000.00"))

    assert status.percentage_used == Decimal("100")
    assert status.status == "Critical"
    assert status.alert_level == "Alert"
    assert status.should_alert is True


def test_scenario_overspend_is_exceeded():
    status = evaluate(_budget("1000"), Decimal("1050"))

    assert status.percentage_used == Decimal("105")
    assert status.status == "Exceeded"
    assert status.alert_level == "Alert"
    assert status.remaining_budget == Decimal("-50")


def test_one_cent_over_is_exceeded():
    assert evaluate(_budget("500"), Decimal("500.00")).status == "Critical"
    assert evaluate(_budget("500"), Decimal("500.01")).status == "Exceeded"


def test_alert_threshold_is_inclusive_at_eighty_percent():
    at_threshold = evaluate(_budget("1000"), Decimal("800.00"))
    below = evaluate(_budget("1000"), Decimal("799.90"))

    assert at_threshold.should_alert is True
    assert at_threshold.alert_level == "Info"
    assert at_threshold.status == "Warning"

    assert below.percentage_used == Decimal("79.99")
    assert below.should_alert is False
    assert below.alert_level == "None"
    assert below.status == "On Track"
    assert below.alert_message is None


def test_ninety_percent_is_critical_with_warning_alert():
    status = evaluate(_budget("1000"), Decimal("900"))

    assert status.status == "Critical"
    assert status.alert_level == "Warning"
    assert status.alert_message.startswith("Warning: You've used 90.0% of your budget.")


def test_zero_amount_reports_zero_percent():
    status = evaluate(_budget("0"), Decimal("25"))

    assert status.percentage_used == Decimal("0")
    assert status.should_alert is False
    assert status.alert_level == "None"
    assert status.remaining_budget == Decimal("-25")


@pytest.mark.parametrize("amount,spending", [
    ("1000", "0"),
    ("250.50", "125.25"),
    ("1200", "1337.42"),
    ("0.01", "0.01"),
])
def test_percentage_and_remaining_follow_amount_and_spending(amount, spending):
    status = evaluate(_budget(amount), Decimal(spending))

    assert status.percentage_used == Decimal(spending) / Decimal(amount) * 100
    assert status.remaining_budget == Decimal(amount) - Decimal(spending)


def test_evaluate_is_repeatable():
    budget = _budget("1000")
    assert evaluate(budget, Decimal("850")) == evaluate(budget, Decimal("850"))


def test_category_name_comes_from_budget_or_override():
    assert evaluate(_budget("100", 3, "Shopping"), Decimal("10")).category_name == "Shopping"
    assert evaluate(_budget("100", 3, "Shopping"), Decimal("10"), "Gifts").category_name == "Gifts"


def test_exceeded_message_carries_amounts():
    status = evaluate(_budget("1000"), Decimal("1050"))
    assert status.alert_message == "Budget exceeded! You've spent ₹1,050.00 of ₹1,000.00 (105.0%)."
