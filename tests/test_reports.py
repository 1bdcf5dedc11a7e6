from datetime import date
from decimal import Decimal

from conftest import add_expense, category_id
from expense_tracker.services import reports


def test_dashboard_summary_splits_all_time_month_and_today(db):
    food = category_id(db)
    add_expense(db, 1, food, "30", date(2024, 6, 10))
    add_expense(db, 1, food, "10", date(2024, 6, 1))
    add_expense(db, 1, food, "5", date(2024, 5, 20))
    add_expense(db, 2, food, "999", date(2024, 6, 10))

    summary = reports.dashboard_summary(db, 1, today=date(2024, 6, 10))

    assert summary == {
        "user_id": 1,
        "total_expenses": Decimal("45.00"),
        "total_expense_count": 3,
        "monthly_expenses": Decimal("40.00"),
        "monthly_expense_count": 2,
        "today_expenses": Decimal("30.00"),
        "today_expense_count": 1,
    }


def test_dashboard_summary_without_expenses(db):
    summary = reports.dashboard_summary(db, 1, today=date(2024, 6, 10))

    assert summary["total_expenses"] == Decimal("0.00")
    assert summary["today_expense_count"] == 0


def test_category_statistics_cover_all_time(db):
    food = category_id(db)
    travel = category_id(db, "Transportation")
    add_expense(db, 1, food, "60", date(2023, 1, 5))
    add_expense(db, 1, travel, "20", date(2024, 6, 10))
    add_expense(db, 1, travel, "20", date(2024, 7, 10))

    statistics = reports.category_statistics(db, 1)

    assert [(s["category_name"], s["total_amount"], s["expense_count"]) for s in statistics] == [
        ("Food & Dining", Decimal("60.00"), 1),
        ("Transportation", Decimal("40.00"), 2),
    ]
    assert statistics[0]["percentage_of_total"] == Decimal("60")
    assert all(s["is_system_category"] for s in statistics)


def test_monthly_report_keeps_to_the_month(db):
    food = category_id(db)
    for amount in ("5", "50", "20"):
        add_expense(db, 1, food, amount, date(2024, 6, 15))
    add_expense(db, 1, food, "500", date(2024, 7, 1))

    report = reports.monthly_report(db, 1, "2024-06", top_n=2)

    assert (report["month"], report["year"]) == (6, 2024)
    assert report["total_expenses"] == Decimal("75.00")
    assert report["total_expense_count"] == 3
    assert [e.amount for e in report["top_expenses"]] == [Decimal("50.00"), Decimal("20.00")]
    assert [b["amount"] for b in report["category_breakdown"]] == [Decimal("75.00")]
