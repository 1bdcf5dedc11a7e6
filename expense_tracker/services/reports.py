# services/reports.py
"""Budget status lookups and dashboard aggregations built on the spending layer."""

from datetime import date, timedelta
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import extract, func, or_
from sqlalchemy.orm import Session

from .. import models
from ..exceptions import NotFoundError, translate_store_errors
from .budget_store import BudgetStore
from .evaluator import BudgetStatus, evaluate
from .spending import SpendingQuery, current_spending, expense_count, month_bounds, to_money

BUDGET_NOT_FOUND_MESSAGE = "Budget not found for specified category and month"


def status_for_budget(db: Session, budget: models.Budget) -> BudgetStatus:
    spending = current_spending(
        db,
        SpendingQuery(owner_id=budget.owner_id, category_id=budget.category_id, month_year=budget.month_year),
    )
    return evaluate(budget, spending)


def budget_status(db: Session, owner_id: int, category_id: Optional[int], month_year: str) -> BudgetStatus:
    budget = BudgetStore(db).find_for_key(owner_id, category_id, month_year)
    if budget is None:
        raise NotFoundError(BUDGET_NOT_FOUND_MESSAGE)
    return status_for_budget(db, budget)


def budget_vs_actual(db: Session, owner_id: int, category_id: Optional[int], month_year: str) -> dict:
    budget = BudgetStore(db).find_for_key(owner_id, category_id, month_year)
    if budget is None:
        raise NotFoundError(BUDGET_NOT_FOUND_MESSAGE)

    query = SpendingQuery(owner_id=owner_id, category_id=category_id, month_year=month_year)
    status = evaluate(budget, current_spending(db, query))
    return {
        "budget_id": budget.id,
        "category_id": budget.category_id,
        "category_name": status.category_name,
        "month_year": month_year,
        "budget_amount": status.budget_amount,
        "has_budget": True,
        "actual_spending": status.current_spending,
        "expense_count": expense_count(db, query),
        "difference": status.remaining_budget,
        "percentage_used": status.percentage_used,
        "is_over_budget": status.current_spending > status.budget_amount,
        "status": status.status,
    }


def budget_progress(db: Session, owner_id: int, month_year: str) -> List[BudgetStatus]:
    """Status of every budget the owner has for the month."""
    return [
        status_for_budget(db, budget)
        for budget in BudgetStore(db).list_for_owner_and_month(owner_id, month_year)
    ]


def monthly_trend(db: Session, owner_id: int, year: int) -> List[dict]:
    """Total spending and expense count per month of `year`, months without expenses omitted."""
    month = extract("month", models.Expense.expense_date)
    with translate_store_errors("monthly trend"):
        rows = db.query(
            month.label("month"),
            func.sum(models.Expense.amount).label("amount"),
            func.count(models.Expense.id).label("expense_count"),
        ).filter(
            models.Expense.owner_id == owner_id,
            models.Expense.expense_date >= date(year, 1, 1),
            models.Expense.expense_date < date(year + 1, 1, 1),
        ).group_by(month).order_by(month).all()

    return [
        {
            "month_year": f"{year:04d}-{int(row.month):02d}",
            "amount": to_money(row.amount),
            "expense_count": row.expense_count,
        }
        for row in rows
    ]


def _category_totals(db: Session, owner_id: int, start_date: Optional[date] = None, end_date: Optional[date] = None):
    filters = [
        models.Expense.owner_id == owner_id,
        or_(models.Category.is_system.is_(True), models.Category.owner_id == owner_id),
    ]
    if start_date is not None:
        filters.append(models.Expense.expense_date >= start_date)
    if end_date is not None:
        filters.append(models.Expense.expense_date <= end_date)

    with translate_store_errors("category totals"):
        rows = db.query(
            models.Category.id,
            models.Category.name,
            models.Category.icon,
            models.Category.color_code,
            models.Category.is_system,
            func.sum(models.Expense.amount).label("amount"),
            func.count(models.Expense.id).label("expense_count"),
        ).join(
            models.Expense, models.Expense.category_id == models.Category.id
        ).filter(*filters).group_by(
            models.Category.id,
            models.Category.name,
            models.Category.icon,
            models.Category.color_code,
            models.Category.is_system,
        ).all()

    total = sum((to_money(row.amount) for row in rows), Decimal("0.00"))
    totals = [
        {
            "category_id": row.id,
            "category_name": row.name,
            "icon": row.icon,
            "color_code": row.color_code,
            "is_system_category": row.is_system,
            "amount": to_money(row.amount),
            "expense_count": row.expense_count,
            "percentage_of_total": (to_money(row.amount) * 100 / total) if total > 0 else Decimal("0"),
        }
        for row in rows
    ]
    return sorted(totals, key=lambda item: item["amount"], reverse=True)


def category_breakdown(db: Session, owner_id: int, start_date: date, end_date: date) -> List[dict]:
    """Per-category spending between two dates (inclusive), largest first."""
    return _category_totals(db, owner_id, start_date, end_date)


def category_statistics(db: Session, owner_id: int) -> List[dict]:
    """All-time spending per category the owner has used, largest first."""
    statistics = _category_totals(db, owner_id)
    for item in statistics:
        item["total_amount"] = item.pop("amount")
    return statistics


def _totals(db: Session, owner_id: int, start_date: Optional[date] = None, end_before: Optional[date] = None):
    with translate_store_errors("expense totals"):
        q = db.query(
            func.coalesce(func.sum(models.Expense.amount), 0),
            func.count(models.Expense.id),
        ).filter(models.Expense.owner_id == owner_id)
        if start_date is not None:
            q = q.filter(models.Expense.expense_date >= start_date)
        if end_before is not None:
            q = q.filter(models.Expense.expense_date < end_before)
        amount, count = q.one()
    return to_money(amount), int(count or 0)


def dashboard_summary(db: Session, owner_id: int, today: Optional[date] = None) -> dict:
    """All-time, current-month and today's spending and expense counts."""
    today = today or date.today()
    month_start, next_month = month_bounds(today.strftime("%Y-%m"))

    total, total_count = _totals(db, owner_id)
    monthly, monthly_count = _totals(db, owner_id, month_start, next_month)
    today_amount, today_count = _totals(db, owner_id, today, today + timedelta(days=1))
    return {
        "user_id": owner_id,
        "total_expenses": total,
        "total_expense_count": total_count,
        "monthly_expenses": monthly,
        "monthly_expense_count": monthly_count,
        "today_expenses": today_amount,
        "today_expense_count": today_count,
    }


def monthly_report(db: Session, owner_id: int, month_year: str, top_n: int = 10) -> dict:
    """Totals, category breakdown and the largest expenses of one month."""
    start, end = month_bounds(month_year)
    total, count = _totals(db, owner_id, start, end)

    with translate_store_errors("top expenses"):
        top_expenses = db.query(models.Expense).filter(
            models.Expense.owner_id == owner_id,
            models.Expense.expense_date >= start,
            models.Expense.expense_date < end,
        ).order_by(
            models.Expense.amount.desc(), models.Expense.expense_date.desc()
        ).limit(top_n).all()

    return {
        "user_id": owner_id,
        "month_year": month_year,
        "month": start.month,
        "year": start.year,
        "total_expenses": total,
        "total_expense_count": count,
        "category_breakdown": category_breakdown(db, owner_id, start, end - timedelta(days=1)),
        "top_expenses": top_expenses,
    }
