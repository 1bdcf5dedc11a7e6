from typing import List

from .budget import ApiModel, Money
from .expense import CategoryBreakdown, Expense


class DashboardSummary(ApiModel):
    user_id: int
    total_expenses: Money
    total_expense_count: int
    monthly_expenses: Money
    monthly_expense_count: int
    today_expenses: Money
    today_expense_count: int


class MonthlyReport(ApiModel):
    """Totals of one month with its category breakdown and largest expenses."""
    user_id: int
    month_year: str
    month: int
    year: int
    total_expenses: Money
    total_expense_count: int
    category_breakdown: List[CategoryBreakdown]
    top_expenses: List[Expense]
