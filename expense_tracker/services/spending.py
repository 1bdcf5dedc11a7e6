# services/spending.py
"""Spending aggregation over the expense ledger.

Every figure here is recomputed from the expenses table on each call; nothing
is cached between calls, so two calls against the same ledger state return the
same value.
"""

import re
from datetime import date
from decimal import Decimal
from typing import Optional, Tuple

from dateutil.relativedelta import relativedelta
from pydantic import BaseModel, ConfigDict, field_validator
from sqlalchemy import func
from sqlalchemy.orm import Session

from .. import models
from ..exceptions import translate_store_errors

MONTH_YEAR_PATTERN = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")

CENT = Decimal("0.01")


def validate_month_year(value: str) -> str:
    """Accept only 'YYYY-MM' with a month between 01 and 12."""
    if not isinstance(value, str) or not MONTH_YEAR_PATTERN.match(value):
        raise ValueError("monthYear must be in format YYYY-MM")
    return value


def month_bounds(month_year: str) -> Tuple[date, date]:
    """Half-open date range [first day, first day of next month) for a month key."""
    validate_month_year(month_year)
    start = date(int(month_year[:4]), int(month_year[5:]), 1)
    return start, start + relativedelta(months=1)


def to_money(value) -> Decimal:
    if value is None:
        return Decimal("0.00")
    return Decimal(str(value)).quantize(CENT)


class SpendingQuery(BaseModel):
    """Parameters of one aggregation call: whose expenses, which category, which month.

    A missing category_id means the overall budget, i.e. all categories.
    """
    model_config = ConfigDict(frozen=True)

    owner_id: int
    category_id: Optional[int] = None
    month_year: str

    @field_validator("month_year")
    @classmethod
    def month_year_format(cls, v: str) -> str:
        return validate_month_year(v)

    @property
    def start_date(self) -> date:
        return month_bounds(self.month_year)[0]

    @property
    def end_date(self) -> date:
        return month_bounds(self.month_year)[1]


def _matching_expenses(db: Session, query: SpendingQuery, *columns):
    q = db.query(*columns).filter(
        models.Expense.owner_id == query.owner_id,
        models.Expense.expense_date >= query.start_date,
        models.Expense.expense_date < query.end_date,
    )
    if query.category_id is not None:
        q = q.filter(models.Expense.category_id == query.category_id)
    return q


def current_spending(db: Session, query: SpendingQuery) -> Decimal:
    """Sum of matching expense amounts; Decimal('0.00') when nothing matches."""
    with translate_store_errors("current spending query"):
        total = _matching_expenses(
            db, query, func.coalesce(func.sum(models.Expense.amount), 0)
        ).scalar()
    return to_money(total)


def expense_count(db: Session, query: SpendingQuery) -> int:
    with translate_store_errors("expense count query"):
        count = _matching_expenses(db, query, func.count(models.Expense.id)).scalar()
    return int(count or 0)
