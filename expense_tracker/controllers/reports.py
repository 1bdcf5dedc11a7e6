# controllers/reports.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..auth import CurrentUser, get_current_user
from ..dependencies import get_db
from ..schemas import expense as expense_schemas
from ..schemas import report as schemas
from ..services import reports
from ..services.spending import MONTH_YEAR_PATTERN

router = APIRouter()


@router.get("/monthly", response_model=schemas.MonthlyReport, summary="Monthly spending report")
def monthly_report(
    month_year: str = Query(..., alias="monthYear", pattern=MONTH_YEAR_PATTERN.pattern),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    """Month totals, the category breakdown and the ten largest expenses."""
    report = reports.monthly_report(db, current_user.id, month_year)
    report["top_expenses"] = [expense_schemas.Expense.from_model(e) for e in report["top_expenses"]]
    return report
