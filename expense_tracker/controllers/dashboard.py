# controllers/dashboard.py
from datetime import date
from typing import List, Optional

from dateutil.relativedelta import relativedelta
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..auth import CurrentUser, get_current_user
from ..dependencies import get_db
from ..exceptions import ExpenseTrackerError
from ..schemas import expense as schemas
from ..schemas import report as report_schemas
from ..services import reports

router = APIRouter()


@router.get("/summary", response_model=report_schemas.DashboardSummary, summary="Total, monthly and today spending")
def dashboard_summary(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return reports.dashboard_summary(db, current_user.id)


@router.get("/category-breakdown", response_model=List[schemas.CategoryBreakdown], summary="Spending per category")
def category_breakdown(
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    """Spending per category between two dates, defaulting to the current month."""
    today = date.today()
    start_date = start_date or today.replace(day=1)
    end_date = end_date or (today.replace(day=1) + relativedelta(months=1, days=-1))
    if start_date > end_date:
        raise ExpenseTrackerError("startDate must not be after endDate")

    return reports.category_breakdown(db, current_user.id, start_date, end_date)


@router.get("/monthly-trend", response_model=List[schemas.MonthlyTrend], summary="Spending per month of a year")
def monthly_trend(
    year: Optional[int] = Query(None, ge=1900, le=9999),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return reports.monthly_trend(db, current_user.id, year or date.today().year)
