# controllers/budgets.py
"""Budget API endpoints: CRUD plus status, budget-vs-actual and progress views."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..auth import CurrentUser, get_current_user
from ..dependencies import ensure_access, get_alert_dispatcher, get_db
from ..schemas import budget as schemas
from ..services import categories, reports
from ..services.alerts import AlertDispatcher
from ..services.budget_store import BudgetStore
from ..services.spending import MONTH_YEAR_PATTERN

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/", response_model=schemas.Budget, status_code=status.HTTP_201_CREATED, summary="Create a budget")
def create_budget(
    budget_data: schemas.BudgetCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    dispatcher: AlertDispatcher = Depends(get_alert_dispatcher),
):
    """Create a monthly budget for one category, or an overall budget when categoryId is omitted."""
    logger.info(
        f"Creating budget for user {current_user.id}: "
        f"{budget_data.category_id or 'overall'} {budget_data.month_year}"
    )
    if budget_data.category_id is not None:
        categories.get_visible(db, budget_data.category_id, current_user.id)

    budget = BudgetStore(db).create(
        current_user.id,
        budget_data.category_id,
        budget_data.month_year,
        budget_data.budget_amount,
    )
    dispatcher.check_and_alert(budget.owner_id, budget.category_id, budget.month_year)
    return schemas.Budget.from_status(budget, reports.status_for_budget(db, budget))


@router.get("/", response_model=List[schemas.Budget], summary="List my budgets for a month")
def list_budgets(
    month_year: str = Query(..., alias="monthYear", pattern=MONTH_YEAR_PATTERN.pattern),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    logger.debug(f"Fetching budgets for user {current_user.id} in {month_year}")
    budgets = BudgetStore(db).list_for_owner_and_month(current_user.id, month_year)
    return [schemas.Budget.from_status(b, reports.status_for_budget(db, b)) for b in budgets]


@router.get("/all", response_model=List[schemas.Budget], summary="List all my budgets")
def list_all_budgets(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    budgets = BudgetStore(db).list_all_for_owner(current_user.id)
    return [schemas.Budget.from_status(b, reports.status_for_budget(db, b)) for b in budgets]


@router.get("/status", response_model=schemas.BudgetStatus, summary="Budget status and alert level")
def get_budget_status(
    month_year: str = Query(..., alias="monthYear", pattern=MONTH_YEAR_PATTERN.pattern),
    category_id: Optional[int] = Query(None, alias="categoryId"),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    """Current spending, percentage used, status label and alert level for one budget key."""
    return schemas.BudgetStatus.from_status(
        reports.budget_status(db, current_user.id, category_id, month_year)
    )


@router.get("/vs-actual", response_model=schemas.BudgetVsActual, summary="Budget vs actual spending")
def get_budget_vs_actual(
    month_year: str = Query(..., alias="monthYear", pattern=MONTH_YEAR_PATTERN.pattern),
    category_id: Optional[int] = Query(None, alias="categoryId"),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return reports.budget_vs_actual(db, current_user.id, category_id, month_year)


@router.get("/progress", response_model=List[schemas.BudgetStatus], summary="Progress of every budget in a month")
def get_budget_progress(
    month_year: str = Query(..., alias="monthYear", pattern=MONTH_YEAR_PATTERN.pattern),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return [
        schemas.BudgetStatus.from_status(s)
        for s in reports.budget_progress(db, current_user.id, month_year)
    ]


@router.get("/{budget_id}", response_model=schemas.Budget, summary="Get a budget")
def get_budget(
    budget_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    budget = ensure_access(BudgetStore(db).get_by_id(budget_id), current_user, "Budget")
    return schemas.Budget.from_status(budget, reports.status_for_budget(db, budget))


@router.put("/{budget_id}", response_model=schemas.Budget, summary="Update a budget amount")
def update_budget(
    budget_id: int,
    update_data: schemas.BudgetUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    dispatcher: AlertDispatcher = Depends(get_alert_dispatcher),
):
    """Change the amount of a budget and re-check it against current spending."""
    logger.info(f"Updating budget {budget_id}")
    store = BudgetStore(db)
    budget = ensure_access(store.get_by_id(budget_id), current_user, "Budget")

    store.update_amount(budget.id, update_data.budget_amount)
    db.refresh(budget)

    dispatcher.check_and_alert(budget.owner_id, budget.category_id, budget.month_year)
    return schemas.Budget.from_status(budget, reports.status_for_budget(db, budget))


@router.delete("/{budget_id}", response_model=schemas.Message, summary="Delete a budget")
def delete_budget(
    budget_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    """Delete a budget. Expenses are left untouched."""
    logger.info(f"Deleting budget {budget_id}")
    store = BudgetStore(db)
    budget = ensure_access(store.get_by_id(budget_id), current_user, "Budget")
    store.delete(budget.id)
    return {"message": "Budget deleted successfully"}
