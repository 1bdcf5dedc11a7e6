# controllers/expenses.py
import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..auth import CurrentUser, get_current_user
from ..dependencies import ensure_access, get_alert_dispatcher, get_db
from ..schemas import budget as budget_schemas
from ..schemas import expense as schemas
from ..services import categories
from ..services.alerts import AlertDispatcher
from ..services.expenses import ExpenseStore

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/", response_model=schemas.Expense, status_code=status.HTTP_201_CREATED, summary="Record an expense")
def create_expense(
    expense_data: schemas.ExpenseCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    dispatcher: AlertDispatcher = Depends(get_alert_dispatcher),
):
    """
    Record an expense, then notify the owner and check the affected budgets.
    Notification failures never fail the write.
    """
    logger.info(f"Creating expense for user {current_user.id}: {expense_data.amount} in category {expense_data.category_id}")
    category = categories.get_visible(db, expense_data.category_id, current_user.id)

    expense = ExpenseStore(db).create(
        owner_id=current_user.id,
        category_id=category.id,
        amount=expense_data.amount,
        expense_date=expense_data.expense_date,
        description=expense_data.description,
        payment_method=expense_data.payment_method,
    )

    dispatcher.notify_expense_added(expense.owner_id, expense.amount, category.name)
    dispatcher.alert_after_expense_write(expense.owner_id, expense.category_id, expense.month_year)
    return schemas.Expense.from_model(expense)


@router.get("/", response_model=List[schemas.Expense], summary="List my expenses")
def list_expenses(
    category_id: Optional[int] = Query(None, alias="categoryId"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    payment_method: Optional[str] = Query(None, alias="paymentMethod"),
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    expenses = ExpenseStore(db).list_for_owner(
        current_user.id,
        category_id=category_id,
        start_date=start_date,
        end_date=end_date,
        payment_method=payment_method,
        search=search,
    )
    return [schemas.Expense.from_model(e) for e in expenses]


@router.get("/{expense_id}", response_model=schemas.Expense, summary="Get an expense")
def get_expense(
    expense_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    expense = ensure_access(ExpenseStore(db).get_by_id(expense_id), current_user, "Expense")
    return schemas.Expense.from_model(expense)


@router.put("/{expense_id}", response_model=schemas.Expense, summary="Update an expense")
def update_expense(
    expense_id: int,
    expense_data: schemas.ExpenseUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    dispatcher: AlertDispatcher = Depends(get_alert_dispatcher),
):
    logger.info(f"Updating expense {expense_id}")
    store = ExpenseStore(db)
    expense = ensure_access(store.get_by_id(expense_id), current_user, "Expense")
    category = categories.get_visible(db, expense_data.category_id, expense.owner_id)

    expense = store.update(
        expense,
        category_id=category.id,
        amount=expense_data.amount,
        expense_date=expense_data.expense_date,
        description=expense_data.description,
        payment_method=expense_data.payment_method,
    )

    dispatcher.alert_after_expense_write(expense.owner_id, expense.category_id, expense.month_year)
    return schemas.Expense.from_model(expense)


@router.delete("/{expense_id}", response_model=budget_schemas.Message, summary="Delete an expense")
def delete_expense(
    expense_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    logger.info(f"Deleting expense {expense_id}")
    store = ExpenseStore(db)
    expense = ensure_access(store.get_by_id(expense_id), current_user, "Expense")
    store.delete(expense.id)
    return {"message": "Expense deleted successfully"}
