# controllers/notifications.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..auth import CurrentUser, get_current_user
from ..dependencies import ensure_access, get_alert_dispatcher, get_db
from ..exceptions import AccessDeniedError
from ..schemas import budget as budget_schemas
from ..schemas import notification as schemas
from ..services.alerts import AlertDispatcher, AlertResult
from ..services.notification_store import NotificationStore
from ..services.spending import MONTH_YEAR_PATTERN

logger = logging.getLogger(__name__)

router = APIRouter()

ALERT_CHECK_MESSAGES = {
    AlertResult.SENT: "Budget alert sent",
    AlertResult.NO_BUDGET: "No budget set for this category and month",
    AlertResult.BELOW_THRESHOLD: "Spending is below the alert threshold",
    AlertResult.FAILED: "Budget alert could not be sent",
    AlertResult.TIMED_OUT: "Budget alert timed out",
}


@router.get("/", response_model=List[schemas.Notification], summary="List my notifications")
def list_notifications(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    notifications = NotificationStore(db).list_for_owner(current_user.id)
    return [schemas.Notification.from_model(n) for n in notifications]


@router.get("/unread-count", response_model=schemas.UnreadCount, summary="Count unread notifications")
def unread_count(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return schemas.UnreadCount(
        user_id=current_user.id,
        unread_count=NotificationStore(db).unread_count(current_user.id),
    )


@router.put("/{notification_id}/read", response_model=budget_schemas.Message, summary="Mark a notification as read")
def mark_as_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    store = NotificationStore(db)
    ensure_access(store.get_by_id(notification_id), current_user, "Notification", allow_admin=False)
    store.mark_read(notification_id)
    return {"message": "Notification marked as read"}


@router.delete("/{notification_id}", response_model=budget_schemas.Message, summary="Delete a notification")
def delete_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    store = NotificationStore(db)
    ensure_access(store.get_by_id(notification_id), current_user, "Notification", allow_admin=False)
    store.delete(notification_id)
    return {"message": "Notification deleted successfully"}


@router.post("/send-budget-alert", response_model=budget_schemas.AlertCheck, summary="Check a budget and alert if needed")
def send_budget_alert(
    month_year: str = Query(..., alias="monthYear", pattern=MONTH_YEAR_PATTERN.pattern),
    category_id: Optional[int] = Query(None, alias="categoryId"),
    user_id: Optional[int] = Query(None, alias="userId"),
    current_user: CurrentUser = Depends(get_current_user),
    dispatcher: AlertDispatcher = Depends(get_alert_dispatcher),
):
    """
    Runs the same check that follows an expense write. Admins may target
    another user; everyone else can only check their own budgets.
    """
    owner_id = current_user.id if user_id is None else user_id
    if owner_id != current_user.id and not current_user.is_admin:
        raise AccessDeniedError("You can only check your own budgets")

    logger.info(f"Manual budget alert check for user {owner_id}: {category_id or 'overall'} {month_year}")
    outcome = dispatcher.check_and_alert(owner_id, category_id, month_year)
    return budget_schemas.AlertCheck(
        result=outcome.result.value,
        notification_id=outcome.notification_id,
        alert_level=outcome.alert_level,
        message=ALERT_CHECK_MESSAGES[outcome.result],
    )


@router.post("/monthly-summary", response_model=budget_schemas.AlertCheck, summary="Send my monthly summary")
def send_monthly_summary(
    month_year: str = Query(..., alias="monthYear", pattern=MONTH_YEAR_PATTERN.pattern),
    current_user: CurrentUser = Depends(get_current_user),
    dispatcher: AlertDispatcher = Depends(get_alert_dispatcher),
):
    outcome = dispatcher.send_monthly_summary(current_user.id, month_year)
    message = "Monthly summary sent" if outcome.sent else "Monthly summary could not be sent"
    return budget_schemas.AlertCheck(
        result=outcome.result.value,
        notification_id=outcome.notification_id,
        message=message,
    )
