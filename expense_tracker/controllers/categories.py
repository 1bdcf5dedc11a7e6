# controllers/categories.py
import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..auth import CurrentUser, get_current_user
from ..dependencies import get_db
from ..schemas import budget as budget_schemas
from ..schemas import expense as schemas
from ..services import categories, reports

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=List[schemas.Category], summary="List categories")
def list_categories(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    """System categories followed by the caller's custom ones."""
    return [schemas.Category.from_model(c) for c in categories.list_visible(db, current_user.id)]


@router.post("/", response_model=schemas.Category, status_code=status.HTTP_201_CREATED, summary="Create a custom category")
def create_category(
    category_data: schemas.CategoryCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    logger.info(f"Creating category '{category_data.category_name}' for user {current_user.id}")
    category = categories.create_custom(
        db,
        current_user.id,
        category_data.category_name,
        description=category_data.description,
        icon=category_data.icon,
        color_code=category_data.color_code,
    )
    return schemas.Category.from_model(category)


@router.get("/statistics", response_model=List[schemas.CategoryStatistics], summary="Spending per category, all time")
def category_statistics(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return reports.category_statistics(db, current_user.id)


@router.put("/{category_id}", response_model=schemas.Category, summary="Update a custom category")
def update_category(
    category_id: int,
    category_data: schemas.CategoryUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    logger.info(f"Updating category {category_id} for user {current_user.id}")
    category = categories.update_custom(
        db,
        category_id,
        current_user.id,
        category_data.category_name,
        description=category_data.description,
        icon=category_data.icon,
        color_code=category_data.color_code,
    )
    return schemas.Category.from_model(category)


@router.delete("/{category_id}", response_model=budget_schemas.Message, summary="Delete a custom category")
def delete_category(
    category_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    """Only unused custom categories can be deleted."""
    logger.info(f"Deleting category {category_id} for user {current_user.id}")
    categories.delete_custom(db, category_id, current_user.id)
    return {"message": "Custom category deleted successfully"}
