# services/categories.py
"""System and custom spending categories."""

import logging
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from .. import models
from ..exceptions import AccessDeniedError, ExpenseTrackerError, NotFoundError, translate_store_errors

logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_CATEGORIES = [
    {"name": "Food & Dining", "description": "Restaurants, groceries, food delivery", "icon": "🍔", "color_code": "#FF6B6B"},
    {"name": "Transportation", "description": "Fuel, public transport, cab/taxi", "icon": "🚗", "color_code": "#4ECDC4"},
    {"name": "Shopping", "description": "Clothing, electronics, personal items", "icon": "🛍️", "color_code": "#95E1D3"},
    {"name": "Entertainment", "description": "Movies, games, subscriptions", "icon": "🎮", "color_code": "#F38181"},
    {"name": "Healthcare", "description": "Medical expenses, pharmacy, insurance", "icon": "🏥", "color_code": "#AA96DA"},
    {"name": "Bills & Utilities", "description": "Electricity, water, internet, phone", "icon": "💡", "color_code": "#FCBAD3"},
    {"name": "Education", "description": "Courses, books, tuition fees", "icon": "📚", "color_code": "#FFFFD2"},
    {"name": "Others", "description": "Miscellaneous expenses", "icon": "📦", "color_code": "#A8D8EA"},
]


def seed_system_categories(db: Session) -> int:
    """Insert the default system categories that are missing. Returns how many were added."""
    existing = {
        name for (name,) in db.query(models.Category.name).filter(models.Category.is_system.is_(True))
    }
    added = 0
    for data in DEFAULT_SYSTEM_CATEGORIES:
        if data["name"] in existing:
            continue
        db.add(models.Category(is_system=True, owner_id=None, **data))
        added += 1
    if added:
        db.commit()
        logger.info(f"Seeded {added} system categories")
    return added


def list_visible(db: Session, owner_id: int) -> List[models.Category]:
    """System categories plus the caller's own custom ones."""
    with translate_store_errors("category listing"):
        return db.query(models.Category).filter(
            or_(models.Category.is_system.is_(True), models.Category.owner_id == owner_id)
        ).order_by(models.Category.is_system.desc(), models.Category.name).all()


def get_visible(db: Session, category_id: int, owner_id: int) -> models.Category:
    """Return a category the owner may file expenses or budgets under."""
    with translate_store_errors("category lookup"):
        category = db.query(models.Category).filter(models.Category.id == category_id).first()
    if category is None or not (category.is_system or category.owner_id == owner_id):
        raise NotFoundError("Category not found")
    return category


def create_custom(
    db: Session,
    owner_id: int,
    name: str,
    description: Optional[str] = None,
    icon: Optional[str] = None,
    color_code: Optional[str] = None,
) -> models.Category:
    category = models.Category(
        name=name,
        description=description,
        icon=icon,
        color_code=color_code,
        owner_id=owner_id,
        is_system=False,
    )
    with translate_store_errors("category insert"):
        db.add(category)
        db.commit()
        db.refresh(category)
    return category


def _owned_custom(db: Session, category_id: int, owner_id: int, action: str) -> models.Category:
    with translate_store_errors("category lookup"):
        category = db.query(models.Category).filter(models.Category.id == category_id).first()
    if category is None:
        raise NotFoundError("Category not found")
    if category.is_system or category.owner_id != owner_id:
        raise AccessDeniedError(f"You don't have permission to {action} this category")
    return category


def update_custom(
    db: Session,
    category_id: int,
    owner_id: int,
    name: str,
    description: Optional[str] = None,
    icon: Optional[str] = None,
    color_code: Optional[str] = None,
) -> models.Category:
    """Replace the details of one of the owner's custom categories. System categories are read-only."""
    category = _owned_custom(db, category_id, owner_id, "update")
    category.name = name
    category.description = description
    category.icon = icon
    category.color_code = color_code
    with translate_store_errors("category update"):
        db.commit()
        db.refresh(category)
    return category


def delete_custom(db: Session, category_id: int, owner_id: int) -> None:
    """Delete an unused custom category.

    A category still referenced by expenses or budgets is kept.
    """
    category = _owned_custom(db, category_id, owner_id, "delete")
    with translate_store_errors("category delete"):
        if db.query(models.Expense.id).filter(models.Expense.category_id == category.id).first():
            raise ExpenseTrackerError("Cannot delete category with existing expenses")
        if db.query(models.Budget.id).filter(models.Budget.category_id == category.id).first():
            raise ExpenseTrackerError("Cannot delete category with existing budgets")
        db.delete(category)
        db.commit()
    logger.info(f"Deleted custom category {category_id} of user {owner_id}")
