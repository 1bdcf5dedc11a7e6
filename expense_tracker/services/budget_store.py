# services/budget_store.py
"""Persistence of budgets keyed by (owner, category-or-overall, month)."""

import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .. import models
from ..exceptions import ConflictError, translate_store_errors
from .spending import validate_month_year

logger = logging.getLogger(__name__)

DUPLICATE_BUDGET_MESSAGE = "Budget already exists for this category and month. Use update instead."


class BudgetStore:
    """CRUD over the budgets table.

    Uniqueness of the key is guaranteed by the partial unique indexes on the
    table; `exists_for_key` is only a fast path that yields a friendlier
    error before the insert is attempted.
    """

    def __init__(self, db: Session):
        self.db = db

    def _key_query(self, owner_id: int, category_id: Optional[int], month_year: str):
        q = self.db.query(models.Budget).filter(
            models.Budget.owner_id == owner_id,
            models.Budget.month_year == month_year,
        )
        if category_id is None:
            return q.filter(models.Budget.category_id.is_(None))
        return q.filter(models.Budget.category_id == category_id)

    def exists_for_key(self, owner_id: int, category_id: Optional[int], month_year: str) -> bool:
        with translate_store_errors("budget key lookup"):
            return self._key_query(owner_id, category_id, month_year).first() is not None

    def find_for_key(self, owner_id: int, category_id: Optional[int], month_year: str) -> Optional[models.Budget]:
        with translate_store_errors("budget key lookup"):
            return self._key_query(owner_id, category_id, month_year).first()

    def create(self, owner_id: int, category_id: Optional[int], month_year: str, amount: Decimal) -> models.Budget:
        """Insert a budget, raising ConflictError if the key is already taken."""
        validate_month_year(month_year)
        if self.exists_for_key(owner_id, category_id, month_year):
            raise ConflictError(DUPLICATE_BUDGET_MESSAGE)

        budget = models.Budget(
            owner_id=owner_id,
            category_id=category_id,
            month_year=month_year,
            amount=amount,
        )
        try:
            with translate_store_errors("budget insert"):
                self.db.add(budget)
                self.db.commit()
        except IntegrityError:
            # A concurrent request won the race between the check and the insert
            self.db.rollback()
            logger.info(f"Duplicate budget key rejected by storage: {owner_id}/{category_id}/{month_year}")
            raise ConflictError(DUPLICATE_BUDGET_MESSAGE)

        self.db.refresh(budget)
        return budget

    def get_by_id(self, budget_id: int) -> Optional[models.Budget]:
        with translate_store_errors("budget lookup"):
            return self.db.query(models.Budget).filter(models.Budget.id == budget_id).first()

    def update_amount(self, budget_id: int, amount: Decimal) -> bool:
        with translate_store_errors("budget update"):
            budget = self.get_by_id(budget_id)
            if budget is None:
                return False
            budget.amount = amount
            self.db.commit()
        return True

    def delete(self, budget_id: int) -> bool:
        with translate_store_errors("budget delete"):
            deleted = self.db.query(models.Budget).filter(models.Budget.id == budget_id).delete()
            self.db.commit()
        return deleted > 0

    def list_for_owner_and_month(self, owner_id: int, month_year: str) -> List[models.Budget]:
        """Budgets of one month, the overall budget first, then by category id."""
        with translate_store_errors("budget listing"):
            return self.db.query(models.Budget).filter(
                models.Budget.owner_id == owner_id,
                models.Budget.month_year == month_year,
            ).order_by(
                models.Budget.category_id.is_not(None),
                models.Budget.category_id,
            ).all()

    def list_all_for_owner(self, owner_id: int) -> List[models.Budget]:
        with translate_store_errors("budget listing"):
            return self.db.query(models.Budget).filter(
                models.Budget.owner_id == owner_id
            ).order_by(
                models.Budget.month_year.desc(),
                models.Budget.category_id.is_not(None),
                models.Budget.category_id,
            ).all()
