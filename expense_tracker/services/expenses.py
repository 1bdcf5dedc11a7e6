# services/expenses.py
"""Persistence of expenses."""

from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from .. import models
from ..exceptions import translate_store_errors


class ExpenseStore:
    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        owner_id: int,
        category_id: int,
        amount: Decimal,
        expense_date: date,
        description: Optional[str] = None,
        payment_method: str = "Cash",
    ) -> models.Expense:
        expense = models.Expense(
            owner_id=owner_id,
            category_id=category_id,
            amount=amount,
            expense_date=expense_date,
            description=description,
            payment_method=payment_method,
            status="Approved",
        )
        with translate_store_errors("expense insert"):
            self.db.add(expense)
            self.db.commit()
            self.db.refresh(expense)
        return expense

    def get_by_id(self, expense_id: int) -> Optional[models.Expense]:
        with translate_store_errors("expense lookup"):
            return self.db.query(models.Expense).filter(models.Expense.id == expense_id).first()

    def update(self, expense: models.Expense, **changes) -> models.Expense:
        """Apply field changes to a loaded expense and commit."""
        for field, value in changes.items():
            setattr(expense, field, value)
        with translate_store_errors("expense update"):
            self.db.commit()
            self.db.refresh(expense)
        return expense

    def delete(self, expense_id: int) -> bool:
        with translate_store_errors("expense delete"):
            deleted = self.db.query(models.Expense).filter(models.Expense.id == expense_id).delete()
            self.db.commit()
        return deleted > 0

    def list_for_owner(
        self,
        owner_id: int,
        category_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        payment_method: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[models.Expense]:
        """A user's expenses, most recent first, optionally filtered."""
        q = self.db.query(models.Expense).filter(models.Expense.owner_id == owner_id)
        if category_id is not None:
            q = q.filter(models.Expense.category_id == category_id)
        if start_date:
            q = q.filter(models.Expense.expense_date >= start_date)
        if end_date:
            q = q.filter(models.Expense.expense_date <= end_date)
        if payment_method:
            q = q.filter(models.Expense.payment_method == payment_method)
        if search:
            q = q.filter(models.Expense.description.ilike(f"%{search}%"))

        with translate_store_errors("expense listing"):
            return q.order_by(models.Expense.expense_date.desc(), models.Expense.id.desc()).all()
