from datetime import date, datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import Field, field_validator

from ..models import PAYMENT_METHODS
from .budget import ApiModel, Money, Percentage

PaymentMethod = Literal[PAYMENT_METHODS]


class ExpenseBase(ApiModel):
    category_id: int
    amount: Decimal
    expense_date: date
    description: Optional[str] = Field(None, max_length=500)
    payment_method: PaymentMethod = "Cash"

    @field_validator('amount')
    @classmethod
    def amount_must_be_positive(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError('Amount must be greater than 0')
        return v


class ExpenseCreate(ExpenseBase):
    pass


class ExpenseUpdate(ExpenseBase):
    pass


class Expense(ApiModel):
    expense_id: int
    user_id: int
    category_id: int
    category_name: str = ""
    amount: Money
    expense_date: date
    description: Optional[str] = None
    payment_method: str
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, expense) -> "Expense":
        return cls(
            expense_id=expense.id,
            user_id=expense.owner_id,
            category_id=expense.category_id,
            category_name=expense.category_name,
            amount=expense.amount,
            expense_date=expense.expense_date,
            description=expense.description,
            payment_method=expense.payment_method,
            status=expense.status,
            created_at=expense.created_at,
            updated_at=expense.updated_at,
        )


class CategoryCreate(ApiModel):
    category_name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    icon: Optional[str] = Field(None, max_length=50)
    color_code: Optional[str] = Field(None, max_length=20)


class CategoryUpdate(CategoryCreate):
    pass


class Category(ApiModel):
    category_id: int
    category_name: str
    description: Optional[str] = None
    icon: Optional[str] = None
    color_code: Optional[str] = None
    user_id: Optional[int] = None
    is_system_category: bool

    @classmethod
    def from_model(cls, category) -> "Category":
        return cls(
            category_id=category.id,
            category_name=category.name,
            description=category.description,
            icon=category.icon,
            color_code=category.color_code,
            user_id=category.owner_id,
            is_system_category=category.is_system,
        )


class CategoryBreakdown(ApiModel):
    category_id: int
    category_name: str
    icon: Optional[str] = None
    color_code: Optional[str] = None
    amount: Money
    expense_count: int
    percentage_of_total: Percentage


class MonthlyTrend(ApiModel):
    month_year: str
    amount: Money
    expense_count: int


class CategoryStatistics(ApiModel):
    category_id: int
    category_name: str
    icon: Optional[str] = None
    color_code: Optional[str] = None
    is_system_category: bool
    expense_count: int
    total_amount: Money
    percentage_of_total: Percentage
