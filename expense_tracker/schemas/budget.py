from dataclasses import asdict
from datetime import datetime
from decimal import Decimal
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, PlainSerializer, field_validator
from pydantic.alias_generators import to_camel

from ..services.spending import validate_month_year

# Amounts travel as Decimal internally and as JSON numbers on the wire
Money = Annotated[Decimal, PlainSerializer(lambda v: float(v), return_type=float, when_used="json")]
Percentage = Annotated[Decimal, PlainSerializer(lambda v: float(round(v, 2)), return_type=float, when_used="json")]


class ApiModel(BaseModel):
    """Base for request/response bodies: snake_case in Python, camelCase in JSON."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BudgetCreate(ApiModel):
    budget_amount: Decimal
    month_year: str
    category_id: Optional[int] = None # None for the overall budget

    @field_validator('budget_amount')
    @classmethod
    def amount_must_be_positive(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError('Budget amount must be greater than 0')
        return v

    @field_validator('month_year')
    @classmethod
    def month_year_format(cls, v: str) -> str:
        return validate_month_year(v)


class BudgetUpdate(ApiModel):
    budget_amount: Decimal

    @field_validator('budget_amount')
    @classmethod
    def amount_must_be_positive(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError('Budget amount must be greater than 0')
        return v


class Budget(ApiModel):
    """Stored budget together with its spending at the time of the request."""
    budget_id: int
    user_id: int
    category_id: Optional[int] = None
    category_name: str
    month_year: str
    budget_amount: Money
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    current_spending: Money
    remaining_budget: Money
    percentage_used: Percentage
    budget_status: str

    @classmethod
    def from_status(cls, budget, status) -> "Budget":
        return cls(
            budget_id=budget.id,
            user_id=budget.owner_id,
            category_id=budget.category_id,
            category_name=status.category_name,
            month_year=budget.month_year,
            budget_amount=status.budget_amount,
            created_at=budget.created_at,
            updated_at=budget.updated_at,
            current_spending=status.current_spending,
            remaining_budget=status.remaining_budget,
            percentage_used=status.percentage_used,
            budget_status=status.status,
        )


class BudgetStatus(ApiModel):
    budget_id: Optional[int] = None
    user_id: int
    category_id: Optional[int] = None
    category_name: str = "Overall"
    month_year: str
    budget_amount: Money
    current_spending: Money
    remaining_budget: Money
    percentage_used: Percentage
    status: str
    alert_level: str
    should_alert: bool
    alert_message: Optional[str] = None

    @classmethod
    def from_status(cls, status) -> "BudgetStatus":
        return cls(**asdict(status))


class BudgetVsActual(ApiModel):
    budget_id: Optional[int] = None
    category_id: Optional[int] = None
    category_name: str = "Overall"
    month_year: str
    budget_amount: Money
    has_budget: bool
    actual_spending: Money
    expense_count: int
    difference: Money
    percentage_used: Percentage
    is_over_budget: bool
    status: str


class AlertCheck(ApiModel):
    """Outcome of a manually triggered budget alert check."""
    result: str
    notification_id: Optional[int] = None
    alert_level: Optional[str] = None
    message: str


class Message(ApiModel):
    message: str
