# models/budget.py
"""SQLAlchemy models for budget tracking."""

from datetime import datetime, timezone
from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    text,
)
from sqlalchemy.orm import relationship
from ..database import Base


def utc_now():
    """Return current UTC time (timezone-aware)."""
    return datetime.now(timezone.utc)


PAYMENT_METHODS = ("Cash", "Card", "UPI", "Net Banking", "Others")


class Category(Base):
    """Spending category, either system-wide (no owner) or a user's custom one."""
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    description = Column(String(500), nullable=True)
    icon = Column(String(50), nullable=True)
    color_code = Column(String(20), nullable=True)
    owner_id = Column(Integer, nullable=True, index=True) # NULL for system categories
    is_system = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utc_now)


class Budget(Base):
    """Monthly spending limit for one category, or overall when category_id is NULL."""
    __tablename__ = "budgets"
    __table_args__ = (
        # NULLs never collide in a unique index, so the overall budget needs its own
        Index(
            "ux_budget_category_key",
            "owner_id", "category_id", "month_year",
            unique=True,
            sqlite_where=text("category_id IS NOT NULL"),
            postgresql_where=text("category_id IS NOT NULL"),
        ),
        Index(
            "ux_budget_overall_key",
            "owner_id", "month_year",
            unique=True,
            sqlite_where=text("category_id IS NULL"),
            postgresql_where=text("category_id IS NULL"),
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(Integer, nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    month_year = Column(String(7), nullable=False) # "YYYY-MM"
    amount = Column(Numeric(18, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)

    category = relationship("Category")

    @property
    def category_name(self) -> str:
        return self.category.name if self.category is not None else "Overall"


class Expense(Base):
    """Individual expense entry."""
    __tablename__ = "expenses"
    __table_args__ = (
        Index("ix_expense_owner_date", "owner_id", "expense_date"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(Integer, nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    amount = Column(Numeric(18, 2), nullable=False)
    expense_date = Column(Date, nullable=False)
    description = Column(String(500), nullable=True)
    payment_method = Column(String(50), nullable=False, default="Cash")
    status = Column(String(50), nullable=False, default="Approved")
    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)

    category = relationship("Category")

    @property
    def category_name(self) -> str:
        return self.category.name if self.category is not None else ""

    @property
    def month_year(self) -> str:
        return self.expense_date.strftime("%Y-%m")
