"""Pydantic models for budgets, spending statistics and preferences."""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, Literal
from datetime import datetime


BudgetPeriod = Literal["monthly", "weekly", "yearly"]


class BudgetCreate(BaseModel):
    """Schema for setting a budget on a category."""
    category: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0)
    period: BudgetPeriod = "monthly"

    @field_validator("category")
    @classmethod
    def normalize_category(cls, value: str) -> str:
        return value.strip().lower()


class Budget(BudgetCreate):
    """Budget row from database. Only one active budget per category."""
    id: int
    is_active: bool = True
    created_at: Optional[datetime] = None


class BudgetStatus(Budget):
    """Budget enriched with current-month spending."""
    current_spending: float = 0.0
    percentage: float = 0.0
    remaining: float = 0.0
    status: Literal["on_track", "warning", "over_budget"] = "on_track"


class BudgetSuggestion(BaseModel):
    """Advisory budget amount for a category without an active budget."""
    category: str
    amount: int
    reasoning: str


class SpendingPattern(BaseModel):
    """Per-category expense statistics, recomputed on every new transaction."""
    category: str
    average_amount: float = Field(..., ge=0)
    frequency: float = Field(..., ge=0, description="Transactions per month")
    last_updated: Optional[datetime] = None


class UnusualSpending(BaseModel):
    """Category whose current-month total deviates from its usual monthly spend."""
    category: str
    current_spending: float
    expected_spending: float
    deviation_percentage: float


class CategorySummary(BaseModel):
    """Expense totals for one category."""
    category: str
    total: float
    count: int
