"""Pydantic models for transaction data."""

from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import date, datetime
from enum import Enum


class TransactionType(str, Enum):
    """Direction of a money movement."""
    INCOME = "income"
    EXPENSE = "expense"


# Suggested vocabulary; categories stay open-ended lowercase strings.
SUGGESTED_CATEGORIES = (
    "food", "transport", "entertainment", "utilities", "shopping", "health",
    "salary", "freelance", "rent", "insurance", "gas", "clothing", "education",
    "gifts", "medical", "bills", "groceries", "dining", "travel", "hobbies",
    "other",
)


class TransactionCreate(BaseModel):
    """Schema for recording a new transaction."""
    description: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0, description="Positive amount of money")
    category: str = Field(default="other")
    type: TransactionType
    date: date

    @field_validator("category")
    @classmethod
    def normalize_category(cls, value: str) -> str:
        value = value.strip().lower()
        return value or "other"


class Transaction(TransactionCreate):
    """Schema for a transaction read back from the database."""
    id: int
    created_at: Optional[datetime] = None


class TransactionFilter(BaseModel):
    """Optional filters for the filtered transaction listing."""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    category: Optional[str] = None
    type: Optional[TransactionType] = None
    min_amount: Optional[float] = Field(default=None, ge=0)
    max_amount: Optional[float] = Field(default=None, ge=0)
    limit: int = Field(default=100, ge=1, le=5000)
