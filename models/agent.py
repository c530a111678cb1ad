"""
Pydantic models for the finance agent.
AgentResponse is the single output contract of the agent; AgentContext and
FinancialSummary are assembled fresh for every request and never persisted.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Any, Dict, List, Optional
from datetime import date
from enum import Enum

from .transaction import Transaction, TransactionType
from .chat import ChatMessage
from .budget import Budget, SpendingPattern, UnusualSpending


class AgentResponseType(str, Enum):
    """Discriminant of AgentResponse."""
    TRANSACTION = "transaction"
    QUESTION = "question"
    INSIGHT = "insight"
    BUDGET_ALERT = "budget_alert"
    SUGGESTION = "suggestion"
    BALANCE = "balance"
    HELP = "help"


class ExtractedTransaction(BaseModel):
    """Transaction payload carried by a `transaction` response."""
    description: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0)
    category: str = "other"
    type: TransactionType
    date: date

    @field_validator("category")
    @classmethod
    def normalize_category(cls, value: str) -> str:
        value = value.strip().lower()
        return value or "other"


class AgentResponse(BaseModel):
    """
    Tagged response of the agent.

    The transaction payload is present exactly when type is `transaction`,
    and the clarification question exactly when clarification is required.
    """
    model_config = ConfigDict(extra="ignore")

    type: AgentResponseType
    message: str
    transaction: Optional[ExtractedTransaction] = None
    suggestions: Optional[List[str]] = None
    requires_clarification: bool = False
    clarification_question: Optional[str] = None
    context: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("requires_clarification", mode="before")
    @classmethod
    def default_clarification(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("context", mode="before")
    @classmethod
    def default_context(cls, value: Any) -> Any:
        return {} if value is None else value

    @model_validator(mode="before")
    @classmethod
    def default_clarification_question(cls, data: Any) -> Any:
        # A clarifying reply without an explicit question asks its own message
        if isinstance(data, dict) and data.get("requires_clarification") and not data.get("clarification_question"):
            data = {**data, "clarification_question": data.get("message")}
        return data

    @model_validator(mode="after")
    def check_shape(self) -> "AgentResponse":
        is_transaction = self.type == AgentResponseType.TRANSACTION
        if is_transaction and self.transaction is None:
            raise ValueError("transaction responses must carry a transaction payload")
        if not is_transaction and self.transaction is not None:
            raise ValueError(f"{self.type.value} responses cannot carry a transaction payload")
        if self.requires_clarification and not self.clarification_question:
            raise ValueError("clarification_question is required when requires_clarification is true")
        if not self.requires_clarification:
            self.clarification_question = None
        return self


class FinancialSummary(BaseModel):
    """Lifetime and current-month totals."""
    total_income: float = 0.0
    total_expenses: float = 0.0
    current_balance: float = 0.0
    monthly_income: float = 0.0
    monthly_expenses: float = 0.0
    monthly_balance: float = 0.0
    transaction_count: int = 0


class AgentContext(BaseModel):
    """Immutable snapshot of recent data used to answer one message."""
    model_config = ConfigDict(frozen=True)

    recent_transactions: List[Transaction] = Field(default_factory=list)
    chat_history: List[ChatMessage] = Field(default_factory=list)
    spending_patterns: List[SpendingPattern] = Field(default_factory=list)
    budgets: List[Budget] = Field(default_factory=list)
    unusual_spending: List[UnusualSpending] = Field(default_factory=list)
    current_month_spending: float = 0.0
    category_spending: Dict[str, float] = Field(
        default_factory=dict,
        description="Current-month expense total per category"
    )
    user_preferences: Dict[str, str] = Field(default_factory=dict)
    financial_summary: FinancialSummary = Field(default_factory=FinancialSummary)
