"""Models package for the finance agent."""

from .transaction import (
    SUGGESTED_CATEGORIES,
    TransactionType,
    TransactionCreate,
    Transaction,
    TransactionFilter,
)
from .chat import (
    ChatMessage,
    ChatMessageCreate,
    ChatRequest,
    ChatResponse,
    RecordedTransaction,
)
from .budget import (
    BudgetPeriod,
    BudgetCreate,
    Budget,
    BudgetStatus,
    BudgetSuggestion,
    CategorySummary,
    SpendingPattern,
    UnusualSpending,
)
from .agent import (
    AgentContext,
    AgentResponse,
    AgentResponseType,
    ExtractedTransaction,
    FinancialSummary,
)

__all__ = [
    # Transaction models
    "SUGGESTED_CATEGORIES",
    "TransactionType",
    "TransactionCreate",
    "Transaction",
    "TransactionFilter",
    # Chat models
    "ChatMessage",
    "ChatMessageCreate",
    "ChatRequest",
    "ChatResponse",
    "RecordedTransaction",
    # Budget & statistics models
    "BudgetPeriod",
    "BudgetCreate",
    "Budget",
    "BudgetStatus",
    "BudgetSuggestion",
    "CategorySummary",
    "SpendingPattern",
    "UnusualSpending",
    # Agent models
    "AgentContext",
    "AgentResponse",
    "AgentResponseType",
    "ExtractedTransaction",
    "FinancialSummary",
]
