"""
Datastore interface consumed by the finance agent and the API routes.
SupabaseService is the production implementation.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Protocol

from models import (
    Budget,
    BudgetPeriod,
    CategorySummary,
    ChatMessage,
    ChatMessageCreate,
    SpendingPattern,
    Transaction,
    TransactionCreate,
    UnusualSpending,
)


class FinanceStore(Protocol):
    # Transactions
    async def insert_transaction(self, transaction: TransactionCreate) -> Transaction: ...

    async def get_transactions(self, limit: int = 50) -> List[Transaction]: ...

    async def get_transactions_by_date_range(self, start_date: str, end_date: str) -> List[Transaction]: ...

    async def get_total_by_type(self, transaction_type: str) -> float: ...

    async def get_monthly_summary(self, year: int, month: int) -> Dict[str, float]: ...

    async def get_current_month_spending(self, category: Optional[str] = None) -> float: ...

    async def get_current_month_spending_by_category(self) -> Dict[str, float]: ...

    async def get_category_summary(self) -> List[CategorySummary]: ...

    # Chat
    async def save_chat_message(self, message: ChatMessageCreate) -> ChatMessage: ...

    async def get_chat_messages(self, limit: int = 100, role: Optional[str] = None) -> List[ChatMessage]: ...

    async def get_recent_chat_context(self, limit: int = 10) -> List[ChatMessage]: ...

    # Budgets
    async def set_budget(self, category: str, amount: float, period: BudgetPeriod = "monthly") -> Budget: ...

    async def get_budgets(self) -> List[Budget]: ...

    async def get_budget_for_category(self, category: str) -> Optional[Budget]: ...

    # Preferences
    async def get_user_preference(self, key: str) -> Optional[str]: ...

    async def set_user_preference(self, key: str, value: str) -> None: ...

    # Spending statistics
    async def get_spending_patterns(self) -> List[SpendingPattern]: ...

    async def update_spending_pattern(self, category: str) -> Optional[SpendingPattern]: ...

    async def get_unusual_spending(self) -> List[UnusualSpending]: ...

    # Maintenance
    async def clear_database(self) -> None: ...
