"""
Supabase client service for database operations.
Handles all direct interactions with Supabase and keeps the derived
spending statistics up to date.
"""

import logging
from supabase import create_client, Client
from typing import Dict, List, Optional
from datetime import datetime
from functools import lru_cache

from config import settings
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
from services.analytics import (
    compute_spending_pattern,
    current_month_range,
    detect_unusual_spending,
    month_date_range,
    summarize_categories,
)


logger = logging.getLogger(__name__)


class SupabaseService:
    """Service class for Supabase operations."""

    def __init__(self, client: Optional[Client] = None):
        logger.debug("Initializing Supabase client for %s", settings.supabase_url)
        # Service client for all reads and writes (single-user tracker)
        self.client: Client = client or create_client(
            settings.supabase_url,
            settings.supabase_service_key
        )

    # ==================== TRANSACTION OPERATIONS ====================

    async def insert_transaction(self, transaction: TransactionCreate) -> Transaction:
        """Insert a transaction and refresh the spending pattern of its category."""
        data = {
            "description": transaction.description,
            "amount": transaction.amount,
            "category": transaction.category,
            "type": transaction.type.value,
            "date": transaction.date.isoformat(),
            "created_at": datetime.now().isoformat(),
        }
        response = self.client.table("transactions").insert(data).execute()
        saved = Transaction(**response.data[0])

        await self.update_spending_pattern(saved.category)
        return saved

    async def get_transactions(self, limit: int = 50) -> List[Transaction]:
        """Most recent transactions first."""
        response = self.client.table("transactions") \
            .select("*") \
            .order("date", desc=True) \
            .order("created_at", desc=True) \
            .limit(limit) \
            .execute()
        return [Transaction(**row) for row in response.data]

    async def get_transactions_by_date_range(self, start_date: str, end_date: str) -> List[Transaction]:
        """Transactions between two ISO dates, both inclusive."""
        response = self.client.table("transactions") \
            .select("*") \
            .gte("date", start_date) \
            .lte("date", end_date) \
            .order("date", desc=True) \
            .order("created_at", desc=True) \
            .execute()
        return [Transaction(**row) for row in response.data]

    async def get_total_by_type(self, transaction_type: str) -> float:
        """Lifetime total of income or expense."""
        response = self.client.table("transactions") \
            .select("amount") \
            .eq("type", transaction_type) \
            .execute()
        return float(sum(row.get("amount") or 0 for row in response.data))

    async def get_monthly_summary(self, year: int, month: int) -> Dict[str, float]:
        """Income, expenses and transaction count for a calendar month."""
        start_date, end_date = month_date_range(year, month)
        response = self.client.table("transactions") \
            .select("amount, type") \
            .gte("date", start_date) \
            .lt("date", end_date) \
            .execute()

        income = 0.0
        expenses = 0.0
        for row in response.data:
            amount = float(row.get("amount") or 0)
            if row.get("type") == "income":
                income += amount
            else:
                expenses += amount

        return {
            "income": income,
            "expenses": expenses,
            "transaction_count": len(response.data),
        }

    async def _current_month_expenses(self, category: Optional[str] = None) -> list[dict]:
        start_date, end_date = current_month_range()
        query = self.client.table("transactions") \
            .select("amount, category") \
            .eq("type", "expense") \
            .gte("date", start_date) \
            .lt("date", end_date)
        if category:
            query = query.eq("category", category)
        return query.execute().data

    async def get_current_month_spending(self, category: Optional[str] = None) -> float:
        """Total expenses this month, optionally for one category."""
        rows = await self._current_month_expenses(category)
        return float(sum(row.get("amount") or 0 for row in rows))

    async def get_current_month_spending_by_category(self) -> Dict[str, float]:
        rows = await self._current_month_expenses()
        return {item.category: item.total for item in summarize_categories(rows)}

    async def get_category_summary(self) -> List[CategorySummary]:
        """Lifetime expense totals per category."""
        response = self.client.table("transactions") \
            .select("amount, category") \
            .eq("type", "expense") \
            .execute()
        return summarize_categories(response.data)

    # ==================== CHAT OPERATIONS ====================

    async def save_chat_message(self, message: ChatMessageCreate) -> ChatMessage:
        """Save a chat message to history."""
        data = {
            "role": message.role,
            "content": message.content,
            "context": message.context,
            "created_at": datetime.now().isoformat(),
        }
        response = self.client.table("chat_messages").insert(data).execute()
        return ChatMessage(**response.data[0])

    async def get_chat_messages(self, limit: int = 100, role: Optional[str] = None) -> List[ChatMessage]:
        """Chat messages, newest first."""
        query = self.client.table("chat_messages").select("*")
        if role:
            query = query.eq("role", role)
        response = query.order("created_at", desc=True) \
            .order("id", desc=True) \
            .limit(limit) \
            .execute()
        return [ChatMessage(**row) for row in response.data]

    async def get_recent_chat_context(self, limit: int = 10) -> List[ChatMessage]:
        """Recent chat messages in conversation order (oldest first)."""
        messages = await self.get_chat_messages(limit=limit)
        return list(reversed(messages))

    # ==================== BUDGET OPERATIONS ====================

    async def set_budget(self, category: str, amount: float, period: BudgetPeriod = "monthly") -> Budget:
        """Supersede any active budget for the category with a new one."""
        category = category.strip().lower()
        self.client.table("budgets") \
            .update({"is_active": False}) \
            .eq("category", category) \
            .eq("is_active", True) \
            .execute()

        data = {
            "category": category,
            "amount": amount,
            "period": period,
            "is_active": True,
            "created_at": datetime.now().isoformat(),
        }
        response = self.client.table("budgets").insert(data).execute()
        return Budget(**response.data[0])

    async def get_budgets(self) -> List[Budget]:
        """All active budgets, ordered by category."""
        response = self.client.table("budgets") \
            .select("*") \
            .eq("is_active", True) \
            .order("category") \
            .execute()
        return [Budget(**row) for row in response.data]

    async def get_budget_for_category(self, category: str) -> Optional[Budget]:
        response = self.client.table("budgets") \
            .select("*") \
            .eq("category", category) \
            .eq("is_active", True) \
            .limit(1) \
            .execute()
        return Budget(**response.data[0]) if response.data else None

    # ==================== USER PREFERENCES ====================

    async def get_user_preference(self, key: str) -> Optional[str]:
        response = self.client.table("user_preferences") \
            .select("value") \
            .eq("key", key) \
            .limit(1) \
            .execute()
        return response.data[0]["value"] if response.data else None

    async def set_user_preference(self, key: str, value: str) -> None:
        """Upsert a preference by key (last write wins)."""
        data = {
            "key": key,
            "value": value,
            "updated_at": datetime.now().isoformat(),
        }
        self.client.table("user_preferences").upsert(data, on_conflict="key").execute()

    # ==================== SPENDING PATTERNS ====================

    async def get_spending_patterns(self) -> List[SpendingPattern]:
        """All spending patterns, most frequent first."""
        response = self.client.table("spending_patterns") \
            .select("*") \
            .order("frequency", desc=True) \
            .execute()
        return [SpendingPattern(**row) for row in response.data]

    async def update_spending_pattern(self, category: str) -> Optional[SpendingPattern]:
        """Recompute average amount and monthly frequency from the category's expenses."""
        response = self.client.table("transactions") \
            .select("amount, date") \
            .eq("category", category) \
            .eq("type", "expense") \
            .execute()

        pattern = compute_spending_pattern(category, response.data)
        if pattern is None:
            return None

        data = {
            "category": pattern.category,
            "average_amount": pattern.average_amount,
            "frequency": pattern.frequency,
            "last_updated": pattern.last_updated.isoformat(),
        }
        self.client.table("spending_patterns").upsert(data, on_conflict="category").execute()
        logger.debug(
            "Spending pattern for %s: avg=%.2f freq=%.2f",
            category, pattern.average_amount, pattern.frequency
        )
        return pattern

    async def get_unusual_spending(self) -> List[UnusualSpending]:
        """Categories whose spending this month deviates from their usual monthly spend."""
        patterns = await self.get_spending_patterns()
        category_spending = await self.get_current_month_spending_by_category()
        return detect_unusual_spending(
            patterns,
            category_spending,
            threshold=settings.unusual_spending_threshold,
        )

    # ==================== MAINTENANCE ====================

    async def clear_database(self) -> None:
        """Delete all rows from every table."""
        for table in ("spending_patterns", "budgets", "user_preferences", "chat_messages", "transactions"):
            self.client.table(table).delete().neq("id", 0).execute()
        logger.warning("All database data has been cleared")


@lru_cache()
def get_supabase_service() -> SupabaseService:
    """Shared Supabase service, created on first use."""
    return SupabaseService()
