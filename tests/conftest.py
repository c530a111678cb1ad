"""Shared fixtures: an in-memory datastore and a scripted language model."""

import asyncio
import os
from datetime import date, datetime
from typing import Dict, List, Optional

# Required settings must exist before config is imported
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("GROQ_API_KEY", "test-groq-key")

import pytest

from models import (
    Budget,
    BudgetPeriod,
    CategorySummary,
    ChatMessage,
    ChatMessageCreate,
    SpendingPattern,
    Transaction,
    TransactionCreate,
    TransactionType,
    UnusualSpending,
)
from services.analytics import (
    compute_spending_pattern,
    detect_unusual_spending,
    summarize_categories,
)
from services.errors import ModelUnavailableError


class InMemoryStore:
    """FinanceStore backed by lists. Methods named in `fail_on` raise."""

    def __init__(self, fail_on=()):
        self.fail_on = set(fail_on)
        self.transactions: List[Transaction] = []
        self.messages: List[ChatMessage] = []
        self.budgets: List[Budget] = []
        self.patterns: Dict[str, SpendingPattern] = {}
        self.preferences: Dict[str, str] = {}
        self._next_id = 1

    def _check(self, name: str) -> None:
        if name in self.fail_on:
            raise ConnectionError(f"{name} is unavailable")

    def _new_id(self) -> int:
        value = self._next_id
        self._next_id += 1
        return value

    def _expense_rows(self, transactions):
        return [
            {"amount": t.amount, "category": t.category, "date": t.date}
            for t in transactions if t.type == TransactionType.EXPENSE
        ]

    def _this_month(self, transactions):
        today = date.today()
        return [t for t in transactions if (t.date.year, t.date.month) == (today.year, today.month)]

    # Transactions

    async def insert_transaction(self, transaction: TransactionCreate) -> Transaction:
        self._check("insert_transaction")
        saved = Transaction(**transaction.model_dump(), id=self._new_id(), created_at=datetime.now())
        self.transactions.append(saved)
        await self.update_spending_pattern(saved.category)
        return saved

    async def get_transactions(self, limit: int = 50) -> List[Transaction]:
        self._check("get_transactions")
        ordered = sorted(self.transactions, key=lambda t: (t.date, t.id), reverse=True)
        return ordered[:limit]

    async def get_transactions_by_date_range(self, start_date: str, end_date: str) -> List[Transaction]:
        self._check("get_transactions_by_date_range")
        start, end = date.fromisoformat(start_date), date.fromisoformat(end_date)
        return [t for t in await self.get_transactions(len(self.transactions)) if start <= t.date <= end]

    async def get_total_by_type(self, transaction_type: str) -> float:
        self._check("get_total_by_type")
        return sum(t.amount for t in self.transactions if t.type.value == transaction_type)

    async def get_monthly_summary(self, year: int, month: int) -> Dict[str, float]:
        self._check("get_monthly_summary")
        rows = [t for t in self.transactions if (t.date.year, t.date.month) == (year, month)]
        return {
            "income": sum(t.amount for t in rows if t.type == TransactionType.INCOME),
            "expenses": sum(t.amount for t in rows if t.type == TransactionType.EXPENSE),
            "transaction_count": len(rows),
        }

    async def get_current_month_spending(self, category: Optional[str] = None) -> float:
        self._check("get_current_month_spending")
        rows = self._expense_rows(self._this_month(self.transactions))
        return sum(r["amount"] for r in rows if category is None or r["category"] == category)

    async def get_current_month_spending_by_category(self) -> Dict[str, float]:
        self._check("get_current_month_spending_by_category")
        rows = self._expense_rows(self._this_month(self.transactions))
        return {item.category: item.total for item in summarize_categories(rows)}

    async def get_category_summary(self) -> List[CategorySummary]:
        self._check("get_category_summary")
        return summarize_categories(self._expense_rows(self.transactions))

    # Chat

    async def save_chat_message(self, message: ChatMessageCreate) -> ChatMessage:
        self._check("save_chat_message")
        saved = ChatMessage(**message.model_dump(), id=self._new_id(), created_at=datetime.now())
        self.messages.append(saved)
        return saved

    async def get_chat_messages(self, limit: int = 100, role: Optional[str] = None) -> List[ChatMessage]:
        self._check("get_chat_messages")
        rows = [m for m in reversed(self.messages) if role is None or m.role == role]
        return rows[:limit]

    async def get_recent_chat_context(self, limit: int = 10) -> List[ChatMessage]:
        self._check("get_recent_chat_context")
        return list(reversed(await self.get_chat_messages(limit=limit)))

    # Budgets

    async def set_budget(self, category: str, amount: float, period: BudgetPeriod = "monthly") -> Budget:
        self._check("set_budget")
        category = category.strip().lower()
        self.budgets = [
            b.model_copy(update={"is_active": False}) if b.category == category else b
            for b in self.budgets
        ]
        budget = Budget(id=self._new_id(), category=category, amount=amount, period=period)
        self.budgets.append(budget)
        return budget

    async def get_budgets(self) -> List[Budget]:
        self._check("get_budgets")
        return sorted((b for b in self.budgets if b.is_active), key=lambda b: b.category)

    async def get_budget_for_category(self, category: str) -> Optional[Budget]:
        self._check("get_budget_for_category")
        for budget in await self.get_budgets():
            if budget.category == category:
                return budget
        return None

    # Preferences

    async def get_user_preference(self, key: str) -> Optional[str]:
        self._check("get_user_preference")
        return self.preferences.get(key)

    async def set_user_preference(self, key: str, value: str) -> None:
        self._check("set_user_preference")
        self.preferences[key] = value

    # Patterns

    async def get_spending_patterns(self) -> List[SpendingPattern]:
        self._check("get_spending_patterns")
        return sorted(self.patterns.values(), key=lambda p: p.frequency, reverse=True)

    async def update_spending_pattern(self, category: str) -> Optional[SpendingPattern]:
        self._check("update_spending_pattern")
        rows = [r for r in self._expense_rows(self.transactions) if r["category"] == category]
        pattern = compute_spending_pattern(category, rows)
        if pattern is not None:
            self.patterns[category] = pattern
        return pattern

    async def get_unusual_spending(self) -> List[UnusualSpending]:
        self._check("get_unusual_spending")
        return detect_unusual_spending(
            await self.get_spending_patterns(),
            await self.get_current_month_spending_by_category(),
        )

    async def clear_database(self) -> None:
        self._check("clear_database")
        self.transactions.clear()
        self.messages.clear()
        self.budgets.clear()
        self.patterns.clear()
        self.preferences.clear()


class FakeGenerator:
    """Returns scripted outputs in order; an Exception entry is raised instead."""

    def __init__(self, *outputs, delay: float = 0.0):
        self.outputs = list(outputs)
        self.delay = delay
        self.prompts: List[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        if not self.outputs:
            raise ModelUnavailableError("no scripted output left")
        output = self.outputs.pop(0)
        if isinstance(output, Exception):
            raise output
        return output


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def today():
    return date.today()


async def add_transaction(store, amount, type="expense", category="other", description="test", on=None):
    """Insert a transaction through the store, dated today by default."""
    return await store.insert_transaction(TransactionCreate(
        description=description,
        amount=amount,
        category=category,
        type=type,
        date=on or date.today(),
    ))
