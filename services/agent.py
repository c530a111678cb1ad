"""
The Finance Agent - orchestration layer.

One call per chat message: assemble a fresh context, classify the message
with the intent rules and hand it to the matching responder. The agent
keeps no state between calls; the datastore is its only memory.
"""

import asyncio
import logging
from datetime import date
from typing import Any, Awaitable, Dict, List, Optional

from config import settings
from models import (
    AgentContext,
    AgentResponse,
    BudgetSuggestion,
    FinancialSummary,
)
from services.accountant import extract_transaction
from services.advisor import ask_advisor
from services.analyst import calculate_financial_summary, generate_insights, suggest_budgets
from services.datastore import FinanceStore
from services.errors import RetrievalError
from services.intent import Intent, classify_intent
from services.llm_client import TextGenerator
from services.replies import balance_response, help_response, insight_response


logger = logging.getLogger(__name__)


# Preference keys read into every context and learnable from model metadata.
PREFERENCE_KEYS = (
    "preferred_currency",
    "budget_alerts",
    "spending_insights",
    "default_categories",
)


async def _store_call(operation: str, awaitable: Awaitable) -> Any:
    """Await a datastore call, turning any failure into RetrievalError."""
    try:
        return await awaitable
    except Exception as e:
        logger.error("Datastore operation %s failed: %s", operation, e, exc_info=True)
        raise RetrievalError(operation) from e


class FinanceAgent:
    """Stateless conversational finance agent."""

    def __init__(
        self,
        store: FinanceStore,
        generator: Optional[TextGenerator] = None,
        model_timeout: Optional[float] = None,
        transaction_limit: Optional[int] = None,
        history_limit: Optional[int] = None,
    ):
        self.store = store
        self.generator = generator
        self.model_timeout = model_timeout or settings.model_timeout_seconds
        self.transaction_limit = transaction_limit or settings.context_transaction_limit
        self.history_limit = history_limit or settings.context_history_limit

    # ==================== CONTEXT ====================

    async def get_financial_overview(self, today: Optional[date] = None) -> FinancialSummary:
        """Lifetime and current-month totals."""
        today = today or date.today()
        total_income, total_expenses, monthly = await asyncio.gather(
            _store_call("total_income", self.store.get_total_by_type("income")),
            _store_call("total_expenses", self.store.get_total_by_type("expense")),
            _store_call("monthly_summary", self.store.get_monthly_summary(today.year, today.month)),
        )
        return calculate_financial_summary(total_income, total_expenses, monthly)

    async def _get_preferences(self) -> Dict[str, str]:
        values = await asyncio.gather(*(
            _store_call(f"preference:{key}", self.store.get_user_preference(key))
            for key in PREFERENCE_KEYS
        ))
        return {key: value for key, value in zip(PREFERENCE_KEYS, values) if value}

    async def build_context(self) -> AgentContext:
        """
        Snapshot of everything the responders need. All reads run concurrently
        and any single failure fails the whole assembly.
        """
        (
            recent_transactions,
            chat_history,
            spending_patterns,
            budgets,
            unusual_spending,
            current_month_spending,
            category_spending,
            user_preferences,
            financial_summary,
        ) = await asyncio.gather(
            _store_call("recent_transactions", self.store.get_transactions(self.transaction_limit)),
            _store_call("chat_history", self.store.get_recent_chat_context(self.history_limit)),
            _store_call("spending_patterns", self.store.get_spending_patterns()),
            _store_call("budgets", self.store.get_budgets()),
            _store_call("unusual_spending", self.store.get_unusual_spending()),
            _store_call("current_month_spending", self.store.get_current_month_spending()),
            _store_call("category_spending", self.store.get_current_month_spending_by_category()),
            self._get_preferences(),
            self.get_financial_overview(),
        )

        return AgentContext(
            recent_transactions=recent_transactions,
            chat_history=chat_history,
            spending_patterns=spending_patterns,
            budgets=budgets,
            unusual_spending=unusual_spending,
            current_month_spending=current_month_spending,
            category_spending=category_spending,
            user_preferences=user_preferences,
            financial_summary=financial_summary,
        )

    # ==================== ENTRY POINTS ====================

    async def process_message(self, message: str) -> AgentResponse:
        """
        Answer one chat message.

        Raises:
            RetrievalError: the context could not be assembled
        """
        context = await self.build_context()
        intent = classify_intent(message, context)
        logger.debug("Classified %r as %s", message[:80], intent.value)

        if intent == Intent.BALANCE:
            return balance_response(context.financial_summary)

        if intent == Intent.HELP:
            return help_response(message)

        if intent == Intent.TRANSACTION:
            return extract_transaction(message)

        if intent == Intent.INSIGHT:
            return insight_response(generate_insights(context))

        response = await ask_advisor(message, context, self.generator, self.model_timeout)
        await self._learn_preferences(response)
        return response

    async def generate_proactive_insights(self) -> List[str]:
        context = await self.build_context()
        return generate_insights(context)

    async def suggest_budgets(self) -> List[BudgetSuggestion]:
        context = await self.build_context()
        return suggest_budgets(context)

    # ==================== PREFERENCES ====================

    async def _learn_preferences(self, response: AgentResponse) -> None:
        """Persist tracked preference values the model reported in its metadata."""
        for key, value in response.context.items():
            if key in PREFERENCE_KEYS and isinstance(value, str):
                await _store_call(f"set_preference:{key}", self.store.set_user_preference(key, value))
                logger.info("Updated user preference %s", key)
