"""Services package for the finance agent."""

from .errors import (
    FinanceAgentError,
    RetrievalError,
    ModelUnavailableError,
    GENERIC_FAILURE_MESSAGE,
)
from .datastore import FinanceStore
from .supabase_client import SupabaseService, get_supabase_service
from .llm_client import GroqTextGenerator, TextGenerator
from .intent import Intent, IntentRule, INTENT_RULES, classify_intent
from .accountant import extract_transaction
from .advisor import ask_advisor, get_fallback_response
from .analyst import calculate_financial_summary, generate_insights, suggest_budgets
from .agent import FinanceAgent, PREFERENCE_KEYS

__all__ = [
    # Errors
    "FinanceAgentError",
    "RetrievalError",
    "ModelUnavailableError",
    "GENERIC_FAILURE_MESSAGE",
    # Datastore
    "FinanceStore",
    "SupabaseService",
    "get_supabase_service",
    # Language model
    "GroqTextGenerator",
    "TextGenerator",
    # Intent
    "Intent",
    "IntentRule",
    "INTENT_RULES",
    "classify_intent",
    # Accountant
    "extract_transaction",
    # Advisor
    "ask_advisor",
    "get_fallback_response",
    # Analyst
    "calculate_financial_summary",
    "generate_insights",
    "suggest_budgets",
    # Agent
    "FinanceAgent",
    "PREFERENCE_KEYS",
]
