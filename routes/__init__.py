"""Routes package for the finance agent API."""

from .chat import router as chat_router
from .transactions import router as transactions_router
from .budgets import router as budgets_router
from .insights import router as insights_router
from .database import router as database_router
from .dependencies import get_finance_agent, get_finance_store, get_text_generator

__all__ = [
    "chat_router",
    "transactions_router",
    "budgets_router",
    "insights_router",
    "database_router",
    "get_finance_agent",
    "get_finance_store",
    "get_text_generator",
]
