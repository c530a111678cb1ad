"""FastAPI dependency providers shared by the routers."""

from functools import lru_cache

from fastapi import Depends

from services import FinanceAgent, FinanceStore, GroqTextGenerator, get_supabase_service
from services.llm_client import TextGenerator


def get_finance_store() -> FinanceStore:
    return get_supabase_service()


@lru_cache()
def get_text_generator() -> TextGenerator:
    return GroqTextGenerator()


def get_finance_agent(
    store: FinanceStore = Depends(get_finance_store),
    generator: TextGenerator = Depends(get_text_generator),
) -> FinanceAgent:
    """The agent holds no state, so a fresh one per request is fine."""
    return FinanceAgent(store=store, generator=generator)
