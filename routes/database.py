"""Maintenance routes."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from services import FinanceStore
from routes.dependencies import get_finance_store


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/database", tags=["Database"])


@router.post("/clear")
async def clear_database(store: FinanceStore = Depends(get_finance_store)):
    """Delete all transactions, chat history, budgets, patterns and preferences."""
    try:
        await store.clear_database()
        return {"success": True, "message": "Database cleared"}
    except Exception as e:
        logger.error("Error clearing database: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Error clearing database")
