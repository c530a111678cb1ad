"""
Transaction API routes.
Direct transaction input and listings for the dashboard.
"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from models import Transaction, TransactionCreate, TransactionFilter, TransactionType
from services import FinanceStore
from services.analytics import filter_transactions, summarize_transactions
from routes.dependencies import get_finance_store


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/transactions", tags=["Transactions"])

# Upper bound on rows fetched when no date range narrows the query
FILTER_SCAN_LIMIT = 5000


@router.get("")
async def list_transactions(
    limit: int = Query(default=50, ge=1, le=5000),
    store: FinanceStore = Depends(get_finance_store),
):
    """Recent transactions with lifetime totals."""
    try:
        transactions = await store.get_transactions(limit=limit)
        total_income = await store.get_total_by_type("income")
        total_expenses = await store.get_total_by_type("expense")

        return {
            "transactions": [t.model_dump(mode="json") for t in transactions],
            "summary": {
                "total_income": total_income,
                "total_expenses": total_expenses,
                "balance": total_income - total_expenses,
            },
        }
    except Exception as e:
        logger.error("Error fetching transactions: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Error fetching transactions")


@router.post("", response_model=Transaction)
async def create_transaction(
    transaction: TransactionCreate,
    store: FinanceStore = Depends(get_finance_store),
):
    """Record a transaction without going through the chat agent."""
    try:
        saved = await store.insert_transaction(transaction)
        logger.info("Recorded %s of %.2f in %s", saved.type.value, saved.amount, saved.category)
        return saved
    except Exception as e:
        logger.error("Error creating transaction: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Error creating transaction")


@router.get("/filtered")
async def list_filtered_transactions(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    category: Optional[str] = None,
    type: Optional[TransactionType] = None,
    min_amount: Optional[float] = Query(default=None, ge=0),
    max_amount: Optional[float] = Query(default=None, ge=0),
    limit: int = Query(default=100, ge=1, le=5000),
    store: FinanceStore = Depends(get_finance_store),
):
    """Transactions matching every given filter, with totals of the matched set."""
    if start_date and end_date and start_date > end_date:
        raise HTTPException(status_code=400, detail="start_date must not be after end_date")

    filters = TransactionFilter(
        start_date=start_date,
        end_date=end_date,
        category=category,
        type=type,
        min_amount=min_amount,
        max_amount=max_amount,
        limit=limit,
    )

    try:
        if start_date and end_date:
            rows = await store.get_transactions_by_date_range(
                start_date.isoformat(), end_date.isoformat()
            )
        else:
            rows = await store.get_transactions(limit=FILTER_SCAN_LIMIT)

        transactions = filter_transactions(rows, filters)
        return {
            "transactions": [t.model_dump(mode="json") for t in transactions],
            "summary": summarize_transactions(transactions),
            "filters": filters.model_dump(mode="json", exclude_none=True),
        }
    except Exception as e:
        logger.error("Error filtering transactions: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Error fetching transactions")
