"""Budget API routes."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from models import Budget, BudgetCreate
from services import FinanceStore
from services.analytics import build_budget_status
from routes.dependencies import get_finance_store


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/budgets", tags=["Budgets"])


@router.get("")
async def list_budgets(store: FinanceStore = Depends(get_finance_store)):
    """Active budgets with this month's spending against them."""
    try:
        budgets = await store.get_budgets()
        spending = await store.get_current_month_spending_by_category()
        statuses = [
            build_budget_status(budget, spending.get(budget.category, 0.0))
            for budget in budgets
        ]
        return {"budgets": [s.model_dump(mode="json") for s in statuses]}
    except Exception as e:
        logger.error("Error fetching budgets: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Error fetching budgets")


@router.post("", response_model=Budget)
async def set_budget(
    payload: BudgetCreate,
    store: FinanceStore = Depends(get_finance_store),
):
    """Set a budget, replacing the category's current one."""
    try:
        budget = await store.set_budget(payload.category, payload.amount, payload.period)
        logger.info("Budget for %s set to %.2f (%s)", budget.category, budget.amount, budget.period)
        return budget
    except Exception as e:
        logger.error("Error setting budget: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Error setting budget")
