"""
Insight API routes.
Read-only views computed by the agent and the datastore statistics.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from models import FinancialSummary
from services import FinanceAgent, FinanceStore, RetrievalError
from routes.dependencies import get_finance_agent, get_finance_store


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Insights"])


@router.get("/insights")
async def get_insights(agent: FinanceAgent = Depends(get_finance_agent)):
    """Proactive insights and budget suggestions."""
    try:
        insights = await agent.generate_proactive_insights()
        suggestions = await agent.suggest_budgets()
        return {
            "insights": insights,
            "budget_suggestions": [s.model_dump() for s in suggestions],
        }
    except RetrievalError:
        raise
    except Exception as e:
        logger.error("Error generating insights: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Error generating insights")


@router.get("/financial-overview", response_model=FinancialSummary)
async def get_financial_overview(agent: FinanceAgent = Depends(get_finance_agent)):
    try:
        return await agent.get_financial_overview()
    except RetrievalError:
        raise
    except Exception as e:
        logger.error("Error fetching financial overview: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Error fetching financial overview")


@router.get("/analytics")
async def get_analytics(store: FinanceStore = Depends(get_finance_store)):
    """Lifetime expense totals per category."""
    try:
        categories = await store.get_category_summary()
        total_expenses = sum(c.total for c in categories)
        return {
            "categories": [c.model_dump() for c in categories],
            "summary": {
                "total_expenses": total_expenses,
                "category_count": len(categories),
                "transaction_count": sum(c.count for c in categories),
            },
        }
    except Exception as e:
        logger.error("Error fetching analytics: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Error fetching analytics")
