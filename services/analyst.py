"""
The Analyst Service - Insight Layer
Financial summary arithmetic, proactive insights and budget suggestions.
Everything here is computed from an AgentContext; nothing is written back.
"""

import math
from typing import List, Mapping

from models import AgentContext, BudgetSuggestion, FinancialSummary
from services.analytics import budget_percentage


HEALTHY_BALANCE = 1000
BUDGET_ALERT_PERCENT = 90
BUDGET_WARNING_PERCENT = 75
UNUSUAL_SPENDING_PERCENT = 50
MAX_UNUSUAL_INSIGHTS = 2

SUGGESTION_MIN_FREQUENCY = 0.5  # transactions per month
SUGGESTION_BUFFER = 1.2
MAX_BUDGET_SUGGESTIONS = 3


def calculate_financial_summary(
    total_income: float,
    total_expenses: float,
    monthly: Mapping[str, float],
) -> FinancialSummary:
    """Combine lifetime totals with a monthly summary row."""
    monthly_income = float(monthly.get("income", 0) or 0)
    monthly_expenses = float(monthly.get("expenses", 0) or 0)
    return FinancialSummary(
        total_income=total_income,
        total_expenses=total_expenses,
        current_balance=total_income - total_expenses,
        monthly_income=monthly_income,
        monthly_expenses=monthly_expenses,
        monthly_balance=monthly_income - monthly_expenses,
        transaction_count=int(monthly.get("transaction_count", 0) or 0),
    )


def generate_insights(context: AgentContext) -> List[str]:
    """
    Ordered observations about the user's finances.

    Each rule is checked independently and appends at most one line
    (the budget rule appends one line per budget).
    """
    insights = []
    summary = context.financial_summary

    # Lifetime balance
    if summary.current_balance < 0:
        insights.append(
            f"🔴 Your current balance is negative (-${abs(summary.current_balance):.2f}). "
            "Consider reducing expenses or increasing income."
        )
    elif summary.current_balance > HEALTHY_BALANCE:
        insights.append(
            f"🟢 Great job! You have a healthy balance of ${summary.current_balance:.2f}."
        )

    # This month
    if summary.monthly_balance < 0:
        insights.append(
            f"📉 This month you've spent ${abs(summary.monthly_balance):.2f} more than you've earned."
        )
    elif summary.monthly_balance > 0:
        insights.append(
            f"📈 This month you've saved ${summary.monthly_balance:.2f}! Keep it up!"
        )

    # Budgets
    for budget in context.budgets:
        spent = context.category_spending.get(budget.category, 0.0)
        percentage = budget_percentage(spent, budget.amount)
        if percentage > BUDGET_ALERT_PERCENT:
            insights.append(
                f"⚠️ You've spent {percentage:.1f}% of your {budget.category} budget this month!"
            )
        elif percentage > BUDGET_WARNING_PERCENT:
            insights.append(
                f"📊 You're at {percentage:.1f}% of your {budget.category} budget. "
                "Consider monitoring closely."
            )

    # Unusual spending
    for unusual in context.unusual_spending[:MAX_UNUSUAL_INSIGHTS]:
        deviation = unusual.deviation_percentage
        if abs(deviation) > UNUSUAL_SPENDING_PERCENT:
            direction = "higher" if deviation > 0 else "lower"
            insights.append(
                f"📈 Your {unusual.category} spending is {abs(deviation):.1f}% "
                f"{direction} than usual this month."
            )

    # Most frequent category
    if context.spending_patterns:
        top_pattern = max(context.spending_patterns, key=lambda p: p.frequency)
        insights.append(
            f"💡 Your most frequent expense category is {top_pattern.category} "
            f"(avg ${top_pattern.average_amount:.2f} per transaction)."
        )

    return insights


def suggest_budgets(context: AgentContext) -> List[BudgetSuggestion]:
    """
    Monthly budget proposals for frequent categories without an active budget.
    Patterns keep the order they were supplied in; at most three are returned.
    """
    budgeted = {budget.category for budget in context.budgets if budget.is_active}
    suggestions = []

    for pattern in context.spending_patterns:
        if pattern.category in budgeted or pattern.frequency <= SUGGESTION_MIN_FREQUENCY:
            continue

        # 20% buffer over the expected monthly spend; rounding to 9 places only
        # absorbs binary float error, never a real fraction of a cent
        amount = math.ceil(round(pattern.average_amount * pattern.frequency * SUGGESTION_BUFFER, 9))
        suggestions.append(BudgetSuggestion(
            category=pattern.category,
            amount=amount,
            reasoning=(
                f"Based on your average spending of ${pattern.average_amount:.2f} "
                f"per transaction, {pattern.frequency:.1f} times per month."
            ),
        ))

    return suggestions[:MAX_BUDGET_SUGGESTIONS]
