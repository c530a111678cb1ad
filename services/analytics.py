"""
Spending statistics shared by the datastore and the API layer.
Pure functions over plain rows so they can run on Supabase results or test data.
"""

from datetime import date, datetime
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from models import (
    Budget,
    BudgetStatus,
    CategorySummary,
    SpendingPattern,
    Transaction,
    TransactionFilter,
    UnusualSpending,
)


DAYS_PER_MONTH = 30


def month_date_range(year: int, month: int) -> Tuple[str, str]:
    """Return (start_inclusive, end_exclusive) ISO dates for a calendar month."""
    start_date = f"{year}-{month:02d}-01"
    if month == 12:
        end_date = f"{year + 1}-01-01"
    else:
        end_date = f"{year}-{month + 1:02d}-01"
    return start_date, end_date


def current_month_range(today: Optional[date] = None) -> Tuple[str, str]:
    today = today or date.today()
    return month_date_range(today.year, today.month)


def parse_iso_date(value) -> date:
    """Accept date, datetime or an ISO string (date or timestamp)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def months_between(first: date, last: date) -> float:
    """Month span between two dates, never below one month."""
    return max(1.0, abs((last - first).days) / DAYS_PER_MONTH)


def compute_spending_pattern(category: str, expenses: Iterable[Mapping]) -> Optional[SpendingPattern]:
    """
    Average amount and monthly frequency of a category's expense rows.
    Returns None when the category has no expenses.
    """
    rows = list(expenses)
    if not rows:
        return None

    amounts = [float(row["amount"]) for row in rows]
    dates = [parse_iso_date(row["date"]) for row in rows]
    frequency = len(rows) / months_between(min(dates), max(dates))

    return SpendingPattern(
        category=category,
        average_amount=sum(amounts) / len(amounts),
        frequency=frequency,
        last_updated=datetime.now(),
    )


def detect_unusual_spending(
    patterns: Iterable[SpendingPattern],
    category_spending: Mapping[str, float],
    threshold: float = 20.0,
) -> List[UnusualSpending]:
    """
    Compare this month's spending per category with its expected monthly spend
    (average amount x frequency). Categories without spending this month are skipped.
    Sorted by deviation magnitude, largest first.
    """
    unusual = []
    for pattern in patterns:
        current = float(category_spending.get(pattern.category, 0.0))
        expected = pattern.average_amount * pattern.frequency
        if current <= 0 or expected <= 0:
            continue

        deviation = (current - expected) / expected * 100
        if abs(deviation) > threshold:
            unusual.append(UnusualSpending(
                category=pattern.category,
                current_spending=current,
                expected_spending=expected,
                deviation_percentage=deviation,
            ))

    unusual.sort(key=lambda item: abs(item.deviation_percentage), reverse=True)
    return unusual


def budget_percentage(spent: float, amount: float) -> float:
    if amount <= 0:
        return 0.0
    return spent / amount * 100


def budget_status(percentage: float) -> str:
    # Both thresholds are exclusive: exactly 90% is a warning, exactly 75% is on track.
    if percentage > 90:
        return "over_budget"
    if percentage > 75:
        return "warning"
    return "on_track"


def build_budget_status(budget: Budget, spent: float) -> BudgetStatus:
    percentage = budget_percentage(spent, budget.amount)
    return BudgetStatus(
        **budget.model_dump(),
        current_spending=spent,
        percentage=round(percentage, 2),
        remaining=budget.amount - spent,
        status=budget_status(percentage),
    )


def summarize_categories(expenses: Iterable[Mapping]) -> List[CategorySummary]:
    """Expense total and count per category, largest total first."""
    totals = {}
    counts = {}
    for row in expenses:
        category = row.get("category") or "other"
        totals[category] = totals.get(category, 0.0) + float(row.get("amount") or 0)
        counts[category] = counts.get(category, 0) + 1

    summary = [
        CategorySummary(category=k, total=v, count=counts[k])
        for k, v in totals.items()
    ]
    summary.sort(key=lambda item: item.total, reverse=True)
    return summary


def summarize_transactions(transactions: Iterable[Transaction]) -> Dict[str, float]:
    """Income, expense and balance totals of a set of transactions."""
    total_income = 0.0
    total_expenses = 0.0
    count = 0
    for transaction in transactions:
        if transaction.type.value == "income":
            total_income += transaction.amount
        else:
            total_expenses += transaction.amount
        count += 1

    return {
        "total_income": total_income,
        "total_expenses": total_expenses,
        "balance": total_income - total_expenses,
        "transaction_count": count,
    }


def filter_transactions(
    transactions: Iterable[Transaction],
    filters: TransactionFilter,
) -> List[Transaction]:
    """Apply the optional filters; date bounds are inclusive."""
    category = filters.category.strip().lower() if filters.category else None
    result = []
    for transaction in transactions:
        if filters.start_date and transaction.date < filters.start_date:
            continue
        if filters.end_date and transaction.date > filters.end_date:
            continue
        if category and transaction.category != category:
            continue
        if filters.type and transaction.type != filters.type:
            continue
        if filters.min_amount is not None and transaction.amount < filters.min_amount:
            continue
        if filters.max_amount is not None and transaction.amount > filters.max_amount:
            continue
        result.append(transaction)
    return result[:filters.limit]
