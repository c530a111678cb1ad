"""
The Accountant Service - Transaction Extraction Layer
Regex/keyword parser that turns a chat message already recognised as a
transaction report into a structured transaction. Never calls the language
model and never writes to the database; recording is the caller's job.
"""

import re
from datetime import date
from typing import Optional, Tuple

from models import (
    AgentResponse,
    AgentResponseType,
    ExtractedTransaction,
    TransactionType,
)


AMOUNT_PATTERN = re.compile(r"\$?(\d+(?:\.\d{2})?)")
LEADING_AMOUNT_PATTERN = re.compile(r"^\$?\d+(?:\.\d{2})?\s*")

MAX_DESCRIPTION_LENGTH = 100

INCOME_KEYWORDS = ("received", "earned", "got", "income", "salary", "paid me", "refund")

# Order matters: the first category whose keywords appear wins.
CATEGORY_RULES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("food", ("food", "lunch", "dinner", "breakfast", "restaurant")),
    ("groceries", ("groceries", "grocery")),
    ("gas", ("gas", "fuel", "petrol")),
    ("rent", ("rent", "housing")),
    ("transport", ("transport", "bus", "train", "uber", "taxi")),
    ("entertainment", ("entertainment", "movie", "game")),
    ("utilities", ("utilities", "electricity", "water", "internet")),
    ("shopping", ("shopping", "clothes", "clothing")),
    ("health", ("health", "medical", "doctor")),
    ("salary", ("salary", "paycheck")),
    ("freelance", ("freelance", "contract")),
)
DEFAULT_CATEGORY = "other"


def extract_amount(message: str) -> Optional[float]:
    """First amount in the message (optional $, optional two decimals)."""
    match = AMOUNT_PATTERN.search(message)
    if not match:
        return None
    amount = float(match.group(1))
    return amount if amount > 0 else None


def detect_transaction_type(message: str) -> TransactionType:
    """Expense unless the message reads like money coming in."""
    message_lower = message.lower()
    if any(keyword in message_lower for keyword in INCOME_KEYWORDS):
        return TransactionType.INCOME
    return TransactionType.EXPENSE


def map_category(message: str) -> str:
    """Single pass over CATEGORY_RULES; unmatched messages are 'other'."""
    message_lower = message.lower()
    for category, keywords in CATEGORY_RULES:
        if any(keyword in message_lower for keyword in keywords):
            return category
    return DEFAULT_CATEGORY


def format_plain_amount(amount: float) -> str:
    """15.0 -> '15', 4.5 -> '4.5'."""
    return str(int(amount)) if float(amount).is_integer() else str(amount)


def build_description(message: str, amount: float, transaction_type: TransactionType) -> str:
    """Message without a leading amount, capped at 100 characters."""
    description = LEADING_AMOUNT_PATTERN.sub("", message.strip()).strip()

    if len(description) > MAX_DESCRIPTION_LENGTH:
        description = description[:MAX_DESCRIPTION_LENGTH - 3] + "..."

    if not description:
        label = "Income" if transaction_type == TransactionType.INCOME else "Expense"
        description = f"{label} - ${format_plain_amount(amount)}"

    return description


def missing_amount_response() -> AgentResponse:
    """Clarification asked when no amount can be found."""
    return AgentResponse(
        type=AgentResponseType.QUESTION,
        message=(
            "I couldn't find an amount in your message. "
            "Could you please specify how much you spent or received?"
        ),
        requires_clarification=True,
        clarification_question="How much was the transaction for?",
        context={"type": "question", "source": "rules", "reason": "missing_amount"},
    )


def extract_transaction(message: str, today: Optional[date] = None) -> AgentResponse:
    """
    Extract a transaction from free text.

    The date is always today; words like "yesterday" are not interpreted.

    Args:
        message: Raw user message classified as a transaction report
        today: Override for the transaction date (tests)

    Returns:
        AgentResponse: `transaction` response, or a `question` asking for the amount
    """
    amount = extract_amount(message)
    if amount is None:
        return missing_amount_response()

    transaction_type = detect_transaction_type(message)
    category = map_category(message)
    description = build_description(message, amount, transaction_type)

    transaction = ExtractedTransaction(
        description=description,
        amount=amount,
        category=category,
        type=transaction_type,
        date=today or date.today(),
    )

    sign = "+" if transaction_type == TransactionType.INCOME else "-"
    return AgentResponse(
        type=AgentResponseType.TRANSACTION,
        transaction=transaction,
        message=f"✅ Transaction recorded: {sign}${amount:.2f} for {description} ({category})",
        requires_clarification=False,
        context={
            "type": "transaction",
            "source": "rules",
            "amount": amount,
            "category": category,
            "transaction_type": transaction_type.value,
        },
    )
