"""
Rule-based intent classifier.

Rules are evaluated top to bottom on a lower-cased copy of the message and
the first matching rule wins, so a message naming both "balance" and
"budget" is a balance question no matter which word comes first.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from models import AgentContext


class Intent(str, Enum):
    BALANCE = "balance"
    HELP = "help"
    TRANSACTION = "transaction-fallback"
    INSIGHT = "insight"
    UNCLASSIFIED = "unclassified"


DOLLAR_AMOUNT_PATTERN = re.compile(r"\$\d+")


@dataclass(frozen=True)
class IntentRule:
    intent: Intent
    keywords: Tuple[str, ...]
    pattern: Optional[re.Pattern] = None

    def matches(self, message: str) -> bool:
        lowered = message.lower()
        if any(keyword in lowered for keyword in self.keywords):
            return True
        return bool(self.pattern and self.pattern.search(message))


INTENT_RULES: Tuple[IntentRule, ...] = (
    IntentRule(
        Intent.BALANCE,
        ("balance", "how much money", "financial overview", "how much do i have", "what do i have"),
    ),
    IntentRule(
        Intent.HELP,
        ("help", "what can you do", "capabilities", "commands"),
    ),
    IntentRule(
        Intent.TRANSACTION,
        ("spent", "paid", "bought", "received", "earned", "got", "purchase", "income", "salary"),
        pattern=DOLLAR_AMOUNT_PATTERN,
    ),
    IntentRule(
        Intent.INSIGHT,
        ("how am i doing", "spending patterns", "insights", "analysis"),
    ),
)


def classify_intent(message: str, context: Optional[AgentContext] = None) -> Intent:
    """
    Classify a raw chat message.

    `context` is accepted for callers that already hold one; the rules
    only look at the text.
    """
    for rule in INTENT_RULES:
        if rule.matches(message):
            return rule.intent
    return Intent.UNCLASSIFIED
