"""
Canned replies for rule-classified messages: balance overview, help and
insights. Texts are plain markdown rendered by the chat UI.
"""

from typing import List, Tuple

from models import AgentResponse, AgentResponseType, FinancialSummary


def format_money(amount: float) -> str:
    """$1800.00, -$25.50"""
    if amount < 0:
        return f"-${abs(amount):.2f}"
    return f"${amount:.2f}"


# ==================== BALANCE ====================

def balance_response(summary: FinancialSummary) -> AgentResponse:
    if summary.current_balance > 0:
        health = "🟢 You have a positive balance!"
    else:
        health = "🔴 Your expenses exceed your income. Consider reviewing your spending."

    message = f"""Here's your financial overview:

💰 **Current Balance: {format_money(summary.current_balance)}**

📊 **Overall Summary:**
• Total Income: {format_money(summary.total_income)}
• Total Expenses: {format_money(summary.total_expenses)}

📅 **This Month:**
• Income: {format_money(summary.monthly_income)}
• Expenses: {format_money(summary.monthly_expenses)}
• Net: {format_money(summary.monthly_balance)}
• Transactions: {summary.transaction_count}

{health}"""

    return AgentResponse(
        type=AgentResponseType.BALANCE,
        message=message,
        requires_clarification=False,
        context={
            "type": "balance",
            "source": "rules",
            "balance": summary.current_balance,
        },
    )


# ==================== INSIGHTS ====================

NO_INSIGHTS_MESSAGE = (
    "No specific insights available at the moment. "
    "Keep tracking your expenses for better analysis!"
)


def insight_response(insights: List[str]) -> AgentResponse:
    return AgentResponse(
        type=AgentResponseType.INSIGHT,
        message="\n\n".join(insights) if insights else NO_INSIGHTS_MESSAGE,
        suggestions=[
            "Try asking 'What's my balance?' for financial overview",
            "Record more transactions for better insights",
            "Ask 'Should I set a budget?' for budget recommendations",
        ],
        requires_clarification=False,
        context={"type": "insight", "source": "rules", "count": len(insights)},
    )


# ==================== HELP ====================

GENERAL_HELP = """🤖 **AI Financial Assistant Capabilities**

I'm your financial companion. Here's what I can do:

**💰 Balance & Financial Overview:**
• "What's my balance?" - Get a full financial overview
• "How much money do I have?" - Current balance information

**📊 Transaction Management:**
• "I spent $25 on groceries" - Record expenses with automatic categories
• "Received $2000 salary" - Log income
• "Paid $120 for electricity bill" - Track bill payments

**📈 Financial Insights & Analysis:**
• "How am I doing this month?" - Monthly performance
• "What are my spending patterns?" - Spending habits
• "Show me insights" - Budget alerts and unusual spending

**🎯 Budget Management:**
• "Should I set a budget?" - Personalized budget recommendations
• "How are my budgets?" - Budget status and alerts

I understand natural language, so feel free to ask in your own words!"""

GENERAL_HELP_SUGGESTIONS = [
    "Try asking 'What's my balance?' to see your financial overview",
    "Say 'I spent $X on [item]' to record a transaction",
    "Ask 'How am I doing this month?' for insights",
    "Request 'Budget suggestions' for personalized recommendations",
]

TRANSACTION_HELP = """📝 **Recording Transactions**

I can record both income and expenses from plain sentences:

**Expense Examples:**
• "I spent $15 on lunch today"
• "Paid $120 for electricity bill"
• "Coffee $4.50"

**Income Examples:**
• "Received $2000 salary"
• "Got $50 cash gift from mom"
• "Freelance payment $800"

**What I detect automatically:**
• Amount (required)
• Category
• Type (income vs expense)
• Description

Transactions are always dated today."""

BALANCE_HELP = """💰 **Balance & Financial Overview**

**Balance Queries:**
• "What's my current balance?"
• "How much money do I have?"
• "Show my financial overview"

**What I show you:**
• Current balance (Total Income - Total Expenses)
• Total income and expenses (all time)
• This month's income, expenses and net
• Transaction count for the month"""

BUDGET_HELP = """🎯 **Budget Management & Spending Analysis**

**Budget Features:**
• Budget suggestions based on your spending patterns
• Alerts when a budget passes 75% and 90%
• Category-wise budget tracking

**Budget Queries:**
• "Should I set a budget?"
• "How are my budgets looking?"
• "Budget suggestions for me\""""

INSIGHT_HELP = """📈 **Financial Insights & Analysis**

**Spending Pattern Analysis:**
• Most frequent expense categories
• Average spending per category
• Spending frequency tracking

**Anomaly Detection:**
• Categories spending well above or below their usual monthly amount
• Budget deviation alerts

**Analysis Queries:**
• "What are my spending patterns?"
• "What insights do you have for me?\""""

# Topic keywords, checked in order. A help message naming a topic gets that
# topic's text instead of the general overview; only messages naming no
# topic fall through to GENERAL_HELP.
HELP_TOPICS: Tuple[Tuple[str, Tuple[str, ...], str, List[str]], ...] = (
    (
        "transactions",
        ("transaction", "record", "add"),
        TRANSACTION_HELP,
        [
            "Try: 'I spent $12 on lunch'",
            "Try: 'Received $1500 salary today'",
            "Try: 'Paid $80 for phone bill'",
        ],
    ),
    (
        "balance",
        ("balance", "money", "overview"),
        BALANCE_HELP,
        [
            "Ask: 'What's my current balance?'",
            "Try: 'How am I doing financially?'",
        ],
    ),
    (
        "budgets",
        ("budget", "spending", "limit"),
        BUDGET_HELP,
        [
            "Ask: 'Should I set a budget?'",
            "Say: 'What are my spending patterns?'",
        ],
    ),
    (
        "insights",
        ("insight", "analysis", "pattern"),
        INSIGHT_HELP,
        [
            "Ask: 'What are my spending patterns?'",
            "Try: 'Show me financial insights'",
        ],
    ),
)


def help_response(message: str) -> AgentResponse:
    """General capabilities, or topic help when the message names a topic."""
    message_lower = message.lower()

    for topic, keywords, text, suggestions in HELP_TOPICS:
        if any(keyword in message_lower for keyword in keywords):
            return AgentResponse(
                type=AgentResponseType.HELP,
                message=text,
                suggestions=list(suggestions),
                requires_clarification=False,
                context={"type": "help", "source": "rules", "category": topic},
            )

    return AgentResponse(
        type=AgentResponseType.HELP,
        message=GENERAL_HELP,
        suggestions=list(GENERAL_HELP_SUGGESTIONS),
        requires_clarification=False,
        context={"type": "help", "source": "rules", "category": "general"},
    )
