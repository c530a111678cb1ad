"""
The Advisor Service - Language Model Layer
Answers messages the rules could not classify. Builds one prompt from a
condensed view of the context, asks the model for a single JSON object and
validates it against AgentResponse. Any failure ends in a fixed
clarification question; nothing is raised to the caller.
"""

import asyncio
import json
import logging
from typing import Optional

from models import SUGGESTED_CATEGORIES, AgentContext, AgentResponse, AgentResponseType
from services.errors import ModelUnavailableError
from services.llm_client import TextGenerator


logger = logging.getLogger(__name__)


ADVISOR_CAPABILITIES = """You are an intelligent financial assistant agent with the following capabilities:
1. Process financial transactions from natural language
2. Provide comprehensive financial analysis including balance information
3. Monitor budgets and spending patterns
4. Ask clarifying questions when needed
5. Learn from user preferences and behavior
6. Provide detailed financial summaries and insights
7. Offer comprehensive help and guidance on all features"""

ADVISOR_RULES = """IMPORTANT RULES:
1. If the user is asking about balance, money, or financial overview, respond with type "balance"
2. If the user is clearly recording a transaction (spent, paid, received, bought, etc.), respond with type "transaction"
3. If the user asks for help or capabilities, respond with type "help"
4. If the user asks about spending patterns or insights, respond with type "insight"
5. Only extract transactions when the user is clearly stating they made a purchase or received money

RESPONSE FORMAT - Respond with ONLY a valid JSON object:
{
  "type": "transaction" | "question" | "insight" | "budget_alert" | "suggestion" | "balance" | "help",
  "transaction": {
    "description": "string",
    "amount": number,
    "category": "string",
    "type": "income" | "expense",
    "date": "YYYY-MM-DD"
  } (only if type is "transaction"),
  "message": "Your response message to the user",
  "suggestions": ["array of helpful suggestions"] (optional),
  "requires_clarification": boolean,
  "clarification_question": "string" (only if requires_clarification is true),
  "context": {} (optional metadata)
}

EXAMPLES:
- "What's my balance?" -> type: "balance"
- "I spent $50 on groceries" -> type: "transaction" with transaction data
- "How am I doing this month?" -> type: "insight"
- "What can you do?" -> type: "help"

"""

CATEGORY_LINE = "Valid categories: " + ", ".join(SUGGESTED_CATEGORIES)


def summarize_context(context: AgentContext) -> str:
    """Counts and dollar figures only, never raw records."""
    summary = context.financial_summary
    return "\n".join([
        f"Recent Transactions: {len(context.recent_transactions)} transactions",
        f"Current Balance: ${summary.current_balance:.2f}",
        f"Monthly Income: ${summary.monthly_income:.2f}",
        f"Monthly Expenses: ${summary.monthly_expenses:.2f}",
        f"Active Budgets: {len(context.budgets)}",
        f"Spending Patterns: {len(context.spending_patterns)} categories tracked",
        f"Unusual Spending: {len(context.unusual_spending)} anomalies detected",
    ])


def build_advisor_prompt(message: str, context: AgentContext) -> str:
    return f"""{ADVISOR_CAPABILITIES}

Context:
{summarize_context(context)}

User message: "{message}"

{ADVISOR_RULES}{CATEGORY_LINE}"""


def extract_json_object(text: str) -> str:
    """
    Return the first balanced {...} block in the model output, skipping any
    commentary around it. Braces inside JSON strings are ignored.
    """
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for index in range(start, len(text)):
            char = text[index]
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
                continue

            if char == '"':
                in_string = True
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return text[start:index + 1]
        # Unbalanced from this brace; try the next one.
        start = text.find("{", start + 1)

    raise ValueError("No JSON object found in model output")


def parse_agent_response(raw_text: str) -> AgentResponse:
    """Parse and schema-validate model output. Raises ValueError on any mismatch."""
    payload = json.loads(extract_json_object(raw_text.strip()))
    if not isinstance(payload, dict):
        raise ValueError("Model output is not a JSON object")
    return AgentResponse.model_validate(payload)


def get_fallback_response() -> AgentResponse:
    """Fixed reply when the model cannot be used."""
    return AgentResponse(
        type=AgentResponseType.QUESTION,
        message=(
            "I'm not sure I understand. Could you please rephrase your question? "
            "You can ask about your balance, record a transaction, or ask for help."
        ),
        suggestions=[
            "Try: 'What's my balance?'",
            "Try: 'I spent $X on [item]'",
            "Try: 'What can you do?'",
        ],
        requires_clarification=True,
        clarification_question="What would you like to know about your finances?",
        context={"type": "question", "source": "fallback"},
    )


async def ask_advisor(
    message: str,
    context: AgentContext,
    generator: Optional[TextGenerator],
    timeout: float,
) -> AgentResponse:
    """
    Resolve an unclassified message with the language model.

    Args:
        message: Raw user message
        context: Snapshot assembled for this request
        generator: Text generation backend (None means unavailable)
        timeout: Seconds to wait for the model

    Returns:
        AgentResponse: validated model answer, or the fixed clarification fallback
    """
    if generator is None:
        logger.warning("No language model configured; using fallback response")
        return get_fallback_response()

    prompt = build_advisor_prompt(message, context)

    try:
        raw_text = await asyncio.wait_for(generator.generate(prompt), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning("Language model timed out after %.1fs", timeout)
        return get_fallback_response()
    except ModelUnavailableError as e:
        logger.warning("Language model unavailable: %s", e)
        return get_fallback_response()
    except Exception as e:
        logger.exception("Unexpected language model failure: %s", e)
        return get_fallback_response()

    try:
        response = parse_agent_response(raw_text)
    except ValueError as e:
        logger.warning("Rejected model output: %s", e)
        logger.debug("Raw model output: %r", raw_text)
        return get_fallback_response()

    response.context["source"] = "model"
    return response
