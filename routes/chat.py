"""
Chat API routes.
Main interaction endpoint: every message goes through the finance agent,
and the reply is post-processed according to its response type.
"""

import json
import logging
from typing import Literal, Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException, Query

from models import (
    AgentResponse,
    AgentResponseType,
    ChatMessageCreate,
    ChatRequest,
    ChatResponse,
    RecordedTransaction,
    TransactionCreate,
)
from services import FinanceAgent, FinanceStore, GENERIC_FAILURE_MESSAGE, RetrievalError
from routes.dependencies import get_finance_agent, get_finance_store


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/chat", tags=["Chat"])

TRANSACTION_INSIGHT_COUNT = 2


async def record_transaction(
    response: AgentResponse,
    agent: FinanceAgent,
    store: FinanceStore,
) -> Tuple[str, RecordedTransaction]:
    """Save the extracted transaction and follow up with fresh insights."""
    extracted = response.transaction
    saved = await store.insert_transaction(TransactionCreate(
        description=extracted.description,
        amount=extracted.amount,
        category=extracted.category,
        type=extracted.type,
        date=extracted.date,
    ))
    logger.info("Recorded %s of %.2f in %s", saved.type.value, saved.amount, saved.category)

    message = response.message
    insights = await agent.generate_proactive_insights()
    if insights:
        message += "\n\n" + "\n\n".join(insights[:TRANSACTION_INSIGHT_COUNT])

    return message, RecordedTransaction(**saved.model_dump(exclude={"created_at"}))


async def post_process(
    response: AgentResponse,
    agent: FinanceAgent,
    store: FinanceStore,
) -> Tuple[str, Optional[RecordedTransaction]]:
    """Final reply text for a response, plus the saved transaction if any."""
    message = response.message

    if response.type == AgentResponseType.TRANSACTION:
        return await record_transaction(response, agent, store)

    if response.type == AgentResponseType.QUESTION:
        if response.requires_clarification and response.clarification_question:
            message = response.clarification_question

    elif response.type == AgentResponseType.INSIGHT:
        # Rule-based insight replies already list them
        if response.context.get("source") == "model":
            insights = await agent.generate_proactive_insights()
            if insights:
                message += "\n\n" + "\n\n".join(insights)

    elif response.type == AgentResponseType.BUDGET_ALERT:
        suggestions = await agent.suggest_budgets()
        if suggestions:
            lines = [
                f"• {s.category}: ${s.amount}/month - {s.reasoning}"
                for s in suggestions
            ]
            message += "\n\nBudget suggestions:\n" + "\n".join(lines)

    elif response.type == AgentResponseType.SUGGESTION:
        if response.suggestions:
            message += "\n\nSuggestions:\n" + "\n".join(f"• {s}" for s in response.suggestions)

    return message, None


@router.post("", response_model=ChatResponse)
async def process_chat_message(
    chat_request: ChatRequest,
    agent: FinanceAgent = Depends(get_finance_agent),
    store: FinanceStore = Depends(get_finance_store),
):
    """
    Process user chat message:
    1. Save user message to chat history
    2. Let the agent classify and answer it
    3. Post-process by response type (save transaction, append insights...)
    4. Save the assistant reply with its metadata
    """
    message = chat_request.message.strip()
    if not message:
        raise HTTPException(status_code=400, detail="Message is required")

    try:
        await store.save_chat_message(ChatMessageCreate(role="user", content=message))

        response = await agent.process_message(message)
        logger.info(
            "Agent answered with %s (source=%s)",
            response.type.value, response.context.get("source")
        )

        reply, recorded = await post_process(response, agent, store)

        await store.save_chat_message(ChatMessageCreate(
            role="assistant",
            content=reply,
            context=json.dumps(response.context, default=str),
        ))

        return ChatResponse(
            success=True,
            message=reply,
            agent_type=response.type.value,
            transaction=recorded,
            suggestions=response.suggestions,
            requires_clarification=response.requires_clarification,
            clarification_question=response.clarification_question,
        )

    except (HTTPException, RetrievalError):
        raise
    except Exception as e:
        logger.error("Chat processing failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=GENERIC_FAILURE_MESSAGE)


@router.get("/history")
async def get_chat_history(
    type: Optional[Literal["user", "assistant"]] = None,
    limit: int = Query(default=50, ge=1, le=500),
    store: FinanceStore = Depends(get_finance_store),
):
    """Chat history, newest first. `type=user` returns only user turns."""
    try:
        messages = await store.get_chat_messages(limit=limit, role=type)
        return {"messages": [m.model_dump(mode="json") for m in messages]}
    except Exception as e:
        logger.error("Error fetching chat history: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Error fetching chat history")
