"""Pydantic models for chat functionality."""

from pydantic import BaseModel, Field
from typing import Optional, Literal, List
from datetime import datetime

from .transaction import TransactionCreate


class ChatMessageCreate(BaseModel):
    """Schema for saving a chat message to database."""
    role: Literal["user", "assistant"] = Field(..., description="Who sent the message")
    content: str
    context: Optional[str] = Field(
        default=None,
        description="Serialized response metadata (JSON string)"
    )


class ChatMessage(ChatMessageCreate):
    """Schema for chat message from database."""
    id: int
    created_at: Optional[datetime] = None


class ChatRequest(BaseModel):
    """Incoming chat request from user."""
    message: str


class RecordedTransaction(TransactionCreate):
    """Transaction saved as a result of a chat message."""
    id: Optional[int] = None


class ChatResponse(BaseModel):
    """Response to user chat."""
    success: bool = True
    message: str
    agent_type: str
    transaction: Optional[RecordedTransaction] = None
    suggestions: Optional[List[str]] = None
    requires_clarification: bool = False
    clarification_question: Optional[str] = None
