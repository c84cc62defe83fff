"""Messaging models."""

from typing import Optional
from pydantic import BaseModel, Field

from idrhub.models.user import User


class Message(BaseModel):
    id: str
    conversation_id: str
    sender_id: str
    recipient_id: str
    content: str = ""
    read: bool = False
    property_id: Optional[str] = None
    created_at: Optional[str] = None
    sender: Optional[User] = None
    recipient: Optional[User] = None


class Conversation(BaseModel):
    """Messages grouped by conversation, newest message first."""
    id: str = Field(..., description="Conversation ID")
    participant: Optional[User] = Field(None, description="The other party")
    last_message: Message
    unread_count: int = 0
    property_id: Optional[str] = None
