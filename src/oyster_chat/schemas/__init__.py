# src/oyster_chat/schemas/__init__.py
"""
Pydantic schemas for chat payloads and API request/response models.
"""

from .chat import ChatMessage, ChatRequestPayload, ChatTurnMessage
from .verify import VerifyRequest, VerifyResponse

__all__ = [
    "ChatMessage", "ChatRequestPayload", "ChatTurnMessage",
    "VerifyRequest", "VerifyResponse",
]
