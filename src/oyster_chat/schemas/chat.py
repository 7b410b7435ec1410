"""Chat-related Pydantic schemas."""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

ChatRole = Literal["user", "assistant"]


class ChatMessage(BaseModel):
    """One entry of a chat transcript."""

    id: str = Field(..., description="Client-side message identifier")
    role: ChatRole
    content: str
    signature: str | None = Field(None, description="Raw x-signature header value")
    pubkey: str | None = Field(
        None, description="Recovered signer key (128 hex chars, X || Y)"
    )


class ChatTurnMessage(BaseModel):
    """Role/content pair as sent to the chat endpoint."""

    role: ChatRole
    content: str


class ChatRequestPayload(BaseModel):
    """Request body understood by the enclave chat endpoint."""

    model: str
    messages: list[ChatTurnMessage]
    stream: bool = False

    def to_bytes(self) -> bytes:
        """Serialize to compact JSON; these exact bytes are sent and verified."""
        return self.model_dump_json().encode("utf-8")
