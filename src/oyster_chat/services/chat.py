"""Chat client for the Oyster enclave chat endpoint."""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass

from oyster_chat.core.settings import path_and_query, settings
from oyster_chat.schemas.chat import ChatMessage, ChatRequestPayload, ChatTurnMessage
from oyster_chat.services.transport import HttpxTransport, Transport, TransportResponse
from oyster_chat.services.verification import (
    HttpExchange,
    Recovered,
    SignatureVerifier,
    VerificationOutcome,
)
from oyster_chat.utils.text import parse_assistant_text

logger = logging.getLogger(__name__)

CHAT_METHOD = "POST"
MILLISECONDS_PER_SECOND = 1000


class ChatRequestError(RuntimeError):
    """Raised when the chat endpoint answers with a non-success status."""

    def __init__(self, status_code: int, reason: str, body: str) -> None:
        super().__init__(f"HTTP {status_code}: {reason} - {body}")
        self.status_code = status_code
        self.reason = reason
        self.body = body


@dataclass(frozen=True)
class ChatTurn:
    """Result of one prompt/reply round trip."""

    user_message: ChatMessage
    assistant_message: ChatMessage
    response: TransportResponse
    verification: VerificationOutcome


def _message_id(role: str) -> str:
    return f"{role}-{int(time.time() * MILLISECONDS_PER_SECOND)}"


class ChatClient:
    """Send prompts to the enclave and attach recovered signer keys to replies."""

    def __init__(
        self,
        transport: Transport | None = None,
        verifier: SignatureVerifier | None = None,
        *,
        url: str | None = None,
        model: str | None = None,
    ) -> None:
        self.transport = transport or HttpxTransport()
        self.verifier = verifier or SignatureVerifier()
        self.url = url or settings.chat_api_url
        self.model = model or settings.chat_model

    def build_payload(self, messages: Sequence[ChatMessage]) -> ChatRequestPayload:
        return ChatRequestPayload(
            model=self.model,
            messages=[ChatTurnMessage(role=m.role, content=m.content) for m in messages],
            stream=False,
        )

    async def send(self, history: Sequence[ChatMessage], prompt: str) -> ChatTurn:
        """Send ``prompt`` after ``history`` and return the verified reply.

        Args:
            history: Earlier messages of the conversation
            prompt: New user prompt; surrounding whitespace is trimmed

        Returns:
            The user message, the assistant reply and the verification outcome

        Raises:
            ValueError: If the prompt is empty
            ChatRequestError: If the endpoint returns a non-success status
            TransportError: If the endpoint cannot be reached or demands payment
        """
        trimmed = prompt.strip()
        if not trimmed:
            raise ValueError("Prompt must not be empty")

        user_message = ChatMessage(id=_message_id("user"), role="user", content=trimmed)
        request_body = self.build_payload([*history, user_message]).to_bytes()

        response = await self.transport.send(
            CHAT_METHOD,
            self.url,
            request_body,
            {"Content-Type": "application/json"},
        )
        if not response.ok:
            raise ChatRequestError(response.status_code, response.reason_phrase, response.text)

        exchange = HttpExchange(
            method=CHAT_METHOD,
            path_and_query=path_and_query(self.url),
            request_body=request_body,
            response_body=response.body,
            response_headers=response.headers,
        )
        outcome = self.verifier.verify_exchange(exchange)
        pubkey: str | None = None
        if isinstance(outcome, Recovered):
            pubkey = outcome.public_key_hex
        else:
            logger.info("Reply from %s carries no recovered key (%s)", self.url, outcome.reason.value)

        assistant_message = ChatMessage(
            id=_message_id("assistant"),
            role="assistant",
            content=parse_assistant_text(response.text),
            signature=self.verifier.signature_from_headers(response.headers),
            pubkey=pubkey,
        )
        return ChatTurn(
            user_message=user_message,
            assistant_message=assistant_message,
            response=response,
            verification=outcome,
        )
