"""HTTP transport used to reach the enclave chat endpoint.

The chat client only depends on the ``Transport`` protocol. A payment-capable
x402 transport (which attaches payment authorization and retries on HTTP 402)
is supplied by the caller; ``HttpxTransport`` is the plain implementation used
when no wallet is available.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol

import httpx

from oyster_chat.core.settings import settings

logger = logging.getLogger(__name__)

HTTP_PAYMENT_REQUIRED = 402


class TransportError(RuntimeError):
    """Base exception raised when the chat endpoint cannot be reached."""


class PaymentRequiredError(TransportError):
    """Raised when the endpoint demands payment and the transport cannot pay."""

    def __init__(self, message: str, *, payment_details: str | None = None) -> None:
        super().__init__(message)
        self.payment_details = payment_details


@dataclass(frozen=True)
class TransportResponse:
    """Final response returned by a transport."""

    status_code: int
    headers: Mapping[str, str]
    body: bytes
    reason_phrase: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


class Transport(Protocol):
    """Capability that delivers one request and returns the final response."""

    async def send(
        self,
        method: str,
        url: str,
        body: bytes,
        headers: Mapping[str, str],
    ) -> TransportResponse: ...


@dataclass
class HttpxTransport:
    """Plain httpx transport without payment support."""

    timeout_seconds: float = field(default_factory=lambda: settings.http_timeout_seconds)
    client: httpx.AsyncClient | None = None

    async def send(
        self,
        method: str,
        url: str,
        body: bytes,
        headers: Mapping[str, str],
    ) -> TransportResponse:
        """Send the request and return the response with its raw body.

        Raises:
            PaymentRequiredError: If the endpoint answers with HTTP 402
            TransportError: On network failures
        """
        start_time = time.time()
        try:
            if self.client is not None:
                response = await self.client.request(
                    method, url, content=body, headers=dict(headers)
                )
            else:
                async with httpx.AsyncClient(
                    timeout=httpx.Timeout(self.timeout_seconds)
                ) as client:
                    response = await client.request(
                        method, url, content=body, headers=dict(headers)
                    )
        except httpx.HTTPError as exc:
            logger.warning("Request to %s failed: %s", url, exc)
            raise TransportError(f"Request to {url} failed: {exc}") from exc

        logger.debug(
            "%s %s -> %d in %.3fs",
            method,
            url,
            response.status_code,
            time.time() - start_time,
        )

        if response.status_code == HTTP_PAYMENT_REQUIRED:
            raise PaymentRequiredError(
                "Payment required: connect a wallet-backed x402 transport to call this endpoint",
                payment_details=response.headers.get("payment-required") or response.text,
            )

        return TransportResponse(
            status_code=response.status_code,
            headers=response.headers,
            body=response.content,
            reason_phrase=response.reason_phrase,
        )
