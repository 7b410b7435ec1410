"""Schemas for the signature verification endpoint."""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class VerifyRequest(BaseModel):
    """A completed HTTP exchange submitted for signature recovery."""

    method: str = Field(..., min_length=1, description="HTTP method, e.g. POST")
    path_and_query: str = Field(..., description="Request path plus ?query, no host")
    request_body: str = Field("", description="Request body as sent")
    response_body: str = Field("", description="Response body as received")
    encoding: Literal["utf-8", "base64"] = Field(
        "utf-8", description="How request_body and response_body are encoded"
    )
    signature: str | None = Field(None, description="Value of the x-signature header")


class VerifyResponse(BaseModel):
    """Recovery result; verification failures are reported, not raised."""

    verified: bool
    reason: str | None = None
    detail: str | None = None
    public_key: str | None = Field(None, description="Recovered X || Y key as hex")
    message_hash: str = Field(..., description="Keccak-256 of the canonical message")
