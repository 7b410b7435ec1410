"""Signature verification endpoint."""

from __future__ import annotations

import base64
import binascii
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from oyster_chat.core.canonical import build_signing_message
from oyster_chat.schemas.verify import VerifyRequest, VerifyResponse
from oyster_chat.services.verification import (
    Recovered,
    SignatureVerifier,
    Unverified,
    UnverifiedReason,
    get_signature_verifier,
)
from oyster_chat.utils.hash import keccak256_hex

HTTP_UNPROCESSABLE = 422

router = APIRouter(prefix="/verify", tags=["verification"])

VerifierDep = Annotated[SignatureVerifier, Depends(get_signature_verifier)]


def _decode_body(field: str, data: str, encoding: str) -> bytes:
    if encoding == "utf-8":
        return data.encode("utf-8")
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as err:
        raise HTTPException(
            status_code=HTTP_UNPROCESSABLE,
            detail=f"Invalid base64 encoding for {field}",
        ) from err


@router.post("", response_model=VerifyResponse)
async def verify_exchange(payload: VerifyRequest, verifier: VerifierDep) -> VerifyResponse:
    """Recover the key that signed a response.

    Verification failures are part of the response body; the status stays 200.

    Args:
        payload: The exchange and its signature header value
        verifier: Signature verifier

    Returns:
        Recovery result with the Keccak-256 hash of the canonical message
    """
    if not payload.method.isascii():
        raise HTTPException(
            status_code=HTTP_UNPROCESSABLE,
            detail="HTTP method must be ASCII",
        )

    request_body = _decode_body("request_body", payload.request_body, payload.encoding)
    response_body = _decode_body("response_body", payload.response_body, payload.encoding)
    message_hash = keccak256_hex(
        build_signing_message(payload.method, payload.path_and_query, request_body, response_body)
    )

    signature = (payload.signature or "").strip()
    if signature:
        outcome = verifier.verify_signature(
            signature, payload.method, payload.path_and_query, request_body, response_body
        )
    else:
        outcome = Unverified(UnverifiedReason.NO_SIGNATURE_PRESENT)

    if isinstance(outcome, Recovered):
        return VerifyResponse(
            verified=True,
            public_key=outcome.public_key_hex,
            message_hash=message_hash,
        )
    return VerifyResponse(
        verified=False,
        reason=outcome.reason.value,
        detail=outcome.detail,
        message_hash=message_hash,
    )
