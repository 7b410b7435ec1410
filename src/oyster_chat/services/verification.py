"""Verification of signed enclave responses.

``SignatureVerifier`` drives canonicalization, signature parsing and key
recovery for one HTTP exchange. Verification problems are reported as an
``Unverified`` outcome and never raised: an unsigned or badly signed response
is still shown to the user, just without a recovered key.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

from oyster_chat.core.canonical import SigningContext
from oyster_chat.core.settings import settings
from oyster_chat.core.signature import (
    InvalidSignatureFormatError,
    RecoveryFailedError,
    parse_signature,
)
from oyster_chat.services.crypto import CryptoService
from oyster_chat.utils.hash import keccak256

logger = logging.getLogger(__name__)


class UnverifiedReason(Enum):
    """Why a response carries no recovered key."""

    NO_SIGNATURE_PRESENT = "no_signature_present"
    INVALID_SIGNATURE_FORMAT = "invalid_signature_format"
    RECOVERY_FAILED = "recovery_failed"


@dataclass(frozen=True)
class Recovered:
    """The signer's public key was recovered."""

    public_key: bytes
    signature: str
    message_hash: bytes

    @property
    def public_key_hex(self) -> str:
        return self.public_key.hex()


@dataclass(frozen=True)
class Unverified:
    """No key could be recovered for the response."""

    reason: UnverifiedReason
    detail: str | None = None
    signature: str | None = None


VerificationOutcome = Recovered | Unverified


@dataclass(frozen=True)
class HttpExchange:
    """A completed request/response pair as seen by the client."""

    method: str
    path_and_query: str
    request_body: bytes
    response_body: bytes
    response_headers: Mapping[str, str]


def find_header(headers: Mapping[str, str], name: str) -> str | None:
    """Return the value of ``name`` in ``headers``, matched case-insensitively."""
    # httpx.Headers and similar already match case-insensitively
    value = headers.get(name)
    if value is not None:
        return value
    wanted = name.lower()
    for key, candidate in headers.items():
        if key.lower() == wanted:
            return candidate
    return None


class SignatureVerifier:
    """Recover the enclave key that signed a response."""

    def __init__(self, header_name: str | None = None) -> None:
        self.header_name = header_name or settings.signature_header

    def signature_from_headers(self, headers: Mapping[str, str]) -> str | None:
        value = find_header(headers, self.header_name)
        if value is None or not value.strip():
            return None
        return value.strip()

    def verify(
        self,
        method: str,
        path_and_query: str,
        request_body: bytes,
        response_body: bytes,
        headers: Mapping[str, str],
    ) -> VerificationOutcome:
        """Verify a response signature and return the outcome.

        Args:
            method: HTTP method of the request
            path_and_query: Request path plus query string
            request_body: Request body bytes exactly as sent
            response_body: Response body bytes exactly as received
            headers: Response headers

        Returns:
            ``Recovered`` with the signer's key, or ``Unverified`` with a reason

        Raises:
            ValueError: If ``method`` is not ASCII
        """
        signature_hex = self.signature_from_headers(headers)
        if signature_hex is None:
            logger.debug("Response to %s %s is unsigned", method, path_and_query)
            return Unverified(UnverifiedReason.NO_SIGNATURE_PRESENT)

        return self.verify_signature(
            signature_hex, method, path_and_query, request_body, response_body
        )

    def verify_signature(
        self,
        signature_hex: str,
        method: str,
        path_and_query: str,
        request_body: bytes,
        response_body: bytes,
    ) -> VerificationOutcome:
        """Verify an already extracted signature value.

        Raises:
            ValueError: If ``method`` is not ASCII; no canonical message exists for it
        """
        message = SigningContext(method, path_and_query, request_body, response_body).canonical_bytes()

        try:
            signature = parse_signature(signature_hex)
        except InvalidSignatureFormatError as err:
            logger.warning("Rejected malformed response signature: %s", err)
            return Unverified(
                UnverifiedReason.INVALID_SIGNATURE_FORMAT,
                detail=str(err),
                signature=signature_hex,
            )

        message_hash = keccak256(message)
        try:
            public_key = CryptoService.recover_public_key_from_digest(message_hash, signature)
        except RecoveryFailedError as err:
            logger.warning("Failed to recover public key: %s", err)
            return Unverified(
                UnverifiedReason.RECOVERY_FAILED,
                detail=str(err),
                signature=signature_hex,
            )

        logger.debug(
            "Recovered signer %s for %s %s", public_key.hex(), method, path_and_query
        )
        return Recovered(public_key=public_key, signature=signature_hex, message_hash=message_hash)

    def verify_exchange(self, exchange: HttpExchange) -> VerificationOutcome:
        return self.verify(
            exchange.method,
            exchange.path_and_query,
            exchange.request_body,
            exchange.response_body,
            exchange.response_headers,
        )


def get_signature_verifier() -> SignatureVerifier:
    """Return a new verifier configured from settings."""
    return SignatureVerifier()
