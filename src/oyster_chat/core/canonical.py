"""Canonical message layout for ``oyster-signature-v2`` response signatures.

The enclave signs a framed concatenation of the HTTP exchange. Verifiers must
rebuild the identical byte sequence before hashing:

    "oyster-signature-v2\\0"
    u32be(len(method))        || method (ASCII)
    u32be(len(path_and_query)) || path_and_query (UTF-8)
    u64be(len(request_body))  || request_body
    u64be(len(response_body)) || response_body

The u64 length fields only ever carry a 32-bit value: the upper word is always
written as zero. Bodies of 4 GiB or more therefore wrap, exactly as they do on
the signing side.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Final

PROTOCOL_ID: Final[str] = "oyster-signature-v2"
DOMAIN_PREFIX: Final[bytes] = PROTOCOL_ID.encode("ascii") + b"\x00"
SHORT_LENGTH_BYTES = 4
LONG_LENGTH_BYTES = 8
_U32_MASK = 0xFFFFFFFF


def _u32(length: int) -> bytes:
    return (length & _U32_MASK).to_bytes(SHORT_LENGTH_BYTES, "big", signed=False)


def _u64_low_word(length: int) -> bytes:
    return b"\x00\x00\x00\x00" + _u32(length)


def build_signing_message(
    method: str,
    path_and_query: str,
    request_body: bytes,
    response_body: bytes,
) -> bytes:
    """Build the exact byte sequence the enclave hashed and signed.

    Args:
        method: HTTP method, e.g. ``"POST"``.
        path_and_query: Request path plus ``?query`` if present, no scheme or host.
        request_body: Raw request body bytes as sent on the wire.
        response_body: Raw response body bytes as received.

    Returns:
        The canonical message bytes.

    Raises:
        ValueError: If ``method`` contains non-ASCII characters.
    """
    if not method.isascii():
        raise ValueError(f"HTTP method must be ASCII, got {method!r}")
    method_bytes = method.encode("ascii")
    path_bytes = path_and_query.encode("utf-8")

    out = bytearray()
    out.extend(DOMAIN_PREFIX)

    out.extend(_u32(len(method_bytes)))
    out.extend(method_bytes)

    out.extend(_u32(len(path_bytes)))
    out.extend(path_bytes)

    out.extend(_u64_low_word(len(request_body)))
    out.extend(request_body)

    out.extend(_u64_low_word(len(response_body)))
    out.extend(response_body)

    return bytes(out)


@dataclass(frozen=True)
class SigningContext:
    """The four logical fields of a signed exchange."""

    method: str
    path_and_query: str
    request_body: bytes
    response_body: bytes

    def canonical_bytes(self) -> bytes:
        return build_signing_message(
            self.method,
            self.path_and_query,
            self.request_body,
            self.response_body,
        )
