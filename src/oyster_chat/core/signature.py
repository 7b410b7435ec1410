"""Parsing of 65-byte recoverable secp256k1 signatures."""
from __future__ import annotations

import binascii
from dataclasses import dataclass

SIGNATURE_LENGTH_BYTES = 65
SCALAR_LENGTH_BYTES = 32
LEGACY_RECOVERY_OFFSET = 27
_ACCEPTED_V = frozenset({0, 1, 27, 28})


class SignatureError(ValueError):
    """Base exception for signatures that cannot yield a public key."""


class InvalidSignatureFormatError(SignatureError):
    """Raised when a signature is not 65 bytes of hex with a known recovery byte."""


class RecoveryFailedError(SignatureError):
    """Raised when signature components do not recover to a valid public key."""


@dataclass(frozen=True)
class RawSignature:
    """Components of a recoverable ECDSA signature.

    ``recovery_id`` is already normalized to 0 or 1.
    """

    r: bytes
    s: bytes
    recovery_id: int

    def to_bytes(self) -> bytes:
        """Return ``r || s || recovery_id``, the compact recoverable encoding."""
        return self.r + self.s + bytes([self.recovery_id])


def normalize_recovery_id(v: int) -> int:
    """Map a raw ``v`` byte to a recovery id.

    Both the Ethereum-style (27, 28) and raw (0, 1) encodings are accepted.

    Raises:
        InvalidSignatureFormatError: If ``v`` is any other value.
    """
    if v not in _ACCEPTED_V:
        raise InvalidSignatureFormatError(f"Unsupported recovery byte: {v}")
    return v - LEGACY_RECOVERY_OFFSET if v >= LEGACY_RECOVERY_OFFSET else v


def decode_signature_hex(signature_hex: str) -> bytes:
    """Decode a hex signature, accepting an optional ``0x``/``0X`` prefix."""
    cleaned = signature_hex.strip()
    if cleaned[:2] in ("0x", "0X"):
        cleaned = cleaned[2:]
    try:
        return binascii.unhexlify(cleaned)
    except (binascii.Error, ValueError) as err:
        raise InvalidSignatureFormatError(f"Invalid hex encoding: {err}") from err


def parse_signature(signature_hex: str) -> RawSignature:
    """Split a hex signature into ``r``, ``s`` and a normalized recovery id.

    Args:
        signature_hex: Hex string, optionally ``0x``-prefixed, of exactly 65 bytes.

    Returns:
        The parsed signature.

    Raises:
        InvalidSignatureFormatError: On bad hex, wrong length or unknown ``v``.
    """
    raw = decode_signature_hex(signature_hex)
    if len(raw) != SIGNATURE_LENGTH_BYTES:
        raise InvalidSignatureFormatError(
            f"Signature must be {SIGNATURE_LENGTH_BYTES} bytes, got {len(raw)}"
        )
    return RawSignature(
        r=raw[:SCALAR_LENGTH_BYTES],
        s=raw[SCALAR_LENGTH_BYTES : 2 * SCALAR_LENGTH_BYTES],
        recovery_id=normalize_recovery_id(raw[2 * SCALAR_LENGTH_BYTES]),
    )
