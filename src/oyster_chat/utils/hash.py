# src/oyster_chat/utils/hash.py
"""Keccak-256 helpers.

This is the original Keccak padding used across EVM tooling, not NIST SHA3-256;
``hashlib.sha3_256`` produces different digests and must not be substituted.
"""

from __future__ import annotations

from Crypto.Hash import keccak

KECCAK256_DIGEST_BYTES = 32


def keccak256(data: bytes) -> bytes:
    """Return the 32-byte Keccak-256 digest of ``data``."""
    k = keccak.new(digest_bits=256)
    k.update(data)
    return k.digest()


def keccak256_hex(data: bytes) -> str:
    """Return the hexadecimal Keccak-256 digest of ``data``."""
    return keccak256(data).hex()
