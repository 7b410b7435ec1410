# src/oyster_chat/services/crypto.py
"""Cryptographic services for response signature recovery."""

from __future__ import annotations

from coincurve import PrivateKey, PublicKey

from oyster_chat.core.signature import (
    RawSignature,
    RecoveryFailedError,
    parse_signature,
)
from oyster_chat.utils.hash import KECCAK256_DIGEST_BYTES, keccak256

UNCOMPRESSED_TAG = 0x04
RECOVERED_KEY_LENGTH_BYTES = 64


class CryptoService:
    """Service handling secp256k1 public key recovery."""

    @staticmethod
    def recover_public_key_from_digest(digest: bytes, signature: RawSignature) -> bytes:
        """Recover the signer's public key from a 32-byte message digest.

        Args:
            digest: Keccak-256 digest of the signed message
            signature: Parsed signature with a normalized recovery id

        Returns:
            64-byte X || Y of the uncompressed public key, ``0x04`` tag stripped

        Raises:
            RecoveryFailedError: If no valid curve point solves the recovery
        """
        if len(digest) != KECCAK256_DIGEST_BYTES:
            raise RecoveryFailedError(
                f"Message digest must be {KECCAK256_DIGEST_BYTES} bytes, got {len(digest)}"
            )
        try:
            public_key = PublicKey.from_signature_and_message(
                signature.to_bytes(), digest, hasher=None
            )
        except ValueError as err:
            raise RecoveryFailedError(f"Public key recovery failed: {err}") from err

        encoded = public_key.format(compressed=False)
        if len(encoded) != RECOVERED_KEY_LENGTH_BYTES + 1 or encoded[0] != UNCOMPRESSED_TAG:
            raise RecoveryFailedError("Recovered key is not an uncompressed secp256k1 point")
        return encoded[1:]

    @staticmethod
    def recover_public_key(message: bytes, signature: RawSignature) -> bytes:
        """Hash ``message`` with Keccak-256 and recover the signer's public key.

        Args:
            message: Canonical message bytes
            signature: Parsed signature with a normalized recovery id

        Returns:
            64-byte X || Y of the uncompressed public key
        """
        return CryptoService.recover_public_key_from_digest(keccak256(message), signature)

    @staticmethod
    def recover_public_key_hex(message: bytes, signature_hex: str) -> str:
        """Parse ``signature_hex`` and return the recovered key as 128 hex characters."""
        return CryptoService.recover_public_key(message, parse_signature(signature_hex)).hex()

    @staticmethod
    def public_key_for_secret(private_key_bytes: bytes) -> bytes:
        """Return the 64-byte X || Y public key for a raw 32-byte private key.

        Raises:
            ValueError: If the private key is out of range
        """
        try:
            private_key = PrivateKey(private_key_bytes)
        except ValueError as err:
            raise ValueError(f"Invalid private key: {err}") from err
        return private_key.public_key.format(compressed=False)[1:]


def keys_match(recovered_key: bytes | str, expected_key_hex: str) -> bool:
    """Compare a recovered key with a KMS-derived key hex-for-hex.

    Case and a leading ``0x`` are ignored. A 65-byte expected key carrying the
    ``04`` tag is also accepted.
    """
    recovered_hex = recovered_key.hex() if isinstance(recovered_key, bytes) else recovered_key
    recovered_hex = _strip_hex_prefix(recovered_hex).lower()
    expected_hex = _strip_hex_prefix(expected_key_hex.strip()).lower()
    if len(expected_hex) == 2 * (RECOVERED_KEY_LENGTH_BYTES + 1) and expected_hex.startswith("04"):
        expected_hex = expected_hex[2:]
    return bool(recovered_hex) and recovered_hex == expected_hex


def _strip_hex_prefix(value: str) -> str:
    return value[2:] if value[:2] in ("0x", "0X") else value
