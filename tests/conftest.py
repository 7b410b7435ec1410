# tests/conftest.py
from __future__ import annotations

from collections.abc import Callable, Iterator

import pytest
from coincurve import PrivateKey
from fastapi import FastAPI
from fastapi.testclient import TestClient

from oyster_chat.core.canonical import build_signing_message
from oyster_chat.main import app as fastapi_app
from oyster_chat.utils.hash import keccak256

SECP256K1_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
ENCLAVE_SECRET = bytes.fromhex(
    "4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
)

SignFn = Callable[..., str]


@pytest.fixture(scope="session")
def enclave_key() -> PrivateKey:
    """Fixed secp256k1 key standing in for the enclave signing key."""
    return PrivateKey(ENCLAVE_SECRET)


@pytest.fixture(scope="session")
def enclave_pubkey_hex(enclave_key: PrivateKey) -> str:
    """Expected X || Y public key hex, as a KMS derivation would report it."""
    return enclave_key.public_key.format(compressed=False)[1:].hex()


def flip_recovery_id(signature: bytes) -> bytes:
    """Return the equivalent signature ``(r, n - s)`` with the other recovery id."""
    r, s, v = signature[:32], int.from_bytes(signature[32:64], "big"), signature[64]
    return r + (SECP256K1_ORDER - s).to_bytes(32, "big") + bytes([v ^ 1])


@pytest.fixture(scope="session")
def sign_exchange(enclave_key: PrivateKey) -> SignFn:
    """Sign an exchange the way the enclave does and return the header value."""

    def _sign(
        method: str,
        path_and_query: str,
        request_body: bytes,
        response_body: bytes,
        *,
        recovery_id: int | None = None,
        v_offset: int = 0,
        prefix: str = "",
    ) -> str:
        message = build_signing_message(method, path_and_query, request_body, response_body)
        signature = enclave_key.sign_recoverable(keccak256(message), hasher=None)
        if recovery_id is not None and signature[64] != recovery_id:
            signature = flip_recovery_id(signature)
        signature = signature[:64] + bytes([signature[64] + v_offset])
        return prefix + signature.hex()

    return _sign


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client
