"""Tests for the verification and system endpoints."""

import base64

from fastapi import status
from fastapi.testclient import TestClient

from oyster_chat.core.canonical import build_signing_message
from oyster_chat.utils.hash import keccak256_hex

REQUEST_BODY = '{"model":"m","messages":[],"stream":false}'
RESPONSE_BODY = "ok"


def _payload(**overrides) -> dict[str, object]:
    payload: dict[str, object] = {
        "method": "POST",
        "path_and_query": "/api/chat-v2",
        "request_body": REQUEST_BODY,
        "response_body": RESPONSE_BODY,
    }
    payload.update(overrides)
    return payload


def test_health(client: TestClient) -> None:
    r = client.get("/health")
    assert r.status_code == status.HTTP_200_OK
    assert r.json() == {"status": "ok"}


def test_root(client: TestClient) -> None:
    r = client.get("/")
    assert r.status_code == status.HTTP_200_OK
    assert r.json()["docs"] == "/docs"


def test_system_config(client: TestClient) -> None:
    r = client.get("/api/v1/system/config")
    assert r.status_code == status.HTTP_200_OK
    data = r.json()
    assert data["signing"]["protocol"] == "oyster-signature-v2"
    assert data["signing"]["header"] == "x-signature"
    assert "model" in data["chat"] and "path_and_query" in data["chat"]


def test_verify_recovers_key(client: TestClient, sign_exchange, enclave_pubkey_hex) -> None:
    signature = sign_exchange("POST", "/api/chat-v2", REQUEST_BODY.encode(), RESPONSE_BODY.encode())
    r = client.post("/api/v1/verify", json=_payload(signature=signature))

    assert r.status_code == status.HTTP_200_OK
    data = r.json()
    assert data["verified"] is True
    assert data["reason"] is None
    assert data["public_key"] == enclave_pubkey_hex
    expected_hash = keccak256_hex(
        build_signing_message("POST", "/api/chat-v2", REQUEST_BODY.encode(), RESPONSE_BODY.encode())
    )
    assert data["message_hash"] == expected_hash


def test_verify_without_signature(client: TestClient) -> None:
    r = client.post("/api/v1/verify", json=_payload())
    assert r.status_code == status.HTTP_200_OK
    data = r.json()
    assert data["verified"] is False
    assert data["reason"] == "no_signature_present"
    assert data["public_key"] is None


def test_verify_reports_invalid_format(client: TestClient) -> None:
    r = client.post("/api/v1/verify", json=_payload(signature="0x" + "ab" * 64))
    assert r.status_code == status.HTTP_200_OK
    data = r.json()
    assert data["verified"] is False
    assert data["reason"] == "invalid_signature_format"
    assert "65 bytes" in data["detail"]


def test_verify_reports_recovery_failure(client: TestClient) -> None:
    r = client.post("/api/v1/verify", json=_payload(signature="00" * 65))
    assert r.status_code == status.HTTP_200_OK
    assert r.json()["reason"] == "recovery_failed"


def test_verify_accepts_base64_bodies(client: TestClient, sign_exchange, enclave_pubkey_hex) -> None:
    response_bytes = b"\x00\xffbinary"
    signature = sign_exchange("PUT", "/upload?x=1", b"", response_bytes)
    r = client.post(
        "/api/v1/verify",
        json=_payload(
            method="PUT",
            path_and_query="/upload?x=1",
            request_body="",
            response_body=base64.b64encode(response_bytes).decode(),
            encoding="base64",
            signature=signature,
        ),
    )
    assert r.status_code == status.HTTP_200_OK
    assert r.json()["public_key"] == enclave_pubkey_hex


def test_verify_rejects_bad_base64(client: TestClient) -> None:
    r = client.post(
        "/api/v1/verify",
        json=_payload(encoding="base64", request_body="", response_body="not base64!"),
    )
    assert r.status_code == 422
    assert "response_body" in r.json()["detail"]


def test_verify_rejects_missing_fields(client: TestClient) -> None:
    r = client.post("/api/v1/verify", json={"method": "POST"})
    assert r.status_code == 422
