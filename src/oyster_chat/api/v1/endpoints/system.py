"""System and transparency endpoints for the verifier API."""

from __future__ import annotations

from fastapi import APIRouter

from oyster_chat.core.canonical import PROTOCOL_ID
from oyster_chat.core.settings import settings

router = APIRouter(prefix="/system", tags=["system", "transparency"])


@router.get("/config")
async def get_public_config() -> dict[str, object]:
    """Return a sanitized snapshot of public runtime configuration.

    Returns:
        Dictionary containing app metadata, the signing scheme and the chat
        endpoint the client talks to
    """
    return {
        "app": {
            "name": settings.app_name,
            "version": settings.app_version,
            "debug": settings.debug,
        },
        "signing": {
            "protocol": PROTOCOL_ID,
            "header": settings.signature_header,
            "hash": "keccak256",
            "curve": "secp256k1",
        },
        "chat": {
            "url": settings.chat_api_url,
            "path_and_query": settings.chat_path_and_query,
            "model": settings.chat_model,
            "payment_network": settings.payment_network,
        },
    }
