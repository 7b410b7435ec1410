# src/oyster_chat/services/__init__.py
"""Business logic services for the Oyster chat verifier."""

from .chat import ChatClient, ChatRequestError
from .crypto import CryptoService
from .transport import HttpxTransport, PaymentRequiredError, TransportError
from .verification import SignatureVerifier

__all__ = [
    "ChatClient",
    "ChatRequestError",
    "CryptoService",
    "HttpxTransport",
    "PaymentRequiredError",
    "SignatureVerifier",
    "TransportError",
]
