# src/oyster_chat/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .system import router as system_router
from .verify import router as verify_router

__all__ = [
    "system_router",
    "verify_router",
]
