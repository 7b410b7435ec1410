# src/oyster_chat/main.py
"""Main entry point for the verification API."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from oyster_chat.api.v1 import system_router, verify_router
from oyster_chat.core.log import configure_logging
from oyster_chat.core.settings import settings

configure_logging(settings.log_level)

# Initialize FastAPI app
app = FastAPI(
    title="Oyster Chat Verifier API",
    description="Recover the enclave key behind oyster-signature-v2 response signatures",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Include API routers
app.include_router(verify_router, prefix="/api/v1")
app.include_router(system_router, prefix="/api/v1")


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "description": "oyster-signature-v2 public key recovery",
        "docs": "/docs",
        "redoc": "/redoc"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("oyster_chat.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
