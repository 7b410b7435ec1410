"""Application settings and configuration.

This module defines all configuration options for the Oyster chat verifier.
Settings are loaded from environment variables with sensible defaults.
"""

import httpx
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Oyster Chat Verifier", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Enclave chat endpoint
    chat_api_url: str = Field(
        default="http://127.0.0.1:3000/api/chat-v2",
        alias="CHAT_API_URL",
    )
    chat_model: str = Field(default="qwen3:0.6b", alias="CHAT_MODEL")
    http_timeout_seconds: float = Field(default=120.0, alias="HTTP_TIMEOUT_SECONDS")

    # Response signing
    signature_header: str = Field(default="x-signature", alias="SIGNATURE_HEADER")

    # x402 network the payment-capable transport settles on (informational only)
    payment_network: str = Field(default="eip155:84532", alias="PAYMENT_NETWORK")

    # CORS configuration for the verification API
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def chat_path_and_query(self) -> str:
        """Return the path plus ``?query`` of the chat endpoint.

        This is the form the enclave signs: no scheme and no host.

        Returns:
            Path component of ``chat_api_url`` with its query string, if any
        """
        return path_and_query(self.chat_api_url)


def path_and_query(url: str) -> str:
    """Return ``/path?query`` for a URL exactly as httpx puts it on the wire.

    Non-ASCII characters and spaces are percent-encoded, which is the form
    the enclave receives and signs.
    """
    return httpx.URL(url).raw_path.decode("ascii")


settings = Settings()
