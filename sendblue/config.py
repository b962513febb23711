"""
Sendblue client configuration.

Centralises the environment variable names and defaults used when
building a client from the environment rather than passing the
credential pair explicitly.

Uses ``pydantic_settings.BaseSettings`` for automatic environment
variable binding (including a local ``.env`` file), type coercion,
and validation.
"""

from __future__ import annotations

from typing import Literal

import pydantic
import pydantic_settings

LogLevel = Literal["debug", "info", "warn", "error"]


class SendblueSettings(pydantic_settings.BaseSettings):
    """Configuration for the Sendblue API client.

    Attributes:
        api_key_id: Public API key, sent as ``sb-api-key-id``.
        api_secret_key: Secret API key, sent as ``sb-api-secret-key``.
        log_level: Minimum level emitted by the client's loggers.
    """

    model_config = pydantic_settings.SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_key_id: str = pydantic.Field(
        default="", validation_alias="SENDBLUE_API_KEY_ID"
    )
    api_secret_key: pydantic.SecretStr = pydantic.Field(
        default=pydantic.SecretStr(""), validation_alias="SENDBLUE_API_SECRET_KEY"
    )
    log_level: LogLevel = pydantic.Field(
        default="warn", validation_alias="SENDBLUE_LOG_LEVEL"
    )

    @pydantic.field_validator("log_level", mode="before")
    @classmethod
    def _lowercase_level(cls, value: object) -> object:
        """Accept ``DEBUG``/``Warn`` style spellings."""
        return value.lower() if isinstance(value, str) else value

    def validate_config(self) -> bool:
        """Check if both credentials are present.

        Returns:
            True when the key id and the secret key are set.
        """
        return bool(self.api_key_id and self.api_secret_key.get_secret_value())


def missing_credentials_message() -> str:
    """Explain which variables must be set for ``Sendblue.from_env``."""
    return (
        "Sendblue is not configured. Please set SENDBLUE_API_KEY_ID and"
        " SENDBLUE_API_SECRET_KEY (in the environment or a .env file)."
    )
