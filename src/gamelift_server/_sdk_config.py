# Area: Shared
"""
gamelift_server._sdk_config — Endpoint configuration
=====================================================

Configuration validation and constants for GameLiftServer.

The endpoint can be given explicitly or loaded from the environment
(a ``.env`` file in the working directory is honoured):

    GAMELIFT_SDK_HOST=127.0.0.1
    GAMELIFT_SDK_PORT=5757
    GAMELIFT_SDK_PROCESS_ID=4242
"""

import logging
import os
from typing import Optional
from urllib.parse import urlencode

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger("gamelift_server.config")

SDK_VERSION = "3.4.0"
SDK_LANGUAGE = "Python"

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 5757

# Bound on connect and on every command round trip
DEFAULT_CONNECT_TIMEOUT_SECONDS = 5.0
DEFAULT_COMMAND_TIMEOUT_SECONDS = 5.0

# Vendor-mandated health report period
HEALTH_CHECK_INTERVAL_SECONDS = 15.0

DESCRIBE_PLAYER_SESSIONS_MAX_LIMIT = 1024

DEFAULT_CALLBACK_WORKERS = 4

# Environment variable → config field
ENV_MAPPINGS = {
    "GAMELIFT_SDK_HOST": "host",
    "GAMELIFT_SDK_PORT": "port",
    "GAMELIFT_SDK_PROCESS_ID": "process_id",
}


class EndpointConfig(BaseModel):
    """Where the agent listens and how this process identifies itself."""

    model_config = ConfigDict(frozen=True)

    host: str = Field(default=DEFAULT_HOST, min_length=1)
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    process_id: str = Field(default_factory=lambda: str(os.getpid()), min_length=1)
    sdk_version: str = SDK_VERSION
    sdk_language: str = SDK_LANGUAGE

    @property
    def url(self) -> str:
        """Agent URL including the handshake query string."""
        query = urlencode({
            "sdkVersion": self.sdk_version,
            "sdkLanguage": self.sdk_language,
            "pID": self.process_id,
        })
        return f"http://{self.host}:{self.port}?{query}"

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None, **overrides) -> "EndpointConfig":
        """
        Build a config from environment variables.

        Args:
            dotenv_path: Optional path to a .env file (default: search cwd)
            **overrides: Explicit values that win over the environment

        Raises:
            ValueError: If a value is missing or invalid
        """
        load_dotenv(dotenv_path)

        values = {}
        for env_key, field_name in ENV_MAPPINGS.items():
            if env_key in os.environ:
                values[field_name] = os.environ[env_key]
        values.update({k: v for k, v in overrides.items() if v is not None})
        return validate_config(values)


def validate_config(values: dict) -> EndpointConfig:
    """
    Validate raw configuration values.

    Args:
        values: Raw config dict (strings from the environment are coerced)

    Returns:
        The validated EndpointConfig

    Raises:
        ValueError: If a value is invalid
    """
    try:
        return EndpointConfig(**values)
    except ValidationError as e:
        raise ValueError(f"Invalid endpoint configuration: {e}") from e
