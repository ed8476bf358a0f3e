# Area: Shared Tests
"""Tests for endpoint configuration."""

import os
from unittest.mock import patch
from urllib.parse import parse_qs, urlparse

import pytest

from gamelift_server._sdk_config import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    SDK_LANGUAGE,
    SDK_VERSION,
    EndpointConfig,
    validate_config,
)


class TestEndpointConfigDefaults:
    """Tests for default values."""

    def test_defaults(self):
        config = EndpointConfig()
        assert config.host == DEFAULT_HOST == "127.0.0.1"
        assert config.port == DEFAULT_PORT == 5757
        assert config.process_id == str(os.getpid())
        assert config.sdk_version == SDK_VERSION == "3.4.0"
        assert config.sdk_language == SDK_LANGUAGE

    def test_config_is_frozen(self):
        config = EndpointConfig()
        with pytest.raises(Exception):
            config.port = 1


class TestEndpointUrl:
    """Tests for the handshake URL."""

    def test_url_carries_handshake_query(self):
        """The agent identifies the process from the query string."""
        config = EndpointConfig(host="10.1.1.1", port=6000, process_id="77")
        parsed = urlparse(config.url)
        assert parsed.scheme == "http"
        assert parsed.netloc == "10.1.1.1:6000"
        assert parse_qs(parsed.query) == {
            "sdkVersion": ["3.4.0"],
            "sdkLanguage": [SDK_LANGUAGE],
            "pID": ["77"],
        }


class TestValidation:
    """Tests for config validation."""

    def test_invalid_port_raises_value_error(self):
        with pytest.raises(ValueError, match="Invalid endpoint configuration"):
            validate_config({"port": 70000})

    def test_empty_host_raises_value_error(self):
        with pytest.raises(ValueError):
            validate_config({"host": ""})

    def test_string_port_is_coerced(self):
        assert validate_config({"port": "5800"}).port == 5800


class TestFromEnv:
    """Tests for environment loading."""

    def test_reads_environment(self, tmp_path):
        env = {
            "GAMELIFT_SDK_HOST": "192.168.0.9",
            "GAMELIFT_SDK_PORT": "5999",
            "GAMELIFT_SDK_PROCESS_ID": "1234",
        }
        with patch.dict(os.environ, env, clear=False):
            config = EndpointConfig.from_env(dotenv_path=tmp_path / "missing.env")
        assert config.host == "192.168.0.9"
        assert config.port == 5999
        assert config.process_id == "1234"

    def test_overrides_win(self, tmp_path):
        with patch.dict(os.environ, {"GAMELIFT_SDK_PORT": "5999"}, clear=False):
            config = EndpointConfig.from_env(dotenv_path=tmp_path / "missing.env", port=6001)
        assert config.port == 6001

    def test_none_overrides_are_ignored(self, tmp_path):
        with patch.dict(os.environ, {"GAMELIFT_SDK_HOST": "agent.local"}, clear=False):
            config = EndpointConfig.from_env(dotenv_path=tmp_path / "missing.env", host=None)
        assert config.host == "agent.local"

    def test_reads_dotenv_file(self, tmp_path):
        dotenv = tmp_path / ".env"
        dotenv.write_text("GAMELIFT_SDK_PROCESS_ID=from-dotenv\n")
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("GAMELIFT_SDK_PROCESS_ID", None)
            config = EndpointConfig.from_env(dotenv_path=dotenv)
        assert config.process_id == "from-dotenv"

    def test_invalid_environment_raises(self, tmp_path):
        with patch.dict(os.environ, {"GAMELIFT_SDK_PORT": "not-a-port"}, clear=False):
            with pytest.raises(ValueError):
                EndpointConfig.from_env(dotenv_path=tmp_path / "missing.env")
