#!/usr/bin/env python3
"""Unit tests for NetBoxSettings."""
import pytest

from nbsync.api.exceptions import ConfigurationError
from nbsync.config import NetBoxSettings


@pytest.fixture
def env_vars(monkeypatch):
    """Set the required environment variables."""
    monkeypatch.setenv("NETBOX_URL", "https://netbox.example.com/")
    monkeypatch.setenv("NETBOX_API_TOKEN", "token123")
    for name in ("NETBOX_TIMEOUT", "NETBOX_VERIFY_SSL", "NETBOX_AUTO_CREATE_TAGS"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every NetBox variable."""
    for name in (
        "NETBOX_URL",
        "NETBOX_API_TOKEN",
        "NETBOX_TIMEOUT",
        "NETBOX_VERIFY_SSL",
        "NETBOX_AUTO_CREATE_TAGS",
    ):
        monkeypatch.delenv(name, raising=False)


class TestNetBoxSettings:
    """Test loading settings from the environment."""

    def test_from_env_defaults(self, env_vars):
        settings = NetBoxSettings.from_env()

        assert settings.url == "https://netbox.example.com"
        assert settings.token == "token123"
        assert settings.timeout == 60.0
        assert settings.verify_ssl is True
        assert settings.auto_create_tags is False

    def test_from_env_overrides(self, env_vars, monkeypatch):
        monkeypatch.setenv("NETBOX_TIMEOUT", "12.5")
        monkeypatch.setenv("NETBOX_VERIFY_SSL", "false")
        monkeypatch.setenv("NETBOX_AUTO_CREATE_TAGS", "yes")

        settings = NetBoxSettings.from_env()

        assert settings.timeout == 12.5
        assert settings.verify_ssl is False
        assert settings.auto_create_tags is True

    def test_explicit_values_win(self, env_vars):
        settings = NetBoxSettings.from_env(url="http://other", token="t")

        assert settings.url == "http://other"
        assert settings.token == "t"

    def test_missing_required(self, clean_env):
        with pytest.raises(ConfigurationError) as exc_info:
            NetBoxSettings.from_env()

        assert exc_info.value.missing_keys == ["NETBOX_URL", "NETBOX_API_TOKEN"]

    def test_invalid_timeout(self, env_vars, monkeypatch):
        monkeypatch.setenv("NETBOX_TIMEOUT", "soon")

        with pytest.raises(ConfigurationError, match="NETBOX_TIMEOUT"):
            NetBoxSettings.from_env()

    def test_non_positive_timeout(self, env_vars, monkeypatch):
        monkeypatch.setenv("NETBOX_TIMEOUT", "0")

        with pytest.raises(ConfigurationError):
            NetBoxSettings.from_env()
