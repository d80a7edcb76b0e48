"""
Tests for configuration management in `healthitems/config.py`.

Covers:
- Environment parsing and debug defaults
- Logging level coercion to the expected Literal
- Serialization and parsing settings from the environment
- get_config cache behavior
- AppConfig validation (debug only allowed in development)
- configure_logging for both renderers
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest
import structlog

from healthitems.config import (
    AppConfig,
    LoggingConfig,
    SerializationConfig,
    configure_logging,
    get_config,
    load_config_from_env,
)

ENV_VARS = (
    "ENVIRONMENT",
    "LOG_LEVEL",
    "LOG_FORMAT",
    "XML_INDENT",
    "XML_DECLARATION",
    "XML_ENCODING",
    "XML_WRITE_TYPE_NAME",
    "UNKNOWN_ITEM_TYPES",
)


@pytest.fixture(autouse=True)
def clear_config_cache(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Start every test from a clean environment and an empty config cache."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_config.cache_clear()
    yield
    get_config.cache_clear()


def test_load_config_dev_defaults() -> None:
    config = load_config_from_env()

    assert config.environment == "development"
    assert config.debug is True
    assert config.logging.format == "console"
    assert config.logging.level == "INFO"
    assert config.serialization == SerializationConfig()
    assert config.parsing.unknown_types == "generic"


def test_environment_aliases(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "stage")
    config = load_config_from_env()
    assert config.environment == "staging"
    assert config.debug is False
    assert config.logging.format == "json"

    monkeypatch.setenv("ENVIRONMENT", "anything-else")
    assert load_config_from_env().environment == "production"


def test_logging_level_literal_coercion(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "staging")

    # Unknown level should coerce to INFO
    monkeypatch.setenv("LOG_LEVEL", "unknown")
    assert load_config_from_env().logging.level == "INFO"

    monkeypatch.setenv("LOG_LEVEL", "error")
    assert load_config_from_env().logging.level == "ERROR"


def test_log_format_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "production")
    monkeypatch.setenv("LOG_FORMAT", "Console")

    assert load_config_from_env().logging.format == "console"


def test_serialization_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("XML_INDENT", "2")
    monkeypatch.setenv("XML_DECLARATION", "yes")
    monkeypatch.setenv("XML_ENCODING", "utf-16")
    monkeypatch.setenv("XML_WRITE_TYPE_NAME", "false")

    settings = load_config_from_env().serialization

    assert settings.indent == 2
    assert settings.xml_declaration is True
    assert settings.encoding == "utf-16"
    assert settings.write_type_name is False


def test_negative_indent_fails_fast(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("XML_INDENT", "-1")

    with pytest.raises(ValueError):
        load_config_from_env()


def test_unknown_item_types(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("UNKNOWN_ITEM_TYPES", "ERROR")
    assert load_config_from_env().parsing.unknown_types == "error"

    monkeypatch.setenv("UNKNOWN_ITEM_TYPES", "ignore")
    assert load_config_from_env().parsing.unknown_types == "generic"


def test_get_config_cache() -> None:
    c1 = get_config()
    c2 = get_config()
    assert c1 is c2  # same object due to lru_cache


def test_app_config_debug_only_in_dev_validation() -> None:
    with pytest.raises(ValueError, match="debug mode is only allowed"):
        AppConfig(environment="production", debug=True)


@pytest.mark.parametrize("log_format", ["json", "console"])
def test_configure_logging(log_format: str) -> None:
    config = AppConfig(logging=LoggingConfig(level="DEBUG", format=log_format))

    configure_logging(config)

    assert structlog.is_configured()
    structlog.reset_defaults()
