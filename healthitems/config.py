"""
Configuration management with environment variable support and validation.

Design principles:
- Environment-specific defaults (development, staging, production)
- Validation at load time (fail fast)
- Type safety with Pydantic
- One cached configuration per process, cleared explicitly in tests
"""

import logging
import os
import sys
from functools import lru_cache
from typing import Literal, cast

import structlog
from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator

# Load environment variables from .env file
load_dotenv()

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(default="INFO", description="Logging level")
    format: Literal["json", "console"] = Field(default="json", description="Logging format")


class SerializationConfig(BaseModel):
    """How things are written back to XML text."""

    indent: int | None = Field(
        default=None, ge=0, description="Spaces per nesting level, None for compact output"
    )
    xml_declaration: bool = Field(default=False, description="Prefix an XML declaration")
    encoding: str = Field(default="utf-8", min_length=1, description="Declared encoding")
    write_type_name: bool = Field(
        default=True, description="Write the type name attribute on <type-id>"
    )


class ParsingConfig(BaseModel):
    """How things are read from XML text."""

    unknown_types: Literal["generic", "error"] = Field(
        default="generic",
        description="Keep unregistered type ids as UnknownItem, or raise",
    )


class AppConfig(BaseModel):
    """Main application configuration combining all subsystems."""

    environment: Literal["development", "staging", "production"] = Field(
        default="development", description="Environment"
    )
    debug: bool = Field(default=False, description="Enable debug mode")

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    serialization: SerializationConfig = Field(default_factory=SerializationConfig)
    parsing: ParsingConfig = Field(default_factory=ParsingConfig)

    @model_validator(mode="after")
    def debug_only_in_dev(self) -> "AppConfig":
        """Ensure debug mode is only allowed in development environment."""
        if self.debug and self.environment != "development":
            raise ValueError("debug mode is only allowed in development environment")
        return self


def load_config_from_env() -> AppConfig:
    """Load configuration from environment variables with validation."""

    def _env_to_literal(val: str) -> Literal["development", "staging", "production"]:
        v = val.strip().lower()
        if v in {"dev", "development"}:
            return "development"
        if v in {"stage", "staging"}:
            return "staging"
        return "production"

    def _level_to_literal(val: str) -> LogLevel:
        v = val.strip().upper()
        return cast(LogLevel, v if v in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"} else "INFO")

    def _parse_bool(val: str | None, default: bool) -> bool:
        if val is None:
            return default
        return val.strip().lower() in {"1", "true", "yes", "on"}

    def _parse_indent(val: str | None) -> int | None:
        if val is None or not val.strip():
            return None
        return int(val)

    # Detect environment
    environment = _env_to_literal(os.getenv("ENVIRONMENT", "development"))
    debug = environment == "development"

    log_format = os.getenv("LOG_FORMAT", "").strip().lower()
    logging_config = LoggingConfig(
        level=_level_to_literal(os.getenv("LOG_LEVEL", "INFO")),
        format=cast(
            Literal["json", "console"],
            log_format if log_format in {"json", "console"} else ("console" if debug else "json"),
        ),
    )

    serialization_config = SerializationConfig(
        indent=_parse_indent(os.getenv("XML_INDENT")),
        xml_declaration=_parse_bool(os.getenv("XML_DECLARATION"), False),
        encoding=os.getenv("XML_ENCODING", "utf-8"),
        write_type_name=_parse_bool(os.getenv("XML_WRITE_TYPE_NAME"), True),
    )

    unknown_types = os.getenv("UNKNOWN_ITEM_TYPES", "generic").strip().lower()
    parsing_config = ParsingConfig(
        unknown_types=cast(
            Literal["generic", "error"], "error" if unknown_types == "error" else "generic"
        ),
    )

    return AppConfig(
        environment=environment,
        debug=debug,
        logging=logging_config,
        serialization=serialization_config,
        parsing=parsing_config,
    )


@lru_cache
def get_config() -> AppConfig:
    """Get cached application configuration."""
    return load_config_from_env()


def configure_logging(config: AppConfig | None = None) -> None:
    """Install the structlog processor chain for the configured format."""
    config = config or get_config()
    level = getattr(logging, config.logging.level)
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level, force=True)

    renderer: structlog.types.Processor
    if config.logging.format == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
