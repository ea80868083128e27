"""
Centralized configuration with environment variable overrides.

Salon branding, the chat provider credential, and HTTP server settings
are configurable here. Booking rules (business hours, slot stride) and
chat sampling parameters are fixed in their own modules.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

from salon_booking.logging_context import LOG_FORMAT, install_session_filter

load_dotenv()

logger = logging.getLogger(__name__)


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_float(env_var: str, default: str) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid float for {env_var}: {raw!r}"
        ) from None


def _csv(env_var: str, default: str) -> tuple[str, ...]:
    raw = os.getenv(env_var, default)
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class SalonConfig:
    """Salon branding shown in greetings and summaries."""

    name: str = os.getenv("SALON_NAME", "Glow Hair & Beauty")


@dataclass(frozen=True)
class ChatConfig:
    """Chat-completion provider settings.

    A missing API key is not a startup failure; every chat request
    falls back to a fixed apology instead.
    """

    api_key: Optional[str] = os.getenv("OPENAI_API_KEY") or None
    request_timeout_sec: float = _safe_float("CHAT_REQUEST_TIMEOUT", "30.0")


@dataclass(frozen=True)
class ServerConfig:
    """HTTP server binding, CORS, and in-memory session lifetime."""

    host: str = os.getenv("HOST", "127.0.0.1")
    port: int = _safe_int("PORT", "8000")
    cors_origins: tuple[str, ...] = _csv("CORS_ORIGINS", "http://localhost:3000")
    session_ttl_minutes: int = _safe_int("SESSION_TTL_MINUTES", "60")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    salon: SalonConfig = field(default_factory=SalonConfig)
    chat: ChatConfig = field(default_factory=ChatConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if not config.salon.name.strip():
        raise ValueError("SALON_NAME must not be empty")
    if config.chat.request_timeout_sec <= 0:
        raise ValueError(
            f"CHAT_REQUEST_TIMEOUT must be > 0, got {config.chat.request_timeout_sec}"
        )
    if not 1 <= config.server.port <= 65535:
        raise ValueError(f"PORT must be between 1 and 65535, got {config.server.port}")
    if config.server.session_ttl_minutes < 1:
        raise ValueError(
            f"SESSION_TTL_MINUTES must be >= 1, got {config.server.session_ttl_minutes}"
        )


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    # Records from plain module loggers need session_id for the format too.
    install_session_filter(logging.getLogger().handlers)
    if config.chat.api_key is None:
        logger.warning("OPENAI_API_KEY is not set; chat replies will use the fallback message")
    logger.info("Configuration loaded for '%s'", config.salon.name)
    return config


# Singleton instance
settings = load_config()
