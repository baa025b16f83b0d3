"""
Centralized configuration with environment variable overrides.

Scheduling defaults, repository timeouts and retry settings live here.
Nothing is hardcoded in the availability or assignment logic.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

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


@dataclass(frozen=True)
class SchedulingConfig:
    """Slot and capacity defaults."""

    default_duration_hours: float = _safe_float("DEFAULT_DURATION_HOURS", "4")
    slot_step_minutes: int = _safe_int("SLOT_STEP_MINUTES", "60")
    default_units_required: int = _safe_int("DEFAULT_UNITS_REQUIRED", "1")


@dataclass(frozen=True)
class RepositoryConfig:
    """Timeouts and retry policy for the provider directory and booking store."""

    timeout_sec: float = _safe_float("REPOSITORY_TIMEOUT_SEC", "2.0")
    lock_timeout_sec: float = _safe_float("LOCK_TIMEOUT_SEC", "5.0")
    read_retry_attempts: int = _safe_int("READ_RETRY_ATTEMPTS", "3")
    read_retry_base_delay: float = _safe_float("READ_RETRY_BASE_DELAY", "0.05")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    scheduling: SchedulingConfig = field(default_factory=SchedulingConfig)
    repository: RepositoryConfig = field(default_factory=RepositoryConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    service_name: str = os.getenv("SERVICE_NAME", "shootbook-scheduler")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if config.scheduling.default_duration_hours <= 0:
        raise ValueError(
            "DEFAULT_DURATION_HOURS must be > 0, "
            f"got {config.scheduling.default_duration_hours}"
        )
    if not 1 <= config.scheduling.slot_step_minutes <= 24 * 60:
        raise ValueError(
            "SLOT_STEP_MINUTES must be between 1 and 1440, "
            f"got {config.scheduling.slot_step_minutes}"
        )
    if config.scheduling.default_units_required < 1:
        raise ValueError(
            "DEFAULT_UNITS_REQUIRED must be >= 1, "
            f"got {config.scheduling.default_units_required}"
        )
    if config.repository.timeout_sec <= 0:
        raise ValueError(
            f"REPOSITORY_TIMEOUT_SEC must be > 0, got {config.repository.timeout_sec}"
        )
    if config.repository.lock_timeout_sec <= 0:
        raise ValueError(
            f"LOCK_TIMEOUT_SEC must be > 0, got {config.repository.lock_timeout_sec}"
        )
    if config.repository.read_retry_attempts < 1:
        raise ValueError(
            f"READ_RETRY_ATTEMPTS must be >= 1, got {config.repository.read_retry_attempts}"
        )
    if config.repository.read_retry_base_delay < 0:
        raise ValueError(
            "READ_RETRY_BASE_DELAY must be >= 0, "
            f"got {config.repository.read_retry_base_delay}"
        )


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger.info("Configuration loaded for '%s'", config.service_name)
    return config


# Singleton instance
settings = load_config()
