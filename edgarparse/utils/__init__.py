"""Utility modules."""

from .config import (
    AppConfig,
    Environment,
    Settings,
    get_config,
    get_env_settings,
    get_project_root,
    get_settings,
    reset_config,
)
from .logger import get_logger, log_operation, setup_logging
from .rate_limiter import RateLimiter, get_rate_limiter

__all__ = [
    # Config
    "get_config",
    "AppConfig",
    "Environment",
    "Settings",
    "get_settings",
    "get_env_settings",
    "get_project_root",
    "reset_config",
    # Logging
    "setup_logging",
    "get_logger",
    "log_operation",
    # Rate limiting
    "RateLimiter",
    "get_rate_limiter",
]
