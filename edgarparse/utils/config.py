"""
Unified configuration management for edgarparse.

This module provides:
- Environment-aware configuration (development, staging, production, test)
- YAML config loading with environment-specific overlays
- Environment variable overrides
- Pydantic models for type-safe access

Usage:
    from edgarparse.utils.config import get_config

    config = get_config()
    rate = config.settings.sec_api.rate_limit_per_second
    is_prod = config.is_production
"""

import os
import re
from enum import Enum
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# =============================================================================
# Environment Definition
# =============================================================================

class Environment(Enum):
    """Environment types."""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TEST = "test"


# =============================================================================
# Pydantic Config Models (for type-safe access)
# =============================================================================

class SECApiConfig(BaseModel):
    """Configuration for SEC access."""
    base_url: str = Field(default="https://www.sec.gov")
    archives_url: str = Field(default="https://www.sec.gov/Archives/edgar")
    data_url: str = Field(default="https://data.sec.gov")
    rate_limit_per_second: float = Field(default=10.0)
    burst: int = Field(default=10)
    max_retries: int = Field(default=3)
    retry_delay_base: float = Field(default=2.0)
    user_agent: str = Field(default="edgarparse contact@example.com")
    timeout: int = Field(default=30)


class IndexConfig(BaseModel):
    """Configuration for full-text index parsing."""
    form_types: list[str] = Field(default=["10-K", "10-Q"])


class LoggingConfig(BaseModel):
    """Configuration for logging."""
    level: str = Field(default="INFO")
    log_path: Optional[str] = Field(default=None)
    max_log_files: int = Field(default=30)


class Settings(BaseModel):
    """Main settings container."""
    sec_api: SECApiConfig = Field(default_factory=SECApiConfig)
    index: IndexConfig = Field(default_factory=IndexConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class EnvSettings(BaseSettings):
    """Environment variable settings."""
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    sec_api_user_agent: Optional[str] = Field(default=None)
    edgar_env: str = Field(default="development")
    log_level: Optional[str] = Field(default=None)
    edgar_config_dir: Optional[str] = Field(default=None)


# =============================================================================
# Unified AppConfig Class
# =============================================================================

class AppConfig:
    """
    Unified configuration manager for edgarparse.

    Combines:
    - Environment-aware configuration
    - YAML config loading with environment overlays
    - Environment variable overrides
    - Type-safe Pydantic settings
    """

    def __init__(self, env: Optional[str] = None, config_dir: Optional[Path] = None):
        """
        Initialize unified configuration.

        Args:
            env: Environment name. Defaults to EDGAR_ENV or 'development'.
            config_dir: Directory holding settings YAML files.
                Defaults to <project root>/config.
        """
        self._env_settings = EnvSettings()

        self._env_name = env or os.getenv("EDGAR_ENV") or self._env_settings.edgar_env
        try:
            self._environment = Environment(self._env_name)
        except ValueError:
            self._environment = Environment.DEVELOPMENT

        if config_dir is None and self._env_settings.edgar_config_dir:
            config_dir = Path(self._env_settings.edgar_config_dir)
        self._config_dir = Path(config_dir) if config_dir else get_project_root() / "config"

        # Raw config dict (for dot-notation access)
        self._config: dict[str, Any] = {}

        self._load_config()
        self._settings = self._create_settings()

    def _load_config(self) -> None:
        """Load configuration files with environment overlay."""
        base_path = self._config_dir / "settings.yaml"
        if base_path.exists():
            with open(base_path) as f:
                self._config = yaml.safe_load(f) or {}

        env_path = self._config_dir / f"settings.{self._environment.value}.yaml"
        if env_path.exists():
            with open(env_path) as f:
                env_config = yaml.safe_load(f) or {}
            self._deep_merge(self._config, env_config)

        self._apply_env_overrides()

    def _deep_merge(self, base: dict, overlay: dict) -> None:
        """Deep merge overlay dict into base dict."""
        for key, value in overlay.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def _apply_env_overrides(self) -> None:
        """Apply environment variable overrides."""
        if log_level := os.getenv("EDGAR_LOG_LEVEL") or self._env_settings.log_level:
            self._set_nested("logging.level", log_level)

        if rate_limit := os.getenv("EDGAR_SEC_RATE_LIMIT"):
            self._set_nested("sec_api.rate_limit_per_second", float(rate_limit))

        if user_agent := self._env_settings.sec_api_user_agent:
            self._set_nested("sec_api.user_agent", user_agent)

    def _set_nested(self, path: str, value: Any) -> None:
        """Set nested dictionary value using dot notation."""
        keys = path.split(".")
        d = self._config
        for key in keys[:-1]:
            d = d.setdefault(key, {})
        d[keys[-1]] = value

    def _create_settings(self) -> Settings:
        """Create typed Settings object from config dict."""
        return Settings(**self._config)

    # -------------------------------------------------------------------------
    # Public Properties
    # -------------------------------------------------------------------------

    @property
    def environment(self) -> Environment:
        """Current environment."""
        return self._environment

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self._environment == Environment.PRODUCTION

    @property
    def is_test(self) -> bool:
        """Check if running in test."""
        return self._environment == Environment.TEST

    @property
    def config_dir(self) -> Path:
        """Directory the YAML settings were read from."""
        return self._config_dir

    @property
    def settings(self) -> Settings:
        """Get typed settings object."""
        return self._settings

    # -------------------------------------------------------------------------
    # Access Methods
    # -------------------------------------------------------------------------

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Args:
            key: Config key (e.g., 'sec_api.user_agent').
            default: Default value if not found.

        Returns:
            Configuration value.
        """
        keys = key.split(".")
        value = self._config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def get_sec_api_config(self) -> dict[str, Any]:
        """Get SEC API configuration dict."""
        return {
            "rate_limit": self._settings.sec_api.rate_limit_per_second,
            "burst": self._settings.sec_api.burst,
            "timeout": self._settings.sec_api.timeout,
            "max_retries": self._settings.sec_api.max_retries,
            "user_agent": self._settings.sec_api.user_agent,
        }

    def validate(self) -> list[str]:
        """
        Validate configuration.

        Returns:
            List of validation errors (empty if valid).
        """
        errors = []

        # SEC fair access policy caps clients at 10 requests per second
        rate_limit = self._settings.sec_api.rate_limit_per_second
        if rate_limit <= 0 or rate_limit > 10:
            errors.append(f"Invalid SEC rate limit: {rate_limit} (must be 0-10)")

        if self._settings.sec_api.burst < 1:
            errors.append(f"Invalid SEC burst size: {self._settings.sec_api.burst}")

        user_agent = self._settings.sec_api.user_agent
        if not re.search(r"\S+@\S+\.\S+", user_agent):
            errors.append(f"SEC User-Agent must include a contact e-mail: {user_agent!r}")

        if not self._settings.index.form_types:
            errors.append("At least one index form type must be retained")

        return errors


# =============================================================================
# Global Instances and Accessor Functions
# =============================================================================

_config: Optional[AppConfig] = None
_env_settings: Optional[EnvSettings] = None


def get_project_root() -> Path:
    """Get the project root directory."""
    current = Path(__file__).resolve()
    for parent in [current] + list(current.parents):
        if (parent / "config").exists() and (parent / "edgarparse").exists():
            return parent
    return Path.cwd()


def get_config(env: Optional[str] = None) -> AppConfig:
    """
    Get the unified configuration instance.

    This is the primary way to access configuration.

    Args:
        env: Optional environment override.

    Returns:
        AppConfig instance.
    """
    global _config
    if _config is None or env is not None:
        _config = AppConfig(env=env)
    return _config


def get_settings() -> Settings:
    """Get the current settings instance."""
    return get_config().settings


def get_env_settings() -> EnvSettings:
    """Get environment settings."""
    global _env_settings
    if _env_settings is None:
        _env_settings = EnvSettings()
    return _env_settings


def reset_config() -> None:
    """Drop cached configuration so the next access reloads it."""
    global _config, _env_settings
    _config = None
    _env_settings = None
