"""Configuration management for jobscout."""

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import load_config, parse_config, validate_config_file
from .models import (
    AdvancedConfig,
    AppConfig,
    CompanyConfig,
    ExpiryConfig,
    LogFormat,
    LogLevel,
    LoggingConfig,
)

__all__ = [
    "load_config",
    "parse_config",
    "validate_config_file",
    "load_environment_config",
    "AppConfig",
    "CompanyConfig",
    "ExpiryConfig",
    "LoggingConfig",
    "AdvancedConfig",
    "EnvironmentConfig",
    "LogLevel",
    "LogFormat",
    "ConfigurationError",
]
