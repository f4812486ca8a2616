"""
Configuration framework for the moltbot sandbox.

This module provides:
- BaseConfig: Abstract base class for environment-backed settings
- ValidationResult: Result of configuration validation
- ConfigRegistry: Registry for bulk validation and masked dumps
- load_environment: Process environment layered over the baked env file

Usage:
    from molt_config import ConfigRegistry, load_environment
    from molt_config.configs import StorageConfig

    env = load_environment()
    registry = ConfigRegistry()
    registry.register(StorageConfig.from_env(env))

    result = registry.validate_all()
    if not result.all_valid:
        print(result.errors)
"""

from .base import BaseConfig, ConfigStatus, ValidationResult
from .registry import AggregateValidationResult, ConfigRegistry
from .utils import DEFAULT_ENV_FILE, get_env, load_env_file, load_environment


__all__ = [
    "DEFAULT_ENV_FILE",
    "AggregateValidationResult",
    "BaseConfig",
    "ConfigRegistry",
    "ConfigStatus",
    "ValidationResult",
    "get_env",
    "load_env_file",
    "load_environment",
]
