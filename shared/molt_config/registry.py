"""
Configuration registry for the bootstrap's settings objects.

The registry provides:
- Registration of every settings object read for one run
- Bulk validation (validate_all)
- A masked dump of all settings (to_dict)
"""

from dataclasses import dataclass
from typing import Any

from .base import BaseConfig, ValidationResult


@dataclass
class AggregateValidationResult:
    """Aggregated validation results from all registered settings.

    Attributes:
        all_valid: True if all configs are valid
        results: Individual validation results by service name
    """

    all_valid: bool
    results: dict[str, ValidationResult]

    @property
    def warnings(self) -> list[str]:
        """All warnings, prefixed with their service name."""
        return [f"{name}: {w}" for name, r in self.results.items() for w in r.warnings]

    @property
    def errors(self) -> list[str]:
        """All errors, prefixed with their service name."""
        return [f"{name}: {e}" for name, r in self.results.items() for e in r.errors]


class ConfigRegistry:
    """Registry of settings objects.

    Usage:
        registry = ConfigRegistry()
        registry.register(StorageConfig.from_env(env))
        registry.register(SlackConfig.from_env(env))

        result = registry.validate_all()
        for warning in result.warnings:
            logger.warning(warning)
    """

    def __init__(self) -> None:
        self._configs: dict[str, BaseConfig] = {}

    @property
    def configs(self) -> dict[str, BaseConfig]:
        """Return a copy of all registered configs."""
        return dict(self._configs)

    def register(self, config: BaseConfig, name: str | None = None) -> None:
        """Register a configuration.

        Args:
            config: The config instance to register
            name: Optional name override (defaults to config.service_name)
        """
        self._configs[name or config.service_name] = config

    def get(self, name: str) -> BaseConfig | None:
        """Get a registered config by name."""
        return self._configs.get(name)

    def configured(self) -> list[str]:
        """Names of registered configs whose feature is enabled."""
        return [name for name, config in self._configs.items() if config.is_configured]

    def validate_all(self, *, configured_only: bool = True) -> AggregateValidationResult:
        """Validate registered configurations.

        Args:
            configured_only: Skip settings whose feature is not enabled, since
                             absent credentials are a fallback rather than an error

        Returns:
            AggregateValidationResult with individual results
        """
        results: dict[str, ValidationResult] = {}
        all_valid = True

        for name, config in self._configs.items():
            if configured_only and not config.is_configured:
                continue
            result = config.validate()
            results[name] = result
            if not result.is_valid:
                all_valid = False

        return AggregateValidationResult(all_valid=all_valid, results=results)

    def to_dict(self) -> dict[str, Any]:
        """Return all configs as a dictionary with secrets masked."""
        return {name: config.to_dict() for name, config in self._configs.items()}
