"""
Base classes and types for the configuration framework.

This module provides:
- ConfigStatus: Enum for validation states (VALID, INVALID)
- ValidationResult: Result of config validation with errors/warnings
- BaseConfig: Abstract base class for all settings classes
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ConfigStatus(Enum):
    """Status of configuration validation."""

    VALID = "valid"
    INVALID = "invalid"


@dataclass
class ValidationResult:
    """Result of validating a configuration.

    Attributes:
        status: Overall validation status
        errors: List of validation errors (config is invalid if non-empty)
        warnings: List of validation warnings (config may work but has issues)
    """

    status: ConfigStatus
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        """Return True if config is valid (no errors)."""
        return self.status == ConfigStatus.VALID

    @classmethod
    def valid(cls, warnings: list[str] | None = None) -> "ValidationResult":
        """Create a valid result with optional warnings."""
        return cls(status=ConfigStatus.VALID, warnings=warnings or [])

    @classmethod
    def invalid(cls, errors: list[str], warnings: list[str] | None = None) -> "ValidationResult":
        """Create an invalid result with errors."""
        return cls(status=ConfigStatus.INVALID, errors=errors, warnings=warnings or [])


class BaseConfig(ABC):
    """Abstract base class for environment-backed settings.

    Subclasses implement:
    - validate(): Check if the settings are usable
    - to_dict(): Return settings as dict with secrets masked
    - from_env(): Class method to load settings from an environment mapping
    """

    @abstractmethod
    def validate(self) -> ValidationResult:
        """Validate the configuration.

        Returns:
            ValidationResult with status, errors, and warnings
        """
        ...

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Return configuration as a dictionary with secrets masked."""
        ...

    @classmethod
    @abstractmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "BaseConfig":
        """Load configuration from an environment mapping.

        Args:
            env: Mapping to read from. Defaults to load_environment(), i.e.
                 the process environment layered over the baked env file.

        Returns:
            New instance of the config class
        """
        ...

    @property
    def is_configured(self) -> bool:
        """Return True if the settings carry everything their feature needs.

        Settings that are not configured are skipped by the bootstrap rather
        than treated as errors.
        """
        return True

    @property
    def service_name(self) -> str:
        """Return the name of the service this config is for.

        Default implementation returns the class name without 'Config' suffix.
        """
        name = self.__class__.__name__
        if name.endswith("Config"):
            name = name[:-6]
        return name.lower()
