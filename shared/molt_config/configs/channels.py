"""
Chat channel configuration (Telegram, Discord, Slack).

Each channel is enabled only when all of its credentials are present;
partial credentials are treated as absent.
"""

from abc import abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, ClassVar

from ..base import BaseConfig, ValidationResult
from ..utils import get_env, load_environment
from ..validators import mask_secret, validate_slack_token, validate_telegram_token


DEFAULT_DM_POLICY = "pairing"
KNOWN_DM_POLICIES = ("pairing", "allowlist", "open", "disabled")


@dataclass
class ChannelConfig(BaseConfig):
    """Shared behaviour of chat channel settings.

    Subclasses set ``channel`` (the key under ``channels`` in the config
    document) and implement credentials().
    """

    channel: ClassVar[str] = ""

    dm_policy: str = DEFAULT_DM_POLICY

    @abstractmethod
    def credentials(self) -> dict[str, str]:
        """Config document fields holding this channel's credentials."""
        ...

    @property
    def is_configured(self) -> bool:
        return all(self.credentials().values())

    @property
    def service_name(self) -> str:
        return self.channel

    def _validate_dm_policy(self, warnings: list[str]) -> None:
        if self.dm_policy not in KNOWN_DM_POLICIES:
            warnings.append(
                f"dm policy '{self.dm_policy}' is not one of: {', '.join(KNOWN_DM_POLICIES)}"
            )

    def to_dict(self) -> dict[str, Any]:
        """Return config with secrets masked."""
        result: dict[str, Any] = {
            field: mask_secret(value) for field, value in self.credentials().items()
        }
        result["dm_policy"] = self.dm_policy
        result["enabled"] = self.is_configured
        return result


@dataclass
class TelegramConfig(ChannelConfig):
    """Telegram bot settings."""

    channel: ClassVar[str] = "telegram"

    bot_token: str = ""

    def credentials(self) -> dict[str, str]:
        return {"botToken": self.bot_token}

    def validate(self) -> ValidationResult:
        warnings: list[str] = []
        is_valid, error = validate_telegram_token(self.bot_token)
        if not is_valid:
            return ValidationResult.invalid([f"bot_token: {error}"])
        self._validate_dm_policy(warnings)
        return ValidationResult.valid(warnings)

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "TelegramConfig":
        env = load_environment() if env is None else env
        return cls(
            bot_token=get_env(env, "TELEGRAM_BOT_TOKEN") or "",
            dm_policy=get_env(env, "TELEGRAM_DM_POLICY") or DEFAULT_DM_POLICY,
        )


@dataclass
class DiscordConfig(ChannelConfig):
    """Discord bot settings."""

    channel: ClassVar[str] = "discord"

    token: str = ""

    def credentials(self) -> dict[str, str]:
        return {"token": self.token}

    def validate(self) -> ValidationResult:
        warnings: list[str] = []
        # Discord tokens are three dot-separated base64 segments
        if self.token.count(".") != 2:
            warnings.append("token does not look like a Discord bot token")
        self._validate_dm_policy(warnings)
        return ValidationResult.valid(warnings)

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "DiscordConfig":
        env = load_environment() if env is None else env
        return cls(
            token=get_env(env, "DISCORD_BOT_TOKEN") or "",
            dm_policy=get_env(env, "DISCORD_DM_POLICY") or DEFAULT_DM_POLICY,
        )


@dataclass
class SlackConfig(ChannelConfig):
    """Slack settings.

    Attributes:
        bot_token: Slack bot token (xoxb-...)
        app_token: Slack app-level token for Socket Mode (xapp-...)
    """

    channel: ClassVar[str] = "slack"

    bot_token: str = ""
    app_token: str = ""

    def credentials(self) -> dict[str, str]:
        return {"botToken": self.bot_token, "appToken": self.app_token}

    def validate(self) -> ValidationResult:
        """Validate Slack configuration."""
        errors: list[str] = []
        warnings: list[str] = []

        is_valid, error = validate_slack_token(self.bot_token, prefixes=("xoxb-",))
        if not is_valid:
            errors.append(f"bot_token: {error}")

        is_valid, error = validate_slack_token(self.app_token, prefixes=("xapp-",))
        if not is_valid:
            errors.append(f"app_token: {error}")

        self._validate_dm_policy(warnings)

        if errors:
            return ValidationResult.invalid(errors, warnings)

        return ValidationResult.valid(warnings)

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "SlackConfig":
        env = load_environment() if env is None else env
        return cls(
            bot_token=get_env(env, "SLACK_BOT_TOKEN") or "",
            app_token=get_env(env, "SLACK_APP_TOKEN") or "",
            dm_policy=get_env(env, "SLACK_DM_POLICY") or DEFAULT_DM_POLICY,
        )


CHANNEL_CONFIGS: tuple[type[ChannelConfig], ...] = (TelegramConfig, DiscordConfig, SlackConfig)
