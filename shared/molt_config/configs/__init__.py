"""
Settings classes for the moltbot bootstrap.

Each class reads its slice of the environment and knows how to validate and
mask itself.
"""

from .anthropic import AnthropicProviderConfig
from .channels import (
    CHANNEL_CONFIGS,
    DEFAULT_DM_POLICY,
    ChannelConfig,
    DiscordConfig,
    SlackConfig,
    TelegramConfig,
)
from .gateway import GatewayConfig
from .storage import StorageConfig


__all__ = [
    "CHANNEL_CONFIGS",
    "DEFAULT_DM_POLICY",
    "AnthropicProviderConfig",
    "ChannelConfig",
    "DiscordConfig",
    "GatewayConfig",
    "SlackConfig",
    "StorageConfig",
    "TelegramConfig",
]
