"""Merge environment-derived settings into the gateway config document.

merge_config() is pure: it copies its input and applies the rules below in
order. Keys it does not manage are preserved, and applying it twice with the
same environment gives the same document.

1. Ensure agents.defaults.model, gateway and channels exist
2. Pin agents.defaults.model.primary
3. Drop a legacy models.providers.anthropic whose models lack names
4. Force gateway port, mode and trusted proxies
5. Set gateway.auth.token from CLAWDBOT_GATEWAY_TOKEN
6. Allow insecure control UI auth when CLAWDBOT_DEV_MODE=true
7. Enable each chat channel whose credentials are all present
8. Replace the anthropic provider when ANTHROPIC_BASE_URL is set
"""

import copy
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from molt_config.configs import CHANNEL_CONFIGS, AnthropicProviderConfig, ChannelConfig, GatewayConfig
from molt_config.configs.gateway import GATEWAY_MODE
from molt_config.validators import redact_secrets
from molt_logging import get_logger

from .config import DEFAULT_PRIMARY_MODEL, SERVICE_NAME
from .document import dump_document, load_document, write_document


logger = get_logger(SERVICE_NAME)


def ensure_section(node: dict[str, Any], *keys: str) -> dict[str, Any]:
    """Walk ``keys`` below ``node``, creating empty objects along the way.

    A value that is present but not an object is replaced by ``{}``.

    Returns:
        The innermost object
    """
    for key in keys:
        child = node.get(key)
        if not isinstance(child, dict):
            child = {}
            node[key] = child
        node = child
    return node


def has_legacy_anthropic_models(document: Mapping[str, Any]) -> bool:
    """Return True if models.providers.anthropic.models has an entry without a name."""
    node: Any = document
    for key in ("models", "providers", "anthropic", "models"):
        if not isinstance(node, Mapping):
            return False
        node = node.get(key)

    if not isinstance(node, list):
        return False

    return any(not isinstance(entry, Mapping) or not entry.get("name") for entry in node)


def remove_legacy_anthropic_provider(document: dict[str, Any]) -> bool:
    """Delete models.providers.anthropic if it has the legacy invalid shape.

    Returns:
        True if the provider entry was removed
    """
    if not has_legacy_anthropic_models(document):
        return False
    del document["models"]["providers"]["anthropic"]
    return True


def apply_gateway(document: dict[str, Any], gateway: GatewayConfig) -> None:
    """Force the gateway section and apply the optional token and dev mode."""
    section = ensure_section(document, "gateway")
    section["port"] = gateway.port
    section["mode"] = GATEWAY_MODE
    section["trustedProxies"] = list(gateway.trusted_proxies)

    if gateway.token:
        ensure_section(section, "auth")["token"] = gateway.token

    if gateway.dev_mode:
        ensure_section(section, "controlUi")["allowInsecureAuth"] = True


def apply_channel(document: dict[str, Any], channel: ChannelConfig) -> bool:
    """Enable a chat channel when its credentials are complete.

    An unconfigured channel leaves any existing block untouched; channels
    are never disabled by omission.

    Returns:
        True if the channel block was written
    """
    if not channel.is_configured:
        return False

    block = ensure_section(document, "channels", channel.channel)
    block.update(channel.credentials())
    block["enabled"] = True
    ensure_section(block, "dm")["policy"] = channel.dm_policy
    return True


def apply_anthropic_provider(document: dict[str, Any], provider: AnthropicProviderConfig) -> bool:
    """Replace models.providers.anthropic when a custom base URL is set.

    Returns:
        True if the provider block was written
    """
    if not provider.is_configured:
        return False

    ensure_section(document, "models", "providers")["anthropic"] = provider.provider_block()
    return True


def merge_config(
    document: Mapping[str, Any],
    env: Mapping[str, str],
    *,
    primary_model: str = DEFAULT_PRIMARY_MODEL,
) -> dict[str, Any]:
    """Merge environment settings into a copy of ``document``.

    Args:
        document: Existing config document (not modified)
        env: Environment mapping to read settings from
        primary_model: Model identifier pinned as the agents' default

    Returns:
        The merged document
    """
    merged: dict[str, Any] = copy.deepcopy(dict(document))

    ensure_section(merged, "agents", "defaults", "model")
    ensure_section(merged, "gateway")
    ensure_section(merged, "channels")

    merged["agents"]["defaults"]["model"]["primary"] = primary_model

    if remove_legacy_anthropic_provider(merged):
        logger.info("Removed broken anthropic provider config (missing model names)")

    apply_gateway(merged, GatewayConfig.from_env(env))

    for channel_cls in CHANNEL_CONFIGS:
        if apply_channel(merged, channel_cls.from_env(env)):
            logger.info("Channel configured", channel=channel_cls.channel)

    provider = AnthropicProviderConfig.from_env(env)
    if apply_anthropic_provider(merged, provider):
        logger.info("Configured custom Anthropic base URL", base_url=provider.base_url)

    return merged


def reconcile_config(config_file: Path, env: Mapping[str, str]) -> dict[str, Any]:
    """Load, merge and atomically rewrite the config document.

    Raises:
        OSError: If the merged document cannot be written
    """
    logger.info("Updating config", path=str(config_file))

    merged = merge_config(load_document(config_file), env)
    write_document(config_file, merged)

    logger.info("Configuration updated successfully")
    logger.debug("Config:\n" + dump_document(redact_secrets(merged)).rstrip())
    return merged
