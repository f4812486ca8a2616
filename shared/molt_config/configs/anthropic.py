"""
Anthropic model provider configuration.

Only used when ANTHROPIC_BASE_URL points the gateway at a custom endpoint
(for example a Cloudflare AI Gateway URL such as
https://gateway.ai.cloudflare.com/v1/{account_id}/{gateway_id}/anthropic).
Without it the gateway uses its built-in Anthropic provider.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from ..base import BaseConfig, ValidationResult
from ..utils import get_env, load_environment
from ..validators import mask_secret, validate_url


PROVIDER_API = "anthropic-messages"
CONTEXT_WINDOW = 200000

# (id, display name) of the models offered through a custom base URL
MODEL_CATALOG = (
    ("claude-sonnet-4-20250514", "Claude Sonnet 4"),
    ("claude-opus-4-5-20251101", "Claude Opus 4.5"),
    ("claude-haiku-3-5-20241022", "Claude Haiku 3.5"),
)


@dataclass
class AnthropicProviderConfig(BaseConfig):
    """Custom Anthropic endpoint settings.

    Attributes:
        base_url: Override for the Anthropic API base URL
        api_key: API key sent to the custom endpoint (optional)
    """

    base_url: str = ""
    api_key: str = ""

    @property
    def is_configured(self) -> bool:
        return bool(self.base_url)

    @property
    def service_name(self) -> str:
        return "anthropic"

    def provider_block(self) -> dict[str, Any]:
        """Build the ``models.providers.anthropic`` entry for the config document."""
        block: dict[str, Any] = {
            "baseUrl": self.base_url,
            "api": PROVIDER_API,
            "models": [
                {"id": model_id, "name": name, "contextWindow": CONTEXT_WINDOW}
                for model_id, name in MODEL_CATALOG
            ],
        }
        if self.api_key:
            block["apiKey"] = self.api_key
        return block

    def validate(self) -> ValidationResult:
        """Validate the provider override."""
        warnings: list[str] = []

        is_valid, error = validate_url(self.base_url, require_https=False)
        if not is_valid:
            return ValidationResult.invalid([f"base_url: {error}"])

        if not self.base_url.startswith("https://"):
            warnings.append("base_url does not use HTTPS")

        if not self.api_key:
            warnings.append("ANTHROPIC_API_KEY not set - a custom base URL usually requires one")

        return ValidationResult.valid(warnings)

    def to_dict(self) -> dict[str, Any]:
        """Return config with secrets masked."""
        return {
            "base_url": self.base_url,
            "api_key": mask_secret(self.api_key),
        }

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "AnthropicProviderConfig":
        env = load_environment() if env is None else env
        return cls(
            base_url=get_env(env, "ANTHROPIC_BASE_URL") or "",
            api_key=get_env(env, "ANTHROPIC_API_KEY") or "",
        )
