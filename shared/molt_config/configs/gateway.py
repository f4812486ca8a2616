"""
Gateway configuration.

Covers the gateway process settings the bootstrap controls: the optional
static auth token, the dev-mode flag, the listen port and the bind mode.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from ..base import BaseConfig, ValidationResult
from ..utils import get_env, load_environment
from ..validators import mask_secret, validate_port


GATEWAY_PORT = 18789
GATEWAY_MODE = "local"
TRUSTED_PROXIES = ("10.1.0.0",)
BIND_MODE = "lan"


@dataclass
class GatewayConfig(BaseConfig):
    """Configuration for the gateway process.

    Attributes:
        token: Static auth token (empty means device pairing)
        dev_mode: Allow insecure auth on the control UI
        port: Port the gateway listens on
        bind_mode: Address class the gateway binds to
        trusted_proxies: Proxy addresses whose forwarded headers are trusted
    """

    token: str = ""
    dev_mode: bool = False
    port: int = GATEWAY_PORT
    bind_mode: str = BIND_MODE
    trusted_proxies: list[str] = field(default_factory=lambda: list(TRUSTED_PROXIES))

    @property
    def auth_method(self) -> str:
        """Return 'token' when a static token is set, otherwise 'pairing'."""
        return "token" if self.token else "pairing"

    def validate(self) -> ValidationResult:
        """Validate gateway configuration."""
        errors: list[str] = []
        warnings: list[str] = []

        is_valid, error = validate_port(self.port)
        if not is_valid:
            errors.append(f"port: {error}")

        if not self.token:
            warnings.append("CLAWDBOT_GATEWAY_TOKEN not set - clients must use device pairing")
        elif len(self.token) < 16:
            warnings.append("gateway token is shorter than recommended (16+ chars)")

        if self.dev_mode:
            warnings.append("dev mode enabled - control UI allows insecure auth")

        if errors:
            return ValidationResult.invalid(errors, warnings)

        return ValidationResult.valid(warnings)

    def to_dict(self) -> dict[str, Any]:
        """Return config with secrets masked."""
        return {
            "token": mask_secret(self.token),
            "auth_method": self.auth_method,
            "dev_mode": self.dev_mode,
            "port": self.port,
            "bind_mode": self.bind_mode,
            "trusted_proxies": list(self.trusted_proxies),
        }

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "GatewayConfig":
        """Load gateway settings from the environment.

        Dev mode is enabled only by the literal value "true".
        """
        env = load_environment() if env is None else env
        return cls(
            token=get_env(env, "CLAWDBOT_GATEWAY_TOKEN") or "",
            dev_mode=env.get("CLAWDBOT_DEV_MODE") == "true",
        )
