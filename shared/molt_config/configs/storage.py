"""
R2 object-storage configuration.

The bucket is mounted with tigrisfs, which reads the S3-style credentials
from AWS_ACCESS_KEY_ID / AWS_SECRET_ACCESS_KEY.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from ..base import BaseConfig, ValidationResult
from ..utils import get_env, load_environment
from ..validators import mask_secret


# Environment variables, all required together
STORAGE_ENV_VARS = ("AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY", "R2_ACCOUNT_ID", "R2_BUCKET_NAME")

_BUCKET_NAME_RE = re.compile(r"^[a-z0-9][a-z0-9-]{1,61}[a-z0-9]$")
_ACCOUNT_ID_RE = re.compile(r"^[0-9a-f]{32}$")


@dataclass
class StorageConfig(BaseConfig):
    """Credentials for the R2 bucket backing persistent state.

    Attributes:
        access_key_id: R2 access key ID
        secret_access_key: R2 secret access key
        account_id: Cloudflare account ID (used to build the endpoint)
        bucket_name: Name of the bucket to mount
    """

    access_key_id: str = ""
    secret_access_key: str = ""
    account_id: str = ""
    bucket_name: str = ""

    @property
    def is_configured(self) -> bool:
        """All four credentials are present."""
        return not self.missing()

    @property
    def endpoint(self) -> str:
        """S3-compatible endpoint for the account."""
        return f"https://{self.account_id}.r2.cloudflarestorage.com"

    def missing(self) -> list[str]:
        """Names of the environment variables that are not set."""
        values = (self.access_key_id, self.secret_access_key, self.account_id, self.bucket_name)
        return [name for name, value in zip(STORAGE_ENV_VARS, values, strict=True) if not value]

    def mount_environment(self) -> dict[str, str]:
        """Credential variables to pass to the mount tool."""
        return {
            "AWS_ACCESS_KEY_ID": self.access_key_id,
            "AWS_SECRET_ACCESS_KEY": self.secret_access_key,
        }

    def validate(self) -> ValidationResult:
        """Validate storage configuration."""
        errors: list[str] = []
        warnings: list[str] = []

        missing = self.missing()
        if missing:
            errors.append(f"missing credentials: {', '.join(missing)}")
            return ValidationResult.invalid(errors)

        if not _BUCKET_NAME_RE.match(self.bucket_name):
            errors.append(
                f"bucket_name '{self.bucket_name}' must be 3-63 lowercase letters, digits or hyphens"
            )

        if not _ACCOUNT_ID_RE.match(self.account_id):
            warnings.append("account_id does not look like a 32-character hex Cloudflare account ID")

        if errors:
            return ValidationResult.invalid(errors, warnings)

        return ValidationResult.valid(warnings)

    def to_dict(self) -> dict[str, Any]:
        """Return config with secrets masked."""
        return {
            "access_key_id": mask_secret(self.access_key_id),
            "secret_access_key": mask_secret(self.secret_access_key),
            "account_id": self.account_id,
            "bucket_name": self.bucket_name,
            "endpoint": self.endpoint if self.account_id else "",
        }

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "StorageConfig":
        """Load storage credentials from the environment."""
        env = load_environment() if env is None else env
        return cls(
            access_key_id=get_env(env, "AWS_ACCESS_KEY_ID") or "",
            secret_access_key=get_env(env, "AWS_SECRET_ACCESS_KEY") or "",
            account_id=get_env(env, "R2_ACCOUNT_ID") or "",
            bucket_name=get_env(env, "R2_BUCKET_NAME") or "",
        )
