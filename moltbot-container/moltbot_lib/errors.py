"""Exceptions raised by the moltbot bootstrap.

Only LaunchError is fatal; the other errors are caught at their stage
boundary and turned into a degraded outcome.
"""


class BootstrapError(Exception):
    """Base class for bootstrap failures."""


class MountError(BootstrapError):
    """The bucket could not be mounted."""


class MigrationError(BootstrapError):
    """Local content could not be moved into the bucket intact."""


class LaunchError(BootstrapError):
    """The gateway process could not be exec'd."""
