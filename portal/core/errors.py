"""
Error types for the Portal core.

Only configuration and stage errors terminate the bootstrap sequence.
Attach failures and data-load failures are contained where they happen.
"""
from typing import Iterable, Optional


class PortalError(Exception):
    """Base class for all Portal errors."""
    pass


class ConfigurationError(PortalError):
    """Raised when required services are missing from the registry."""

    def __init__(self, missing: Iterable[str]):
        self.missing = list(missing)
        names = ", ".join(f"'{name}'" for name in self.missing)
        super().__init__(f"Required service {names} not found")


class BootstrapError(PortalError):
    """Wraps an unexpected exception raised by a bootstrap stage."""

    def __init__(self, stage: str, cause: Optional[BaseException] = None):
        self.stage = stage
        self.cause = cause
        message = f"Stage '{stage}' failed"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class LifecycleError(PortalError):
    """Exception raised for invalid lifecycle transitions."""
    pass
