"""Exception hierarchy shared across apicheck components."""

from __future__ import annotations


class ApiCheckError(RuntimeError):
    """Base class for failures raised by apicheck."""


class UnsupportedConstructError(ApiCheckError):
    """Raised when a member kind or default value has no canonical rendering.

    The whole baseline generation aborts: a partial baseline would look like a
    complete one that happens to miss members.
    """


class ModuleFormatError(ApiCheckError):
    """Raised when a module description cannot be turned into metadata."""


class BaselineFormatError(ApiCheckError):
    """Raised when a stored baseline document cannot be parsed."""


class ConfigError(ApiCheckError):
    """Raised when the configuration file cannot be parsed."""


__all__ = [
    "ApiCheckError",
    "BaselineFormatError",
    "ConfigError",
    "ModuleFormatError",
    "UnsupportedConstructError",
]
