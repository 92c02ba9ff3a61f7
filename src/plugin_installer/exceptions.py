"""Plugin installation exceptions.

Per IMPLEMENTATION_PHILOSOPHY: Clear, actionable error messages.
"""


class PluginError(Exception):
    """Base exception for plugin installation."""

    def __init__(self, message: str, context: dict | None = None):
        """Initialize with message and optional context.

        Args:
            message: Human-readable error message
            context: Optional dict with additional context (option names, sources, etc.)
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}


class ConflictingSourceError(PluginError):
    """Mutually exclusive plugin sources were given together."""


class InvalidOptionError(PluginError):
    """Malformed installation option combination."""


class ResolutionError(PluginError):
    """Requirements could not be resolved against the source list."""


class InstallError(PluginError):
    """A resolved plugin could not be fetched or unpacked."""
