"""Exceptions raised by the plugin system."""


class PluginError(Exception):
    """Base exception for plugin-related errors."""

    pass


class PluginLoadError(PluginError):
    """Raised when a plugin manifest is missing, unresolvable or malformed."""

    pass


class ParameterError(PluginError):
    """Raised when command-line input fails validation before a handler runs."""

    pass


class HandlerResolutionError(PluginError):
    """Raised when a command's handler reference cannot be resolved to a callable."""

    pass


class HandlerContractError(PluginError):
    """Raised when a handler breaks the structured output contract."""

    pass
