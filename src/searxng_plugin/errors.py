"""Plugin exception hierarchy.

All plugin-specific exceptions inherit from PluginError,
enabling structured error handling and cleaner catch clauses.
"""


class PluginError(Exception):
    """Base exception for all plugin errors."""

    def __init__(self, message: str = "", *, retryable: bool = False) -> None:
        super().__init__(message)
        self.retryable = retryable


class ConfigError(PluginError):
    """Invalid or missing configuration."""


class ToolError(PluginError):
    """Error dispatching or executing a tool."""


class SearchRequestError(PluginError):
    """Search request could not be completed."""

    def __init__(self, message: str = "", *, retryable: bool = True) -> None:
        super().__init__(message, retryable=retryable)
