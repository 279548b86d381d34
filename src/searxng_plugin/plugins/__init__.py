"""Plugin SDK for exposing tools to an agent host."""

from searxng_plugin.plugins.base import PluginContext, ToolPlugin
from searxng_plugin.plugins.loader import discover_plugins, load_plugins

__all__ = ["PluginContext", "ToolPlugin", "discover_plugins", "load_plugins"]
