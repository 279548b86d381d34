"""Plugin base class and context."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from searxng_plugin.tools.registry import ToolHost


@dataclass(slots=True)
class PluginContext:
    """Context passed to plugin lifecycle methods."""

    plugin_config: Mapping[str, Any] = field(default_factory=dict)


class ToolPlugin:
    """Base class for tool plugins.

    Subclass this and override `register_tools()` to add tools.
    Optionally override `on_startup()` / `on_shutdown()` for lifecycle hooks.
    """

    name: str = ""
    description: str = ""
    version: str = "0.1.0"

    def register_tools(self, host: ToolHost, ctx: PluginContext) -> None:
        """Register tools with the host. Override in subclasses."""

    def on_startup(self) -> None:
        """Called when the plugin is loaded."""

    def on_shutdown(self) -> None:
        """Called when the plugin is unloaded."""
