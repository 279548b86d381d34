"""Built-in SearXNG plugin: resolves config once and registers `searxng_search`."""

from collections.abc import Mapping
from typing import Any

from searxng_plugin.config import resolve_tool_config
from searxng_plugin.plugins.base import PluginContext, ToolPlugin
from searxng_plugin.tools.registry import ToolHost
from searxng_plugin.tools.searxng_search import SearxngSearchTool


def register(host: ToolHost, plugin_config: Mapping[str, Any] | None = None) -> SearxngSearchTool:
    """Host entry point: register the search tool with `plugin_config` applied."""
    tool = SearxngSearchTool(resolve_tool_config(plugin_config))
    tool.register(host)
    return tool


class SearxngPlugin(ToolPlugin):
    name = "searxng"
    description = "Web search through a self-hosted SearXNG instance"
    version = "0.1.0"

    def __init__(self) -> None:
        self.tool: SearxngSearchTool | None = None

    def register_tools(self, host: ToolHost, ctx: PluginContext) -> None:
        self.tool = register(host, ctx.plugin_config)
