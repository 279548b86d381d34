"""Plugin discovery and loading."""

from __future__ import annotations

import importlib
import logging
import pkgutil
import sys
from collections.abc import Mapping
from importlib.metadata import entry_points
from pathlib import Path
from types import ModuleType
from typing import TYPE_CHECKING, Any

from searxng_plugin.errors import ConfigError

if TYPE_CHECKING:
    from searxng_plugin.plugins.base import ToolPlugin
    from searxng_plugin.tools.registry import ToolHost

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "searxng_plugins"

_loaded_plugins: list[ToolPlugin] = []


def _plugin_classes(mod: ModuleType) -> list[type[ToolPlugin]]:
    from searxng_plugin.plugins.base import ToolPlugin

    return [
        attr
        for attr in vars(mod).values()
        if isinstance(attr, type) and issubclass(attr, ToolPlugin) and attr is not ToolPlugin
    ]


def discover_plugins(plugins_dir: Path | None = None) -> list[type[ToolPlugin]]:
    """Discover plugin classes from the builtin package and an optional external directory.

    Also discovers plugins registered via the `searxng_plugins` entry point group.
    """
    from searxng_plugin.plugins.base import ToolPlugin

    found: list[type[ToolPlugin]] = []

    # 1. Builtin plugins
    import searxng_plugin.plugins.builtin as builtin_pkg

    for _importer, modname, _ispkg in pkgutil.iter_modules(builtin_pkg.__path__):
        try:
            mod = importlib.import_module(f"searxng_plugin.plugins.builtin.{modname}")
        except Exception:
            logger.warning("Failed to load builtin plugin module: %s", modname, exc_info=True)
            continue
        found.extend(_plugin_classes(mod))

    # 2. External plugins directory
    if plugins_dir is not None and plugins_dir.is_dir():
        plugins_dir_str = str(plugins_dir)
        if plugins_dir_str not in sys.path:
            sys.path.insert(0, plugins_dir_str)
        for child in sorted(plugins_dir.iterdir()):
            if child.suffix != ".py" or child.name.startswith("_"):
                continue
            try:
                mod = importlib.import_module(child.stem)
            except Exception:
                logger.warning("Failed to load external plugin: %s", child.stem, exc_info=True)
                continue
            found.extend(_plugin_classes(mod))

    # 3. Entry points
    for ep in entry_points().select(group=ENTRY_POINT_GROUP):
        try:
            cls = ep.load()
        except Exception:
            logger.warning("Failed to load entry point plugin: %s", ep.name, exc_info=True)
            continue
        if isinstance(cls, type) and issubclass(cls, ToolPlugin) and cls not in found:
            found.append(cls)

    return found


def load_plugins(
    host: ToolHost,
    plugin_configs: Mapping[str, Mapping[str, Any]] | None = None,
    plugins_dir: Path | None = None,
) -> list[ToolPlugin]:
    """Discover, start and register plugins against `host`.

    `plugin_configs` maps plugin name to its configuration mapping.
    Configuration errors propagate; any other plugin failure is logged and skipped.
    """
    from searxng_plugin.plugins.base import PluginContext

    global _loaded_plugins
    configs = plugin_configs or {}
    plugins: list[ToolPlugin] = []
    for cls in discover_plugins(plugins_dir):
        try:
            instance = cls()
            instance.on_startup()
            ctx = PluginContext(plugin_config=configs.get(instance.name, {}))
            instance.register_tools(host, ctx)
        except ConfigError:
            raise
        except Exception:
            logger.warning("Failed to start plugin: %s", cls.__name__, exc_info=True)
            continue
        plugins.append(instance)
    _loaded_plugins = plugins
    return plugins


def shutdown_plugins() -> None:
    """Shut down all loaded plugins."""
    global _loaded_plugins
    for plugin in _loaded_plugins:
        try:
            plugin.on_shutdown()
        except Exception:
            logger.warning("Plugin shutdown failed: %s", plugin.name, exc_info=True)
    _loaded_plugins = []
