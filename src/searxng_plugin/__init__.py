"""SearXNG web search plugin for agent tool hosts."""

__version__ = "0.1.0"
