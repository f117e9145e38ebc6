# mdview/markdown/__init__.py

from .config import ParserOptions, PluginManagerConfig, build_parser, get_markdown_config
from .manager import PluginManager, create_plugin_manager
from .plugin import (
    MarkdownPlugin,
    PluginEvent,
    PluginFactory,
    PluginLoadResult,
    PluginMetadata,
    ThemeAware,
)
from .renderer import MarkdownRenderer, create_markdown_renderer

__all__ = [
    "MarkdownPlugin",
    "MarkdownRenderer",
    "ParserOptions",
    "PluginEvent",
    "PluginFactory",
    "PluginLoadResult",
    "PluginManager",
    "PluginManagerConfig",
    "PluginMetadata",
    "ThemeAware",
    "build_parser",
    "create_markdown_renderer",
    "create_plugin_manager",
    "get_markdown_config",
]
