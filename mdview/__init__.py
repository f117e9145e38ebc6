"""Markdown viewer core: plugin-driven Markdown to HTML rendering."""

import logging

from .context import ViewerContext
from .markdown import (
    MarkdownPlugin,
    MarkdownRenderer,
    ParserOptions,
    PluginManager,
    PluginManagerConfig,
    PluginMetadata,
    create_markdown_renderer,
)
from .viewer import MarkdownViewer

__version__ = "0.1.0"


def configure_logging(level=logging.INFO):
    """Send mdview log records to stderr. Libraries embedding mdview should configure logging themselves."""
    logger = logging.getLogger("mdview")
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(handler)
    logger.setLevel(level)
    return logger


__all__ = [
    "MarkdownPlugin",
    "MarkdownRenderer",
    "MarkdownViewer",
    "ParserOptions",
    "PluginManager",
    "PluginManagerConfig",
    "PluginMetadata",
    "ViewerContext",
    "configure_logging",
    "create_markdown_renderer",
]
