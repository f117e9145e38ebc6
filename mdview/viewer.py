"""
Viewer surface: shows rendered Markdown inside an HTML document.

The document is a BeautifulSoup tree with a ``<style id="plugin-styles">``
element for plugin CSS and an ``<article id="content">`` container for the
rendered Markdown. Each ``render`` replaces the container content, then runs
the plugin post-render hooks on it.
"""

from __future__ import annotations

import html
import logging
from dataclasses import dataclass, replace
from typing import Optional, Sequence

from bs4 import BeautifulSoup, Tag

from mdview.errors import PluginRenderError
from mdview.markdown.dom import insert_html
from mdview.markdown.plugin import PluginLoadResult, ThemeAware
from mdview.markdown.plugins import BUILTIN_PLUGINS, DEFAULT_ENABLED_PLUGINS, MERMAID
from mdview.markdown.renderer import MarkdownRenderer
from mdview.theme import ThemeMode, resolve_theme

logger = logging.getLogger(__name__)

VIEWER_TEMPLATE = """<!DOCTYPE html>
<html>
<head><meta charset="utf-8"/><style id="plugin-styles"></style></head>
<body><article class="markdown-body" id="content"></article></body>
</html>"""

RENDER_ERROR_TEMPLATE = (
    '<div class="render-error"><h3>Render Error</h3><p>{message}</p></div>'
)


@dataclass
class ViewerState:
    content: str = ""
    file_path: Optional[str] = None
    is_rendering: bool = False


class MarkdownViewer:
    def __init__(
        self,
        renderer: MarkdownRenderer,
        document: BeautifulSoup | None = None,
        plugins: Sequence[str] = DEFAULT_ENABLED_PLUGINS,
    ):
        self.renderer = renderer
        self.document = document or BeautifulSoup(VIEWER_TEMPLATE, "html.parser")
        container = self.document.find(id="content")
        if container is None:
            raise ValueError("viewer document has no element with id 'content'")
        self._container: Tag = container
        self._plugins = list(plugins)
        self._state = ViewerState()
        self._initialized = False
        self.theme = ThemeMode.LIGHT.value
        self.load_results: list[PluginLoadResult] = []
        self.render_errors: list[PluginRenderError] = []

    async def initialize(self) -> None:
        """Register the built-in plugins, enable the configured ones and inject their CSS."""
        if self._initialized:
            return

        manager = self.renderer.plugin_manager
        for plugin_id, factory in BUILTIN_PLUGINS.items():
            if not manager.has_plugin_factory(plugin_id):
                manager.register_plugin_factory(plugin_id, factory)

        self.load_results = await self.renderer.enable_plugins(self._plugins)
        for result in self.load_results:
            if not result.success:
                logger.warning(f"Plugin unavailable: {result.error.to_user_message()}")

        self._apply_plugin_styles()
        self._initialized = True

    def _apply_plugin_styles(self) -> None:
        style = self.document.find("style", id="plugin-styles")
        if style is not None:
            style.string = "\n".join(self.renderer.get_plugin_styles())

    async def render(self, markdown: str, file_path: str | None = None) -> None:
        if not self._initialized:
            await self.initialize()

        self._state.is_rendering = True
        self._state.content = markdown
        if file_path:
            self._state.file_path = file_path

        try:
            rendered = self.renderer.render(markdown)
            insert_html(self._container, rendered)
            self.render_errors = await self.renderer.post_render(self._container)
        except Exception as exc:
            logger.error(f"Render error: {exc}", exc_info=True)
            message = html.escape(str(exc) or "Unknown error")
            insert_html(self._container, RENDER_ERROR_TEMPLATE.format(message=message))
        finally:
            self._state.is_rendering = False

    async def set_theme(self, mode: ThemeMode | str, system_theme: ThemeMode | str = ThemeMode.LIGHT) -> None:
        """Switch theme-aware plugins to ``mode`` and re-render the current content."""
        self.theme = resolve_theme(mode, system_theme)

        plugin = self.renderer.get_plugin(MERMAID, ThemeAware)
        if plugin is not None:
            plugin.set_theme(self.theme)

        if self._state.content:
            await self.render(self._state.content, self._state.file_path)

    def clear(self) -> None:
        self._container.clear()
        self._state.content = ""
        self._state.file_path = None

    @property
    def state(self) -> ViewerState:
        return replace(self._state)

    @property
    def container(self) -> Tag:
        return self._container

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def to_html(self) -> str:
        return str(self.document)
