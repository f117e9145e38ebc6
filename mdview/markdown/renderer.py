# mdview/markdown/renderer.py

from __future__ import annotations

from typing import Iterable, Optional, Type, TypeVar

from bs4 import Tag

from mdview.errors import PluginRenderError

from .config import ParserOptions, PluginManagerConfig
from .manager import PluginManager
from .plugin import PluginFactory, PluginLoadResult

T = TypeVar("T")

DEFAULT_PARSER_OPTIONS = ParserOptions(html=True, linkify=True, typographer=True)


class MarkdownRenderer:
    """
    Markdown to HTML with plugins, for callers that do not need the manager.

    The parser configuration is fixed at construction. Plugins add rules to
    the parser but never change these base options.
    """

    def __init__(
        self,
        options: ParserOptions | None = None,
        config: PluginManagerConfig | None = None,
    ):
        self._options = options or DEFAULT_PARSER_OPTIONS
        self._manager = PluginManager(self._options, config)

    @property
    def options(self) -> ParserOptions:
        return self._options

    @property
    def plugin_manager(self) -> PluginManager:
        return self._manager

    def render(self, markdown: str) -> str:
        return self._manager.render(markdown)

    def register_plugin_factory(self, plugin_id: str, factory: PluginFactory) -> None:
        self._manager.register_plugin_factory(plugin_id, factory)

    async def enable_plugins(self, plugin_ids: Iterable[str]) -> list[PluginLoadResult]:
        return await self._manager.enable_plugins(plugin_ids)

    async def enable_plugin(self, plugin_id: str) -> PluginLoadResult:
        return await self._manager.enable_plugin(plugin_id)

    async def disable_plugin(self, plugin_id: str) -> bool:
        return await self._manager.disable_plugin(plugin_id)

    def get_plugin_styles(self) -> list[str]:
        return self._manager.get_plugin_styles()

    def get_plugin(self, plugin_id: str, kind: Optional[Type[T]] = None) -> Optional[T]:
        return self._manager.get_plugin(plugin_id, kind)

    async def post_render(self, container: Tag) -> list[PluginRenderError]:
        return await self._manager.post_render(container)

    async def dispose(self) -> None:
        await self._manager.dispose()


def create_markdown_renderer(
    html: bool = True,
    linkify: bool = True,
    typographer: bool = True,
    config: PluginManagerConfig | None = None,
) -> MarkdownRenderer:
    options = ParserOptions(html=html, linkify=linkify, typographer=typographer)
    return MarkdownRenderer(options, config)
