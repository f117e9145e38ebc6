"""
Explicit ownership of the objects one viewer process shares.

Build a single :class:`ViewerContext` at startup and pass it to whatever needs
the renderer or the viewer. ``teardown()`` releases every plugin, so tests can
create and drop contexts freely:

    async with ViewerContext.create() as ctx:
        await ctx.viewer.render("# Hello")
"""

from __future__ import annotations

import logging
from typing import Sequence

from mdview.markdown.config import ParserOptions, PluginManagerConfig
from mdview.markdown.plugins import DEFAULT_ENABLED_PLUGINS
from mdview.markdown.renderer import MarkdownRenderer
from mdview.viewer import MarkdownViewer

logger = logging.getLogger(__name__)


class ViewerContext:
    def __init__(self, renderer: MarkdownRenderer, viewer: MarkdownViewer):
        self.renderer = renderer
        self.viewer = viewer
        self._closed = False

    @classmethod
    def create(
        cls,
        options: ParserOptions | None = None,
        config: PluginManagerConfig | None = None,
        plugins: Sequence[str] = DEFAULT_ENABLED_PLUGINS,
    ) -> "ViewerContext":
        renderer = MarkdownRenderer(options, config)
        return cls(renderer, MarkdownViewer(renderer, plugins=plugins))

    async def start(self) -> "ViewerContext":
        await self.viewer.initialize()
        return self

    async def teardown(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.viewer.clear()
        await self.renderer.dispose()
        logger.debug("Viewer context torn down")

    @property
    def closed(self) -> bool:
        return self._closed

    async def __aenter__(self) -> "ViewerContext":
        return await self.start()

    async def __aexit__(self, *exc_info) -> None:
        await self.teardown()
