# mdview/markdown/manager.py
"""
Plugin manager: owns the parser and the ordered set of enabled plugins.

Lifecycle of a plugin id:

1. ``register_plugin_factory(id, factory)`` stores how to build it.
2. ``enable_plugins([...])`` builds a fresh instance, awaits ``initialize``,
   then calls ``apply(md)`` on the shared parser. Ids are processed strictly
   in order, so each ``apply`` sees the parser as left by every earlier
   plugin. A failing plugin is reported in the result list and skipped.
3. ``render(markdown)`` runs the extended parser; ``post_render(container)``
   runs each plugin's DOM hook, one after another, after the caller inserted
   the HTML.
4. ``disable_plugin(id)`` / ``dispose()`` await ``destroy``.

Parser rules are additive: disabling a plugin removes its hooks and styles
but not the grammar it registered, which stays until the manager is dropped.

The manager is not reentrant. Callers must not run ``enable_plugins`` or
``disable_plugin`` concurrently.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Mapping, Optional, Type, TypeVar

from bs4 import Tag

from mdview.errors import (
    PluginAlreadyRegisteredError,
    PluginError,
    PluginInitError,
    PluginLoadError,
    PluginNotFoundError,
    PluginRenderError,
)

from .config import ParserOptions, PluginManagerConfig, build_parser
from .plugin import (
    MarkdownPlugin,
    PluginEvent,
    PluginFactory,
    PluginListener,
    PluginLoadResult,
    PluginMetadata,
    maybe_await,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PluginManager:
    def __init__(
        self,
        options: ParserOptions | None = None,
        config: PluginManagerConfig | None = None,
    ):
        self._options = options or ParserOptions()
        config = config or PluginManagerConfig()
        # Own copy: set_plugin_options never writes into the caller's config
        self._config = PluginManagerConfig(
            enabled_plugins=list(config.enabled_plugins),
            plugin_options={key: dict(value) for key, value in config.plugin_options.items()},
        )
        self._factories: dict[str, PluginFactory] = {}
        self._plugins: dict[str, MarkdownPlugin] = {}
        self._listeners: list[PluginListener] = []
        self._md = build_parser(self._options)

    # Registry

    def register_plugin_factory(self, plugin_id: str, factory: PluginFactory) -> None:
        if plugin_id in self._factories:
            raise PluginAlreadyRegisteredError(plugin_id)
        self._factories[plugin_id] = factory
        logger.debug(f"Registered plugin factory '{plugin_id}'")

    def has_plugin_factory(self, plugin_id: str) -> bool:
        return plugin_id in self._factories

    @property
    def registered_plugins(self) -> list[str]:
        return list(self._factories)

    def set_plugin_options(self, plugin_id: str, options: Mapping[str, Any]) -> None:
        """Options passed to the factory the next time ``plugin_id`` is enabled."""
        self._config.plugin_options[plugin_id] = dict(options)

    # Events

    def subscribe(self, listener: PluginListener) -> Callable[[], None]:
        """Call ``listener`` whenever a plugin joins or leaves the enabled set."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, plugin_id: str, plugin: MarkdownPlugin, action: str) -> None:
        event = PluginEvent(plugin_id, plugin.metadata, action)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.error(
                    f"Plugin event listener failed for '{event.plugin_id}' ({action})",
                    exc_info=True,
                )

    # Lifecycle

    async def enable_plugins(self, plugin_ids: Iterable[str]) -> list[PluginLoadResult]:
        """
        Enable ``plugin_ids`` in order and report one result per id.

        Unknown ids, failing factories, failing ``initialize`` and failing
        ``apply`` are reported as unsuccessful results; the remaining ids are
        still processed.
        """
        results: list[PluginLoadResult] = []
        for plugin_id in plugin_ids:
            try:
                await self._enable(plugin_id)
            except PluginError as exc:
                logger.warning(f"Plugin '{plugin_id}' was not enabled: {exc}")
                results.append(PluginLoadResult(False, plugin_id, exc))
            else:
                results.append(PluginLoadResult(True, plugin_id))
        return results

    async def enable_plugin(self, plugin_id: str) -> PluginLoadResult:
        """Enable a single plugin. Raises ``PluginNotFoundError`` for unknown ids."""
        if plugin_id not in self._factories:
            raise PluginNotFoundError(plugin_id)
        (result,) = await self.enable_plugins([plugin_id])
        return result

    async def enable_configured_plugins(self) -> list[PluginLoadResult]:
        return await self.enable_plugins(list(self._config.enabled_plugins))

    async def _enable(self, plugin_id: str) -> None:
        factory = self._factories.get(plugin_id)
        if factory is None:
            raise PluginNotFoundError(plugin_id)

        options = self._config.plugin_options.get(plugin_id)
        try:
            plugin = factory(options) if options is not None else factory()
        except Exception as exc:
            raise PluginLoadError(plugin_id, f"factory failed: {exc}") from exc

        if plugin.initialize is not None:
            try:
                await maybe_await(plugin.initialize())
            except Exception as exc:
                await self._destroy(plugin_id, plugin)
                raise PluginInitError(plugin_id, str(exc)) from exc

        try:
            plugin.apply(self._md)
        except Exception as exc:
            await self._destroy(plugin_id, plugin)
            raise PluginLoadError(plugin_id, str(exc)) from exc
        logger.debug(f"Applied plugin '{plugin_id}' to parser")

        previous = self._plugins.pop(plugin_id, None)
        if previous is not None:
            logger.debug(f"Plugin '{plugin_id}' superseded by a new instance")
            await self._destroy(plugin_id, previous)
            self._emit(plugin_id, previous, "unregistered")

        self._plugins[plugin_id] = plugin
        logger.info(f"Enabled plugin '{plugin_id}' ({plugin.metadata.version})")
        self._emit(plugin_id, plugin, "registered")

    async def disable_plugin(self, plugin_id: str) -> bool:
        plugin = self._plugins.pop(plugin_id, None)
        if plugin is None:
            return False
        await self._destroy(plugin_id, plugin)
        logger.info(f"Disabled plugin '{plugin_id}'")
        self._emit(plugin_id, plugin, "unregistered")
        return True

    async def dispose(self) -> None:
        """Destroy every enabled plugin, most recently enabled first."""
        for plugin_id in reversed(list(self._plugins)):
            await self.disable_plugin(plugin_id)

    async def _destroy(self, plugin_id: str, plugin: MarkdownPlugin) -> None:
        if plugin.destroy is None:
            return
        try:
            await maybe_await(plugin.destroy())
        except Exception:
            logger.error(f"Error destroying plugin '{plugin_id}'", exc_info=True)

    # Queries

    def get_plugin(self, plugin_id: str, kind: Optional[Type[T]] = None) -> Optional[T]:
        """
        Return the enabled instance for ``plugin_id``.

        When ``kind`` is given (a plugin class or a runtime-checkable protocol
        such as ``ThemeAware``), instances lacking that capability give ``None``.
        """
        plugin = self._plugins.get(plugin_id)
        if plugin is None:
            return None
        if kind is not None and not isinstance(plugin, kind):
            return None
        return plugin  # type: ignore[return-value]

    @property
    def enabled_plugins(self) -> list[str]:
        return list(self._plugins)

    def get_plugin_metadata(self) -> list[PluginMetadata]:
        return [plugin.metadata for plugin in self._plugins.values()]

    def get_plugin_styles(self) -> list[str]:
        styles: list[str] = []
        for plugin_id, plugin in self._plugins.items():
            if plugin.get_styles is None:
                continue
            try:
                provided = plugin.get_styles()
            except Exception:
                logger.error(f"Plugin '{plugin_id}' failed to provide styles", exc_info=True)
                continue
            if isinstance(provided, str):
                styles.append(provided)
            else:
                styles.extend(provided)
        return styles

    # Rendering

    def render(self, markdown: str) -> str:
        html = self._md.reset().convert(markdown)
        logger.debug(f"Rendered {len(markdown)} chars of markdown to {len(html)} chars of HTML")
        return html

    async def post_render(self, container: Tag) -> list[PluginRenderError]:
        """
        Run the DOM hooks of enabled plugins on ``container``, one at a time.

        Must be called after the HTML from ``render`` was inserted into
        ``container``. A failing hook is logged and reported in the returned
        list; later hooks still run.
        """
        failures: list[PluginRenderError] = []
        for plugin_id, plugin in list(self._plugins.items()):
            if plugin.post_render is None:
                continue
            try:
                await maybe_await(plugin.post_render(container))
            except Exception as exc:
                error = PluginRenderError(plugin_id, str(exc))
                error.__cause__ = exc
                logger.warning(f"Post-render hook of '{plugin_id}' failed: {exc}", exc_info=True)
                failures.append(error)
        return failures


def create_plugin_manager(
    options: ParserOptions | None = None,
    config: PluginManagerConfig | None = None,
) -> PluginManager:
    return PluginManager(options, config)
