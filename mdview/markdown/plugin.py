# mdview/markdown/plugin.py
"""
The contract every Markdown plugin implements.

A plugin always has ``metadata`` and ``apply``. The other capabilities are
optional: on the base class they are ``None``, and a subclass provides one
simply by defining a method with that name. Callers check ``is not None``
before invoking a capability. Optional hooks may be plain functions or
coroutine functions.

    class ShoutPlugin(MarkdownPlugin):
        metadata = PluginMetadata(id="shout", name="Shout", version="1.0.0")

        def apply(self, md):
            md.preprocessors.register(ShoutPreprocessor(md), "shout", 30)

        def get_styles(self):
            return ".shout { text-transform: uppercase; }"
"""

from __future__ import annotations

import inspect
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import (
    Any,
    Awaitable,
    Callable,
    Literal,
    Mapping,
    Optional,
    Protocol,
    Sequence,
    Union,
    runtime_checkable,
)

from bs4 import Tag
from markdown import Markdown

from mdview.errors import PluginError, serialize_error

MaybeAwaitable = Union[None, Awaitable[None]]
Styles = Union[str, Sequence[str]]


@dataclass(frozen=True)
class PluginMetadata:
    id: str
    name: str
    version: str
    description: Optional[str] = None
    author: Optional[str] = None


class MarkdownPlugin(ABC):
    metadata: PluginMetadata

    # Optional capabilities
    initialize: Optional[Callable[[], MaybeAwaitable]] = None
    get_styles: Optional[Callable[[], Styles]] = None
    post_render: Optional[Callable[[Tag], MaybeAwaitable]] = None
    destroy: Optional[Callable[[], MaybeAwaitable]] = None

    @abstractmethod
    def apply(self, md: Markdown) -> None:
        """Register parser rules on ``md``. Called once per enable."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.metadata.id}@{self.metadata.version}>"


@runtime_checkable
class ThemeAware(Protocol):
    """Capability of plugins whose output depends on the light/dark theme."""

    def set_theme(self, mode: str) -> None: ...


class PluginFactory(Protocol):
    def __call__(self, options: Optional[Mapping[str, Any]] = None) -> MarkdownPlugin: ...


@dataclass
class PluginLoadResult:
    success: bool
    plugin_id: str
    error: Optional[PluginError] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "pluginId": self.plugin_id,
            "error": str(self.error) if self.error else None,
            "details": serialize_error(self.error) if self.error else None,
        }


@dataclass(frozen=True)
class PluginEvent:
    plugin_id: str
    metadata: PluginMetadata
    action: Literal["registered", "unregistered"]


PluginListener = Callable[[PluginEvent], None]


async def maybe_await(result: Any) -> Any:
    """Await ``result`` if a hook returned an awaitable, otherwise pass it through."""
    if inspect.isawaitable(result):
        return await result
    return result
