# mdview/markdown/plugins/mermaid.py
"""
Plugin that renders ```mermaid fences as diagrams.

Rendering happens in two phases:

1. Parse time (``apply``): the fence becomes a placeholder holding only the
   source, never a diagram:

       <div class="mermaid" data-diagram-source="graph TD; A-->B" data-state="idle">
           <pre class="mermaid-source">graph TD; A--&gt;B</pre>
       </div>

2. DOM time (``post_render``): each idle placeholder is compiled to SVG and
   its content replaced in place. ``data-state`` moves from ``idle`` to
   ``compiling`` and ends at ``rendered`` or ``failed``. A failed diagram
   keeps a visible error marker with the source instead of the diagram.

``set_theme`` only affects diagrams compiled afterwards; callers re-render to
repaint existing ones.
"""

from __future__ import annotations

import html
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Mapping, Optional

from bs4 import Tag
from markdown import Markdown

from mdview.errors import PluginConfigError

from ..dom import parse_fragment
from ..extensions.fences import get_fence_extension
from ..plugin import MarkdownPlugin, PluginMetadata
from .mermaid_cli import (
    DEFAULT_EXECUTABLE,
    DiagramCompileError,
    MermaidCliCompiler,
    find_executable,
)

logger = logging.getLogger(__name__)

PLUGIN_ID = "mermaid"
MARKER_CLASS = "mermaid"
SOURCE_ATTR = "data-diagram-source"
STATE_ATTR = "data-state"

DiagramCompiler = Callable[[str, str], Awaitable[str]]

DEFAULT_THEMES = {"light": "default", "dark": "dark"}

_STYLES = """
.mermaid { margin: 1em 0; overflow-x: auto; text-align: center; }
.mermaid[data-state="idle"] .mermaid-source,
.mermaid[data-state="compiling"] .mermaid-source { opacity: 0.6; }
.mermaid svg { max-width: 100%; height: auto; }
.mermaid-error { border: 1px solid #d73a49; border-radius: 6px; color: #d73a49; padding: 0.75em 1em; text-align: left; }
.mermaid-error pre { color: inherit; margin: 0.5em 0 0; white-space: pre-wrap; }
"""


class DiagramState(str, Enum):
    IDLE = "idle"
    COMPILING = "compiling"
    RENDERED = "rendered"
    FAILED = "failed"


class MermaidPlugin(MarkdownPlugin):
    metadata = PluginMetadata(
        id=PLUGIN_ID,
        name="Mermaid Diagrams",
        version="1.0.0",
        description="Renders mermaid fenced blocks as SVG diagrams",
    )

    def __init__(self, options: Optional[Mapping[str, Any]] = None):
        options = dict(options or {})
        self.themes = {**DEFAULT_THEMES, **options.get("themes", {})}
        self.executable = options.get("executable", DEFAULT_EXECUTABLE)
        self._mode = options.get("theme", "light")
        self._compiler: Optional[DiagramCompiler] = options.get("compiler")
        self._cli: MermaidCliCompiler | None = None

    @property
    def theme(self) -> str:
        return self._mode

    @property
    def mermaid_theme(self) -> str:
        return self.themes[self._mode]

    def set_theme(self, mode: str) -> None:
        if mode not in self.themes:
            raise PluginConfigError(PLUGIN_ID, "theme", f"unknown theme mode '{mode}'")
        self._mode = mode
        logger.debug(f"Mermaid theme set to '{mode}' ({self.themes[mode]})")

    async def initialize(self) -> None:
        self.set_theme(self._mode)

        if self._compiler is not None:
            if not callable(self._compiler):
                raise PluginConfigError(PLUGIN_ID, "compiler", "expected an async callable")
            return

        path = find_executable(self.executable)
        if path is None:
            raise PluginConfigError(
                PLUGIN_ID, "executable", f"mermaid-cli executable '{self.executable}' not found"
            )
        self._cli = MermaidCliCompiler(path)
        self._compiler = self._cli

    def apply(self, md: Markdown) -> None:
        get_fence_extension(md).register_handler("mermaid", self.placeholder)

    def placeholder(self, code: str, language: str) -> str:
        escaped = html.escape(code.rstrip("\n"))
        return (
            f'<div class="{MARKER_CLASS}" {SOURCE_ATTR}="{escaped}" '
            f'{STATE_ATTR}="{DiagramState.IDLE.value}">'
            f'<pre class="mermaid-source">{escaped}</pre></div>'
        )

    def get_styles(self) -> str:
        return _STYLES.strip()

    async def post_render(self, container: Tag) -> None:
        # Theme is read once so every diagram of this pass shares a palette
        theme = self.mermaid_theme
        placeholders = container.find_all(
            "div", class_=MARKER_CLASS, attrs={STATE_ATTR: DiagramState.IDLE.value}
        )
        logger.debug(f"Rendering {len(placeholders)} mermaid diagram(s) with theme '{theme}'")

        for placeholder in placeholders:
            source = placeholder.get(SOURCE_ATTR, "")
            placeholder[STATE_ATTR] = DiagramState.COMPILING.value
            try:
                svg = await self._compile(source, theme)
            except Exception as exc:
                logger.warning(f"Mermaid diagram failed to render: {exc}")
                self._mark_failed(placeholder, source, exc)
                continue

            placeholder.clear()
            placeholder.append(parse_fragment(svg))
            placeholder[STATE_ATTR] = DiagramState.RENDERED.value

    async def _compile(self, source: str, theme: str) -> str:
        if self._compiler is None:
            raise DiagramCompileError("no diagram compiler available")
        if not source.strip():
            raise DiagramCompileError("diagram source is empty")
        svg = await self._compiler(source, theme)
        if not svg or not svg.strip():
            raise DiagramCompileError("compiler returned no markup")
        return svg

    def _mark_failed(self, placeholder: Tag, source: str, exc: Exception) -> None:
        message = str(exc) or type(exc).__name__
        placeholder.clear()
        placeholder[STATE_ATTR] = DiagramState.FAILED.value
        placeholder.append(
            parse_fragment(
                '<div class="mermaid-error" role="alert">'
                f"<strong>Diagram error:</strong> {html.escape(message)}"
                f'<pre class="mermaid-source">{html.escape(source)}</pre>'
                "</div>"
            )
        )

    async def destroy(self) -> None:
        if self._cli is not None:
            self._cli.close()
            self._cli = None


def create_mermaid_plugin(options: Optional[Mapping[str, Any]] = None) -> MermaidPlugin:
    return MermaidPlugin(options)
