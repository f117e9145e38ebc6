# mdview/markdown/plugins/syntax_highlight.py
"""
Plugin that highlights fenced code blocks with Pygments.

    ```python
    def greet(): ...
    ```

becomes

    <div class="highlight"><pre><span></span><code><span class="k">def</span> ...</code></pre></div>

The language tag picks the lexer. Blocks with no tag, or a tag Pygments does
not know, keep the base rendering: an escaped ``<pre><code>`` block.
Highlighting happens at parse time, so there is no post-render hook.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from markdown import Markdown
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from mdview.errors import PluginConfigError

from ..extensions.fences import get_fence_extension
from ..plugin import MarkdownPlugin, PluginMetadata

logger = logging.getLogger(__name__)

PLUGIN_ID = "syntax-highlight"

_BASE_STYLES = """
.{css_class} {{ border-radius: 6px; margin: 0 0 1em; overflow-x: auto; }}
.{css_class} pre {{ margin: 0; padding: 0.75em 1em; }}
"""


class SyntaxHighlightPlugin(MarkdownPlugin):
    metadata = PluginMetadata(
        id=PLUGIN_ID,
        name="Syntax Highlighting",
        version="1.0.0",
        description="Highlights fenced code blocks with Pygments",
    )

    def __init__(self, options: Optional[Mapping[str, Any]] = None):
        options = dict(options or {})
        self.style = options.get("style", "default")
        self.css_class = options.get("css_class", "highlight")
        self.line_numbers = options.get("line_numbers", False)
        self._formatter: HtmlFormatter | None = None

    async def initialize(self) -> None:
        try:
            get_style_by_name(self.style)
        except ClassNotFound:
            raise PluginConfigError(PLUGIN_ID, "style", f"unknown Pygments style '{self.style}'")
        if not isinstance(self.line_numbers, bool):
            raise PluginConfigError(PLUGIN_ID, "line_numbers", "expected a boolean")

        self._formatter = HtmlFormatter(
            style=self.style,
            cssclass=self.css_class,
            linenos="table" if self.line_numbers else False,
            wrapcode=True,
        )

    def apply(self, md: Markdown) -> None:
        get_fence_extension(md).default_handler = self.highlight

    def highlight(self, code: str, language: str) -> str | None:
        if not language:
            return None
        try:
            lexer = get_lexer_by_name(language, stripnl=False)
        except ClassNotFound:
            logger.debug(f"No lexer for '{language}', leaving code block plain")
            return None
        return highlight(code, lexer, self._get_formatter())

    def get_styles(self) -> list[str]:
        return [
            _BASE_STYLES.format(css_class=self.css_class).strip(),
            self._get_formatter().get_style_defs(f".{self.css_class}"),
        ]

    def _get_formatter(self) -> HtmlFormatter:
        # initialize() may be skipped by callers using the plugin directly
        if self._formatter is None:
            self._formatter = HtmlFormatter(
                style=self.style, cssclass=self.css_class, wrapcode=True
            )
        return self._formatter


def create_syntax_highlight_plugin(
    options: Optional[Mapping[str, Any]] = None,
) -> SyntaxHighlightPlugin:
    return SyntaxHighlightPlugin(options)
