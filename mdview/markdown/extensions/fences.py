# mdview/markdown/extensions/fences.py
"""
Fenced code blocks with per-language handlers, on top of pymdownx.superfences.

The base rule turns

    ```python
    print("hi")
    ```

into ``<pre><code class="language-python">...</code></pre>`` with the body
escaped. SuperFences finds the fences, including fences nested in list items
and blockquotes, and stashes whatever HTML the selected formatter returns.

Plugins change what a fence becomes by registering a handler for a language
tag (a SuperFences custom fence), or by taking the ``default_handler`` slot
used for every tag without a specific handler. A handler receives
``(code, language)`` and returns HTML, or ``None`` to fall back to the plain
escaped block.
"""

from __future__ import annotations

import functools
import html
from typing import Callable, Optional

from markdown import Markdown
from pymdownx.superfences import SuperFencesCodeExtension, default_validator

FenceHandler = Callable[[str, str], Optional[str]]


def plain_code_block(code: str, language: str = "") -> str:
    class_attr = f' class="language-{html.escape(language)}"' if language else ""
    body = html.escape(code.rstrip("\n"))
    return f"<pre><code{class_attr}>{body}\n</code></pre>"


class FencedBlockExtension(SuperFencesCodeExtension):
    """SuperFences whose default fence is plain escaped code unless a handler takes it."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.default_handler: FenceHandler | None = None

    def extendMarkdown(self, md: Markdown) -> None:
        super().extendMarkdown(md)
        # "*" replaces the stock highlighting fence for every language
        self.extend_super_fences("*", self._format_default, default_validator, None)

    def register_handler(self, language: str, handler: FenceHandler) -> None:
        """Route fences tagged ``language`` to ``handler``; the latest registration wins."""
        self.extend_super_fences(
            language, functools.partial(self._format, handler), default_validator, None
        )

    def _format_default(self, src="", language="", options=None, md=None, **kwargs) -> str:
        return self._format(self.default_handler, src, language)

    @staticmethod
    def _format(handler, src="", language="", options=None, md=None, **kwargs) -> str:
        if handler is not None:
            rendered = handler(src, language)
            if rendered is not None:
                return rendered
        return plain_code_block(src, language)


def get_fence_extension(md: Markdown) -> FencedBlockExtension:
    """Return the fenced block rule of ``md``, installing it if needed."""
    for extension in md.registeredExtensions:
        if isinstance(extension, FencedBlockExtension):
            return extension
    extension = FencedBlockExtension()
    md.registerExtensions([extension], {})
    return extension
