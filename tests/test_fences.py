"""
Tests for the fenced code block rule shared by the code plugins.
"""

from bs4 import BeautifulSoup

from mdview.markdown import ParserOptions, build_parser
from mdview.markdown.extensions import (
    FencedBlockExtension,
    get_fence_extension,
    plain_code_block,
)

LIST_DOCUMENT = """\
1. step

    ```python
    x = 1
    ```
"""

QUOTE_DOCUMENT = """\
> ```python
> x = 1
> ```
"""


def render(md, text):
    return md.reset().convert(text)


class TestPlainBlocks:
    """Tests for the escaped code block used when no handler takes a fence."""

    def test_plain_block_is_escaped(self):
        """Test the body of an untagged fence is HTML-escaped."""
        md = build_parser(ParserOptions())

        result = render(md, "```\na < b && c\n```")

        assert result == "<pre><code>a &lt; b &amp;&amp; c\n</code></pre>"

    def test_language_class(self):
        """Test the language tag becomes a language- class on code."""
        md = build_parser(ParserOptions())

        result = render(md, "```python\nx = 1\n```")

        assert result == '<pre><code class="language-python">x = 1\n</code></pre>'

    def test_tilde_fence(self):
        """Test tilde fences work like backtick fences."""
        md = build_parser(ParserOptions())

        assert "<pre><code>" in render(md, "~~~\ncode\n~~~")

    def test_fence_content_is_not_markdown(self):
        """Test emphasis inside a fence is left alone."""
        md = build_parser(ParserOptions())

        result = render(md, "```\n*not emphasis*\n```")

        assert "<em>" not in result
        assert "*not emphasis*" in result

    def test_plain_code_block_helper(self):
        """Test the helper ends the body with exactly one newline."""
        assert plain_code_block("<b>", "html") == '<pre><code class="language-html">&lt;b&gt;\n</code></pre>'


class TestNestedFences:
    """Fences inside list items and blockquotes go through the same rule."""

    def test_fence_in_list_item(self):
        """Test a fence indented under a list item becomes a code block in the item."""
        md = build_parser(ParserOptions())

        soup = BeautifulSoup(render(md, LIST_DOCUMENT), "html.parser")
        code = soup.select_one("ol > li code")

        assert code is not None
        assert code["class"] == ["language-python"]
        assert code.get_text() == "x = 1\n"
        assert "```" not in soup.get_text()

    def test_fence_in_blockquote(self):
        """Test a fence prefixed with quote markers becomes a code block in the quote."""
        md = build_parser(ParserOptions())

        soup = BeautifulSoup(render(md, QUOTE_DOCUMENT), "html.parser")
        code = soup.select_one("blockquote code")

        assert code is not None
        assert code["class"] == ["language-python"]
        assert code.get_text() == "x = 1\n"

    def test_nested_fence_uses_handler(self):
        """Test nested fences are routed to registered handlers."""
        md = build_parser(ParserOptions())
        get_fence_extension(md).register_handler("python", lambda code, lang: f'<div class="seen">{code}</div>')

        for document, parent in ((LIST_DOCUMENT, "li"), (QUOTE_DOCUMENT, "blockquote")):
            soup = BeautifulSoup(render(md, document), "html.parser")
            seen = soup.select_one(f"{parent} div.seen")

            assert seen is not None
            assert seen.get_text() == "x = 1"


class TestHandlers:
    """Tests for per-language handlers and the default handler slot."""

    def test_language_handler(self):
        """Test a registered handler replaces the block with its HTML."""
        md = build_parser(ParserOptions())
        get_fence_extension(md).register_handler("shout", lambda code, lang: f"<p>{code.strip().upper()}</p>")

        result = render(md, "```shout\nhello\n```")

        assert result == "<p>HELLO</p>"

    def test_default_handler_and_fallback(self):
        """Test a handler returning None falls back to the plain block."""
        md = build_parser(ParserOptions())
        fences = get_fence_extension(md)
        fences.default_handler = lambda code, lang: None if lang == "text" else "<div>handled</div>"

        assert render(md, "```js\nx\n```") == "<div>handled</div>"
        assert render(md, "```text\nx\n```") == '<pre><code class="language-text">x\n</code></pre>'

    def test_specific_handler_beats_default(self):
        """Test a language handler wins over the default handler."""
        md = build_parser(ParserOptions())
        fences = get_fence_extension(md)
        fences.default_handler = lambda code, lang: "<div>default</div>"
        fences.register_handler("special", lambda code, lang: "<div>special</div>")

        assert render(md, "```special\nx\n```") == "<div>special</div>"
        assert render(md, "```other\nx\n```") == "<div>default</div>"

    def test_later_handler_wins(self):
        """Test re-registering a language replaces the earlier handler."""
        md = build_parser(ParserOptions())
        fences = get_fence_extension(md)
        fences.register_handler("special", lambda code, lang: "<div>first</div>")
        fences.register_handler("special", lambda code, lang: "<div>second</div>")

        assert render(md, "```special\nx\n```") == "<div>second</div>"

    def test_get_fence_extension_is_shared(self):
        """Test every caller gets the extension already on the parser."""
        md = build_parser(ParserOptions())

        first = get_fence_extension(md)

        assert isinstance(first, FencedBlockExtension)
        assert get_fence_extension(md) is first

    def test_blocks_between_paragraphs(self):
        """Test a fence between paragraphs leaves them intact."""
        md = build_parser(ParserOptions())

        result = render(md, "before\n\n```\ncode\n```\n\nafter")

        assert result.startswith("<p>before</p>")
        assert result.endswith("<p>after</p>")
        assert "<pre><code>code\n</code></pre>" in result
