# mdview/markdown/plugins/sanitize.py

import logging
from functools import lru_cache
from typing import Any, Mapping, Optional

import bleach
from markdown import Markdown
from markdown.postprocessors import Postprocessor

from mdview.errors import PluginConfigError

from ..plugin import MarkdownPlugin, PluginMetadata

logger = logging.getLogger(__name__)

PLUGIN_ID = "sanitize"

_GLOBAL_ATTRS = {"class", "id", "title", "role"}

_TAG_ATTRS = {
    "a": {"href", "rel", "target"},
    "img": {"src", "alt", "width", "height", "loading"},
    "th": {"colspan", "rowspan", "scope", "align"},
    "td": {"colspan", "rowspan", "align"},
    "input": {"type", "checked", "disabled"},
    "ol": {"start", "type"},
    "blockquote": {"cite"},
    "abbr": {"title"},
    "time": {"datetime"},
}

_ALLOWED_PROTOCOLS = ["http", "https", "mailto", "tel"]


@lru_cache(maxsize=1)
def _base_tags() -> frozenset:
    """Cache bleach tag allow-list."""
    return frozenset(bleach.sanitizer.ALLOWED_TAGS).union(
        {
            # text
            "p",
            "br",
            "hr",
            "div",
            "span",
            "section",
            "del",
            "ins",
            "mark",
            "sup",
            "sub",
            # headings
            "h1",
            "h2",
            "h3",
            "h4",
            "h5",
            "h6",
            # lists
            "ul",
            "ol",
            "li",
            "dl",
            "dt",
            "dd",
            # code
            "pre",
            "code",
            "kbd",
            "samp",
            # tables
            "table",
            "thead",
            "tbody",
            "tfoot",
            "tr",
            "th",
            "td",
            "caption",
            # media
            "img",
            "figure",
            "figcaption",
            # task lists
            "input",
            "label",
            # semantic
            "time",
            "abbr",
        }
    )


def _allow_attribute(tag: str, name: str, value: str) -> bool:
    # data-* carries diagram sources and states
    if name.startswith("data-") or name.startswith("aria-"):
        return True
    return name in _GLOBAL_ATTRS or name in _TAG_ATTRS.get(tag, ())


class SanitizePostprocessor(Postprocessor):
    """Runs on the HTML string after stashed blocks were restored."""

    def __init__(self, md: Markdown, tags: frozenset):
        super().__init__(md)
        self.tags = tags

    def run(self, text: str) -> str:
        return bleach.clean(
            text,
            tags=self.tags,
            attributes=_allow_attribute,
            protocols=_ALLOWED_PROTOCOLS,
            strip=False,  # Escape disallowed tags instead of dropping their text
        )


class SanitizePlugin(MarkdownPlugin):
    metadata = PluginMetadata(
        id=PLUGIN_ID,
        name="HTML Sanitizer",
        version="1.0.0",
        description="Escapes HTML the other plugins do not produce",
    )

    def __init__(self, options: Optional[Mapping[str, Any]] = None):
        options = dict(options or {})
        extra_tags = options.get("extra_tags", [])
        if isinstance(extra_tags, str) or not all(isinstance(t, str) for t in extra_tags):
            raise PluginConfigError(PLUGIN_ID, "extra_tags", "expected a list of tag names")
        self.tags = _base_tags().union(tag.lower() for tag in extra_tags)

    def apply(self, md: Markdown) -> None:
        # raw_html restores stashed blocks at priority 30, so this sees them
        md.postprocessors.register(SanitizePostprocessor(md, self.tags), "sanitize_html", 5)
        logger.debug(f"Sanitizer allows {len(self.tags)} tags")


def create_sanitize_plugin(options: Optional[Mapping[str, Any]] = None) -> SanitizePlugin:
    return SanitizePlugin(options)
