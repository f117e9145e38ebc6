# mdview/markdown/config.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import markdown

from .extensions.fences import FencedBlockExtension

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParserOptions:
    """Base parser behaviour, chosen once when a parser is built."""

    html: bool = False  # pass raw HTML through
    linkify: bool = False  # autolink bare URLs
    typographer: bool = False  # smart quotes, dashes and ellipses


@dataclass
class PluginManagerConfig:
    """Which plugins to enable (in order) and the options handed to each factory."""

    enabled_plugins: list[str] = field(default_factory=list)
    plugin_options: dict[str, dict[str, Any]] = field(default_factory=dict)


def get_markdown_config(options: ParserOptions) -> dict[str, Any]:
    """
    Configuration for the Python-Markdown instance that every plugin extends.

    Fenced code blocks (pymdownx.superfences) are part of the base grammar,
    including fences nested in lists and blockquotes; the highlight and diagram
    plugins only add handlers to that rule. Autolinking and typographic
    substitution map to pymdownx.magiclink and smarty.
    """
    extensions: list[Any] = [FencedBlockExtension()]
    extension_configs: dict[str, dict[str, Any]] = {}

    if options.linkify:
        extensions.append("pymdownx.magiclink")
        extension_configs["pymdownx.magiclink"] = {
            "repo_url_shortener": False,
            "social_url_shortener": False,
        }

    if options.typographer:
        extensions.append("smarty")

    return {
        "extensions": extensions,
        "extension_configs": extension_configs,
    }


def build_parser(options: ParserOptions) -> markdown.Markdown:
    config = get_markdown_config(options)
    md = markdown.Markdown(
        extensions=config["extensions"],
        extension_configs=config["extension_configs"],
        output_format="html",
    )

    if not options.html:
        # Without these, raw HTML is treated as text and escaped on output
        md.preprocessors.deregister("html_block")
        md.inlinePatterns.deregister("html")

    logger.debug(f"Built parser with options {options}")
    return md
