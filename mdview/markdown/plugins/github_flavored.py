# mdview/markdown/plugins/github_flavored.py
"""
GitHub-flavored Markdown syntax on top of the base grammar:

- tables (``tables``)
- ``~~strikethrough~~`` (``pymdownx.tilde``, subscript disabled)
- bare URL autolinking (``pymdownx.magiclink``)
- ``- [x] task`` checkboxes (``pymdownx.tasklist``)
- smart quotes, dashes and ellipses (``smarty``)

Every feature can be switched off with a boolean option of the same name as
the key in ``FEATURES``.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from markdown import Markdown

from mdview.errors import PluginConfigError

from ..plugin import MarkdownPlugin, PluginMetadata

logger = logging.getLogger(__name__)

PLUGIN_ID = "github-flavored"

# option name -> (Python-Markdown extension, extension config)
FEATURES: dict[str, tuple[str, dict[str, Any]]] = {
    "tables": ("tables", {"use_align_attribute": True}),
    "strikethrough": ("pymdownx.tilde", {"subscript": False}),
    "autolink": (
        "pymdownx.magiclink",
        {"repo_url_shortener": False, "social_url_shortener": False},
    ),
    "tasklists": ("pymdownx.tasklist", {"custom_checkbox": False}),
    "typographer": ("smarty", {}),
}


class GithubFlavoredPlugin(MarkdownPlugin):
    metadata = PluginMetadata(
        id=PLUGIN_ID,
        name="GitHub Flavored Markdown",
        version="1.0.0",
        description="Tables, strikethrough, autolinks, task lists and smart typography",
    )

    def __init__(self, options: Optional[Mapping[str, Any]] = None):
        options = dict(options or {})
        unknown = set(options) - set(FEATURES)
        if unknown:
            key = sorted(unknown)[0]
            raise PluginConfigError(PLUGIN_ID, key, f"unknown option '{key}'")

        self.features: dict[str, bool] = {}
        for name in FEATURES:
            value = options.get(name, True)
            if not isinstance(value, bool):
                raise PluginConfigError(PLUGIN_ID, name, f"'{name}' must be a boolean")
            self.features[name] = value

    def apply(self, md: Markdown) -> None:
        extensions = []
        configs = {}
        for name, enabled in self.features.items():
            if not enabled:
                continue
            extension, config = FEATURES[name]
            extensions.append(extension)
            configs[extension] = dict(config)

        md.registerExtensions(extensions, configs)
        logger.debug(f"Registered GitHub-flavored extensions: {', '.join(extensions)}")


def create_github_flavored_plugin(
    options: Optional[Mapping[str, Any]] = None,
) -> GithubFlavoredPlugin:
    return GithubFlavoredPlugin(options)
