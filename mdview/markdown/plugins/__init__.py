# mdview/markdown/plugins/__init__.py

from .github_flavored import GithubFlavoredPlugin, create_github_flavored_plugin
from .mermaid import DiagramState, MermaidPlugin, create_mermaid_plugin
from .sanitize import SanitizePlugin, create_sanitize_plugin
from .syntax_highlight import SyntaxHighlightPlugin, create_syntax_highlight_plugin

GITHUB_FLAVORED = "github-flavored"
SYNTAX_HIGHLIGHT = "syntax-highlight"
MERMAID = "mermaid"
SANITIZE = "sanitize"

BUILTIN_PLUGINS = {
    GITHUB_FLAVORED: create_github_flavored_plugin,
    SYNTAX_HIGHLIGHT: create_syntax_highlight_plugin,
    MERMAID: create_mermaid_plugin,
    SANITIZE: create_sanitize_plugin,
}

DEFAULT_ENABLED_PLUGINS = [
    GITHUB_FLAVORED,  # Grammar first so later rules see tables, task lists, etc.
    SYNTAX_HIGHLIGHT,  # Default handler for fenced code
    MERMAID,  # Overrides the "mermaid" fence and renders diagrams after insertion
    # SANITIZE,
    # Order matters - it is the order of apply(), styles and post-render hooks
]


def register_builtin_plugins(target) -> None:
    """Register every built-in factory on a PluginManager or MarkdownRenderer."""
    for plugin_id, factory in BUILTIN_PLUGINS.items():
        target.register_plugin_factory(plugin_id, factory)


__all__ = [
    "BUILTIN_PLUGINS",
    "DEFAULT_ENABLED_PLUGINS",
    "GITHUB_FLAVORED",
    "MERMAID",
    "SANITIZE",
    "SYNTAX_HIGHLIGHT",
    "DiagramState",
    "GithubFlavoredPlugin",
    "MermaidPlugin",
    "SanitizePlugin",
    "SyntaxHighlightPlugin",
    "create_github_flavored_plugin",
    "create_mermaid_plugin",
    "create_sanitize_plugin",
    "create_syntax_highlight_plugin",
    "register_builtin_plugins",
]
