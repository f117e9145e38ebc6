"""
Pytest configuration and fixtures for mdview tests.

Provides small recording plugins that register a token-replacing parser rule
and log every lifecycle call, plus a fake diagram compiler so Mermaid tests
never need mermaid-cli.
"""

import asyncio
import html

import pytest
from markdown.preprocessors import Preprocessor

from mdview.markdown import MarkdownPlugin, PluginManager, PluginMetadata
from mdview.markdown.plugins.mermaid_cli import DiagramCompileError


class TokenPreprocessor(Preprocessor):
    """Replace ``@@<token>@@`` with ``<token>!``."""

    def __init__(self, md, token):
        super().__init__(md)
        self.token = token

    def run(self, lines):
        return [line.replace(f"@@{self.token}@@", f"{self.token}!") for line in lines]


class TokenPlugin(MarkdownPlugin):
    def __init__(self, plugin_id, calls, styles=None, options=None):
        self.metadata = PluginMetadata(id=plugin_id, name=plugin_id.title(), version="1.0.0")
        self.calls = calls
        self.options = options
        self.seen_tokens = None
        if styles is not None:
            self.get_styles = lambda: styles

    async def initialize(self):
        self.calls.append(("initialize", self.metadata.id))

    def apply(self, md):
        self.calls.append(("apply", self.metadata.id))
        self.seen_tokens = [p.token for p in md.preprocessors if isinstance(p, TokenPreprocessor)]
        md.preprocessors.register(
            TokenPreprocessor(md, self.metadata.id), f"token_{self.metadata.id}", 30
        )

    async def post_render(self, container):
        self.calls.append(("post_render:start", self.metadata.id))
        await asyncio.sleep(0)
        marker = container.find("p") or container
        marker[f"data-{self.metadata.id}"] = "seen"
        self.calls.append(("post_render:end", self.metadata.id))

    async def destroy(self):
        self.calls.append(("destroy", self.metadata.id))


class FailingInitPlugin(TokenPlugin):
    async def initialize(self):
        raise RuntimeError("could not reach resource")


class FailingApplyPlugin(TokenPlugin):
    def apply(self, md):
        raise ValueError("bad rule")


class FailingPostRenderPlugin(TokenPlugin):
    async def post_render(self, container):
        self.calls.append(("post_render:start", self.metadata.id))
        raise RuntimeError("hook exploded")


class BarePlugin(MarkdownPlugin):
    """Implements only the required capabilities."""

    metadata = PluginMetadata(id="bare", name="Bare", version="0.1.0")

    def apply(self, md):
        pass


class FakeCompiler:
    """Stands in for mermaid-cli; sources containing 'invalid' fail to compile."""

    def __init__(self):
        self.calls = []

    async def __call__(self, source, theme):
        self.calls.append((source, theme))
        await asyncio.sleep(0)
        if "invalid" in source:
            raise DiagramCompileError("Parse error on line 1")
        return f'<svg class="diagram" data-theme="{theme}"><text>{html.escape(source)}</text></svg>'


@pytest.fixture
def calls():
    return []


@pytest.fixture
def manager():
    return PluginManager()


@pytest.fixture
def factory_for(calls):
    """Build a plugin factory for ``cls`` that shares the ``calls`` log."""

    def build(cls, plugin_id, **kwargs):
        def factory(options=None):
            return cls(plugin_id, calls, options=options, **kwargs)

        return factory

    return build


@pytest.fixture
def fake_compiler():
    return FakeCompiler()


@pytest.fixture
def plugin_classes():
    return {
        "token": TokenPlugin,
        "failing_init": FailingInitPlugin,
        "failing_apply": FailingApplyPlugin,
        "failing_post_render": FailingPostRenderPlugin,
        "bare": BarePlugin,
    }
