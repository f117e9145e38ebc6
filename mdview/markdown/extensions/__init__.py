# mdview/markdown/extensions/__init__.py

from .fences import (
    FencedBlockExtension,
    FenceHandler,
    get_fence_extension,
    plain_code_block,
)

__all__ = [
    "FencedBlockExtension",
    "FenceHandler",
    "get_fence_extension",
    "plain_code_block",
]
