"""
Rendering engine for block trees.

Contains:
- registry: type-name to renderer mapping with the fallback chain
- rich_text: annotated span composition
- grouping: list item run detection
- blocks: the recursive tree walk
- properties: page metadata rendering
- defaults: bundled Markdown/HTML renderers
"""

from .registry import Registry, resolve
from .context import RenderContext
from .defaults import default_block_renderers, default_inline_renderers
from .blocks import render_blocks, render_blocks_sync, render_page
from .properties import default_property_renderers, render_properties

__all__ = [
    "Registry",
    "resolve",
    "RenderContext",
    "default_block_renderers",
    "default_inline_renderers",
    "default_property_renderers",
    "render_blocks",
    "render_blocks_sync",
    "render_page",
    "render_properties"
]
