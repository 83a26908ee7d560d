"""
blockrender: Render block-structured pages to Markdown.

Converts a hierarchical document fetched from a content platform into a flat
Markdown/HTML document through a pluggable renderer registry.
"""

__version__ = "0.1.0"
__author__ = "blockrender Project"

# Import main components
from .models import Block, BlockType, Page, RichTextSpan
from .rendering import (
    Registry,
    RenderContext,
    default_block_renderers,
    default_property_renderers,
    render_blocks,
    render_blocks_sync,
    render_page,
    render_properties,
    resolve,
)
from .sources import BaseSource, JSONFileSource, MockSource, NotionSource

__all__ = [
    "Block",
    "BlockType",
    "Page",
    "RichTextSpan",
    "Registry",
    "RenderContext",
    "resolve",
    "default_block_renderers",
    "default_property_renderers",
    "render_blocks",
    "render_blocks_sync",
    "render_page",
    "render_properties",
    "BaseSource",
    "JSONFileSource",
    "MockSource",
    "NotionSource"
]
