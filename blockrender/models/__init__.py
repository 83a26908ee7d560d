"""Data models for blockrender."""

from .blocks import Block, BlockType
from .rich_text import Annotations, RichTextSpan
from .page import Page

__all__ = [
    "Block",
    "BlockType",
    "Annotations",
    "RichTextSpan",
    "Page"
]
