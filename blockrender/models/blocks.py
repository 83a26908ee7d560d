"""
Block data models for blockrender.

This module defines the content tree handed to the rendering engine. Blocks are
produced by a content source and are read-only once built.
"""

from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class BlockType(str, Enum):
    """
    Block type tags the bundled renderers know about.

    The platform vocabulary is open-ended, so a Block's ``type`` is a plain
    string and anything outside this enum is still a valid block.
    """

    PARAGRAPH = "paragraph"
    HEADING_1 = "heading_1"
    HEADING_2 = "heading_2"
    HEADING_3 = "heading_3"
    BULLETED_LIST_ITEM = "bulleted_list_item"
    NUMBERED_LIST_ITEM = "numbered_list_item"
    TO_DO = "to_do"
    TOGGLE = "toggle"
    QUOTE = "quote"
    DIVIDER = "divider"
    TABLE = "table"
    TABLE_ROW = "table_row"
    CALLOUT = "callout"
    LINK_TO_PAGE = "link_to_page"
    IMAGE = "image"
    VIDEO = "video"
    BOOKMARK = "bookmark"
    CODE = "code"
    EMBED = "embed"
    EQUATION = "equation"
    CHILD_PAGE = "child_page"
    COLUMN_LIST = "column_list"
    COLUMN = "column"
    UNSUPPORTED = "unsupported"


class Block(BaseModel):
    """
    One node of the content tree.

    The type-specific data lives in ``payload``; for unknown types it is kept
    verbatim so the fallback renderers can still look at it.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(
        ...,
        description="The platform identifier of the block"
    )

    type: str = Field(
        ...,
        description="Open type tag (e.g. 'paragraph', 'bulleted_list_item')"
    )

    has_children: bool = Field(
        default=False,
        description="Whether the platform reports nested child blocks"
    )

    children: List['Block'] = Field(
        default_factory=list,
        description="Ordered child blocks, empty when there are none"
    )

    payload: Dict[str, Any] = Field(
        default_factory=dict,
        description="Type-indexed variant data of the block"
    )

    @property
    def block_type(self) -> Optional[BlockType]:
        """The known BlockType for this block, or None for unknown tags."""
        try:
            return BlockType(self.type)
        except ValueError:
            return None

    @property
    def is_unknown(self) -> bool:
        return self.block_type is None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Block":
        """
        Build a Block from a raw API object.

        The payload is read from the key named by ``type``; nested ``children``
        (attached by a content source) are lifted recursively.

        Args:
            data: A block object as returned by the platform

        Returns:
            The Block tree rooted at ``data``
        """
        block_type = data.get("type") or ""
        payload = data.get(block_type)
        if not isinstance(payload, dict):
            payload = {}

        return cls(
            id=str(data.get("id", "")),
            type=block_type,
            has_children=bool(data.get("has_children", False)),
            children=[cls.coerce(child) for child in data.get("children") or []],
            payload=payload,
        )

    @classmethod
    def coerce(cls, value: Any) -> "Block":
        """Return ``value`` as a Block, lifting raw dictionaries."""
        if isinstance(value, cls):
            return value
        return cls.from_api(value)


# Enable forward references for self-referencing model
Block.model_rebuild()
