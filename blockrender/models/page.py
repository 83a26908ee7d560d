"""
Page model for blockrender.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from .blocks import Block


class Page(BaseModel):
    """
    A page: key/value metadata plus its ordered top-level blocks.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(
        ...,
        description="The platform identifier of the page"
    )

    properties: Dict[str, Dict[str, Any]] = Field(
        default_factory=dict,
        description="Typed property values keyed by property name"
    )

    cover: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Cover file object (external or hosted), if any"
    )

    icon: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Icon object (emoji, external or hosted file), if any"
    )

    children: List[Block] = Field(
        default_factory=list,
        description="Ordered top-level blocks of the page"
    )

    @property
    def title(self) -> str:
        """Plain text of the page's title property, or an empty string."""
        for prop in self.properties.values():
            if prop.get("type") == "title":
                return "".join(
                    span.get("plain_text") or (span.get("text") or {}).get("content", "")
                    for span in prop.get("title") or []
                )
        return ""

    @classmethod
    def from_api(cls, data: Dict[str, Any], children: Optional[List[Any]] = None) -> "Page":
        """
        Build a Page from a raw page object.

        Args:
            data: A page object as returned by the platform
            children: Optional block list; defaults to ``data['children']``

        Returns:
            The corresponding Page
        """
        raw_children = children if children is not None else data.get("children") or []
        return cls(
            id=str(data.get("id", "")),
            properties=data.get("properties") or {},
            cover=data.get("cover"),
            icon=data.get("icon"),
            children=[Block.coerce(child) for child in raw_children],
        )
