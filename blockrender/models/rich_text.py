"""
Rich text models for blockrender.

A rich text run is an ordered list of spans; each span carries its text, its
annotation flags and the type-specific data of its variant.
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field


class Annotations(BaseModel):
    """Inline style flags of a span."""

    model_config = ConfigDict(frozen=True)

    bold: bool = False
    italic: bool = False
    strikethrough: bool = False
    underline: bool = False
    code: bool = False


class RichTextSpan(BaseModel):
    """
    One annotated piece of inline text.
    """

    model_config = ConfigDict(frozen=True)

    span_type: str = Field(
        default="text",
        description="The span variant: 'text', 'mention', 'equation', ..."
    )

    content: str = Field(
        default="",
        description="The untrimmed text of the span"
    )

    annotations: Annotations = Field(
        default_factory=Annotations,
        description="Style flags applied to the span"
    )

    color: Optional[str] = Field(
        default=None,
        description="Color name such as 'red' or 'red_background'; None for the default color"
    )

    href: Optional[str] = Field(
        default=None,
        description="Link target of the span, if any"
    )

    payload: Dict[str, Any] = Field(
        default_factory=dict,
        description="Type-indexed variant data (the 'text', 'mention' or 'equation' object)"
    )

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "RichTextSpan":
        """
        Build a span from a raw rich text object.

        Args:
            data: A rich text item as returned by the platform

        Returns:
            The corresponding RichTextSpan
        """
        span_type = data.get("type") or "text"
        payload = data.get(span_type)
        if not isinstance(payload, dict):
            payload = {}

        raw_annotations = dict(data.get("annotations") or {})
        color = raw_annotations.pop("color", None)
        if color == "default":
            color = None

        if span_type == "text":
            content = payload.get("content", "")
            link = payload.get("link") or {}
            href = data.get("href") or link.get("url")
        else:
            content = data.get("plain_text", "")
            href = data.get("href")

        return cls(
            span_type=span_type,
            content=content or "",
            annotations=Annotations(**{
                key: bool(value) for key, value in raw_annotations.items()
                if key in Annotations.model_fields
            }),
            color=color,
            href=href,
            payload=payload,
        )

    @classmethod
    def coerce(cls, value: Any) -> "RichTextSpan":
        """Return ``value`` as a RichTextSpan, lifting raw dictionaries."""
        if isinstance(value, cls):
            return value
        return cls.from_api(value)
