"""
Rich text composition for blockrender.

Turns an ordered run of annotated spans into one markup string. Spans are
rendered concurrently and joined back in input order.
"""

import asyncio
import logging
from typing import TYPE_CHECKING, Any, List, Mapping, Optional, Sequence

from pydantic import ValidationError

from ..models import RichTextSpan
from .registry import renderer_name

if TYPE_CHECKING:  # pragma: no cover - import for type checking only
    from .context import RenderContext


# Fields searched for the span sequence, in priority order
RICH_TEXT_FIELDS = ("rich_text", "caption")

# Annotation flag -> markup function name. Order is significant: each step
# wraps the output of the previous one.
ANNOTATION_PIPELINE = (
    ("bold", "bold"),
    ("italic", "italic"),
    ("strikethrough", "strikethrough"),
    ("underline", "underline"),
    ("code", "inline_code"),
)


def select_spans(container: Any) -> Optional[List[Any]]:
    """
    Find the span sequence carried by ``container``.

    A non-empty ``rich_text`` field wins over a non-empty ``caption`` field; a
    container with only empty fields yields an empty run. A bare sequence is
    taken as the run itself.

    Returns:
        The raw spans, or None when no span field can be determined
    """
    if isinstance(container, Mapping):
        for field in RICH_TEXT_FIELDS:
            value = container.get(field)
            if value:
                return list(value)
        if any(field in container for field in RICH_TEXT_FIELDS):
            return []
        return None
    if isinstance(container, Sequence) and not isinstance(container, (str, bytes)):
        return list(container)
    return None


async def render_rich_text(ctx: "RenderContext", container: Any) -> Optional[str]:
    """
    Render a rich text container to markup.

    Args:
        ctx: Render context of the current pass
        container: A payload with ``rich_text``/``caption``, or a span list

    Returns:
        The concatenated markup, or None if the container holds no rich text
    """
    spans = select_spans(container)
    if spans is None:
        logging.debug(f"Unable to determine rich text field of {type(container).__name__}")
        return None
    if not spans:
        return ""

    rendered = await asyncio.gather(*(_render_span(ctx, span) for span in spans))
    return "".join(part or "" for part in rendered)


async def _render_span(ctx: "RenderContext", raw_span: Any) -> str:
    try:
        span = RichTextSpan.coerce(raw_span)
    except (ValidationError, AttributeError, TypeError) as e:
        logging.warning(f"Skipping malformed rich text span: {e}")
        return ""

    renderer = ctx.resolve(span.span_type)
    logging.debug(f"Rich text {span.span_type} - {renderer_name(renderer)}")
    result = await ctx.invoke(renderer, span, error_result="", label=f"{span.span_type} span")
    return result if isinstance(result, str) else ""


def apply_annotations(ctx: "RenderContext", span: RichTextSpan, text: str, with_link: bool = True) -> str:
    """
    Style ``text`` according to the span's annotations.

    Steps run in a fixed order (bold, italic, strikethrough, underline, inline
    code, color, then link) and each one is skipped when the flag is unset or
    the registry has no markup function for it.
    """
    content = text
    for flag, markup_name in ANNOTATION_PIPELINE:
        markup = ctx.markup(markup_name)
        if getattr(span.annotations, flag) and markup:
            content = markup(content)

    color = ctx.markup("color")
    if span.color and color:
        content = color(content, span.color)

    link = ctx.markup("link")
    if with_link and span.href and link:
        content = link(content, span.href)

    return content


def splice_whitespace(original: str, styled: str) -> str:
    """Put ``styled`` back between the leading/trailing whitespace of ``original``."""
    stripped_left = original.lstrip()
    leading = original[:len(original) - len(stripped_left)]
    trailing = stripped_left[len(stripped_left.rstrip()):]
    return f"{leading}{styled}{trailing}"


async def compose_text_span(ctx: "RenderContext", span: RichTextSpan) -> str:
    """
    Render a plain ``text`` span.

    Styling wraps the trimmed content only; surrounding whitespace is kept as-is
    outside the markers. Whitespace-only spans are returned unchanged.
    """
    original = span.content
    trimmed = original.strip()
    if not trimmed:
        return original
    return splice_whitespace(original, apply_annotations(ctx, span, trimmed))
