"""
Bundled renderers producing Markdown with HTML fragments.

Four kinds of entries share one registry:
  - markup functions: ``fn(content)`` (``color`` and ``link`` take a second value)
  - span renderers: ``fn(ctx, span)``
  - block renderers: ``fn(ctx, payload, content, children, block_id)``
  - list containers: ``fn(ctx, items)``

Callers customise output with ``default_block_renderers.with_overrides(...)``.
"""

import asyncio
import json
import logging
import re
from typing import Any, Dict, List, Optional

from ..models import RichTextSpan
from .registry import Registry, UNSUPPORTED_PLACEHOLDER
from .rich_text import apply_annotations, compose_text_span


YOUTU_BE = re.compile(r"youtu\.be", re.IGNORECASE)
YOUTUBE_WATCH = re.compile(r"youtube\.com/watch", re.IGNORECASE)

IFRAME_ALLOW = (
    "accelerometer; autoplay; clipboard-write; encrypted-media; gyroscope; picture-in-picture"
)


def indent(text: str, prefix: str = "  ") -> str:
    """Indent every non-empty line of ``text``."""
    return "\n".join(prefix + line if line else line for line in text.rstrip("\n").split("\n"))


def _nested(children: Optional[List[str]]) -> str:
    rendered = [child for child in children or [] if child]
    if not rendered:
        return ""
    return "\n" + "\n".join(indent(child) for child in rendered)


def _file_url(payload: Dict[str, Any]) -> str:
    file_type = payload.get("type") or ""
    return (payload.get(file_type) or {}).get("url", "")


# --------------------------------- Markup ------------------------------------


def bold(content: str) -> str:
    return f"**{content}**"


def italic(content: str) -> str:
    return f"_{content}_"


def strikethrough(content: str) -> str:
    return f"~~{content}~~"


def underline(content: str) -> str:
    return f"<u>{content}</u>"


def inline_code(content: str) -> str:
    return f"`{content}`"


def color(content: str, color_name: str) -> str:
    """Wrap content in a span; ``red_background`` styles the background."""
    hue, _, background = color_name.partition("_")
    style = f"background: {hue}" if background else f"color: {hue}"
    return f'<span data-color="{color_name}" style="{style}">{content}</span>'


def link(content: str, href: str) -> str:
    return f"[{content}]({href})"


# ------------------------------ Inline spans ---------------------------------


async def text(ctx, span: RichTextSpan) -> str:
    return await compose_text_span(ctx, span)


async def _mention_plain_text(ctx, value: Any, span: RichTextSpan) -> str:
    return span.content


async def mention(ctx, span: RichTextSpan) -> str:
    """Dispatch a mention on its own type (page, date, user, ...)."""
    mention_type = span.payload.get("type") or ""
    renderer = ctx.resolve(mention_type, fallback=_mention_plain_text)
    rendered = await ctx.invoke(
        renderer,
        span.payload.get(mention_type) or {},
        span,
        error_result=span.content,
        label=f"{mention_type} mention",
    )
    return apply_annotations(ctx, span, rendered or "", with_link=False)


async def equation(ctx, value: Any, *_: Any) -> str:
    """Inline equations (spans) render as $...$, equation blocks as a $$ fence."""
    if isinstance(value, RichTextSpan):
        return f"${value.payload.get('expression', '')}$"
    return f"$$\n{value.get('expression', '')}\n$$\n"


async def page(ctx, value: Dict[str, Any], span: RichTextSpan) -> str:
    page_id = value.get("id", "")
    return f"[{span.content or page_id}]({page_id})"


async def database(ctx, value: Dict[str, Any], span: RichTextSpan) -> str:
    database_id = value.get("id", "")
    return f"[{span.content or database_id}]({database_id})"


async def date(ctx, value: Optional[Dict[str, Any]], *_: Any) -> Optional[str]:
    """Render a date value as ``start`` or ``start - end``."""
    if not value:
        return None
    start = value.get("start") or ""
    end = value.get("end")
    return f"{start} - {end}" if end else start


async def user(ctx, value: Dict[str, Any], span: RichTextSpan) -> str:
    name = value.get("name")
    return f"@{name}" if name else span.content


async def link_preview(ctx, value: Dict[str, Any], span: Any = None, *_: Any) -> str:
    url = value.get("url", "")
    if isinstance(span, RichTextSpan):
        return f"[{span.content or url}]({url})"
    return f"[{url}]({url})\n"


# --------------------------------- Blocks ------------------------------------


async def paragraph(ctx, payload, content, children=None, block_id=None) -> str:
    return f"{content}{_nested(children)}\n"


async def heading_1(ctx, payload, content, children=None, block_id=None) -> str:
    return f"# {content}\n"


async def heading_2(ctx, payload, content, children=None, block_id=None) -> str:
    return f"## {content}\n"


async def heading_3(ctx, payload, content, children=None, block_id=None) -> str:
    return f"### {content}\n"


async def to_do(ctx, payload, content, children=None, block_id=None) -> str:
    checked = "x" if payload.get("checked") else " "
    return f"- [{checked}] {content}{_nested(children)}"


async def bulleted_list_item(ctx, payload, content, children=None, block_id=None) -> str:
    return f"- {content}{_nested(children)}"


async def numbered_list_item(ctx, payload, content, children=None, block_id=None) -> str:
    return f"1. {content}{_nested(children)}"


async def toggle(ctx, payload, content, children=None, block_id=None) -> str:
    body = "\n".join(children or [])
    return f"<details>\n<summary>{content}</summary>\n{body}</details>\n"


async def quote(ctx, payload, content, children=None, block_id=None) -> str:
    return f"> {content}\n"


async def divider(ctx, payload, content=None, children=None, block_id=None) -> str:
    return "---\n"


async def table(ctx, payload, content, children=None, block_id=None) -> str:
    """
    Render a table from its rendered rows.

    The first row is treated as the header and followed by a separator line
    with one ``---`` cell per declared column. Without a declared width the
    cells of the header row are counted.
    """
    rows = [row for row in children or [] if row]
    if not rows:
        return ""
    width = int(payload.get("table_width") or 0)
    if width <= 0:
        width = len(rows[0].strip().strip("|").split(" | "))
    separator = "| " + " | ".join(["---"] * width) + " |"
    return "\n".join([rows[0], separator, *rows[1:]]) + "\n"


async def table_row(ctx, payload, content=None, children=None, block_id=None) -> str:
    cells = await asyncio.gather(*(ctx.rich_text(cell) for cell in payload.get("cells") or []))
    return "| " + " | ".join(cell or "" for cell in cells) + " |"


async def callout(ctx, payload, content, children=None, block_id=None) -> str:
    icon = (payload.get("icon") or {}).get("emoji", "")
    return f'<div data-callout="{icon}">{content}</div>\n'


async def link_to_page(ctx, payload, content=None, children=None, block_id=None) -> str:
    target = payload.get("page_id") or payload.get("database_id") or ""
    return f"[{target}]({target})\n"


async def child_page(ctx, payload, content=None, children=None, block_id=None) -> str:
    title = payload.get("title") or block_id or ""
    return f"[{title}]({block_id})\n"


async def image(ctx, payload, content, children=None, block_id=None) -> str:
    return f'<img src="{_file_url(payload)}" alt="{content}" />\n'


async def video(ctx, payload, content, children=None, block_id=None) -> str:
    """Embed YouTube links as iframes; other videos become a comment."""
    url = _file_url(payload)

    if YOUTU_BE.search(url):
        url = YOUTU_BE.sub("www.youtube.com/embed", url)
    elif YOUTUBE_WATCH.search(url):
        url = url.replace("watch?v=", "embed/")
    else:
        return f"<!-- Video - {url} -->\n"

    return (
        f'<iframe width="560" height="315" src="{url}" frameborder="0" '
        f'allow="{IFRAME_ALLOW}" allowfullscreen></iframe>\n'
    )


async def bookmark(ctx, payload, content, children=None, block_id=None) -> str:
    url = payload.get("url", "")
    return f"[{content or url}]({url})\n"


async def embed(ctx, payload, content, children=None, block_id=None) -> str:
    url = payload.get("url", "")
    return f"[{content or url}]({url})\n"


async def code(ctx, payload, content, children=None, block_id=None) -> str:
    language = payload.get("language") or ""
    return f"```{language}\n{content}\n```\n"


async def column_list(ctx, payload, content=None, children=None, block_id=None) -> str:
    return "\n".join(children or [])


async def column(ctx, payload, content=None, children=None, block_id=None) -> str:
    return "\n".join(children or [])


async def unsupported(ctx, *_: Any) -> str:
    return UNSUPPORTED_PLACEHOLDER


async def default(ctx, payload=None, *_: Any) -> str:
    logging.debug(f"Default renderer for payload: {json.dumps(payload, default=str)[:500]}")
    return "<!-- Default block -->\n"


# ------------------------------ List containers ------------------------------


async def bulleted_list(ctx, items: List[str]) -> str:
    return "\n".join(items) + "\n"


async def numbered_list(ctx, items: List[str]) -> str:
    return "\n".join(items) + "\n"


async def to_do_list(ctx, items: List[str]) -> str:
    return "\n".join(items) + "\n"


MARKUP_RENDERERS = {
    "bold": bold,
    "italic": italic,
    "strikethrough": strikethrough,
    "underline": underline,
    "inline_code": inline_code,
    "color": color,
    "link": link,
}

INLINE_RENDERERS = {
    **MARKUP_RENDERERS,
    "text": text,
    "mention": mention,
    "equation": equation,
    "page": page,
    "database": database,
    "date": date,
    "user": user,
    "link_preview": link_preview,
}

# Markup and span renderers only, used to compose rich text property values
default_inline_renderers = Registry(INLINE_RENDERERS)

# Global default registry for block trees
default_block_renderers = Registry({
    **INLINE_RENDERERS,
    "paragraph": paragraph,
    "heading_1": heading_1,
    "heading_2": heading_2,
    "heading_3": heading_3,
    "to_do": to_do,
    "to_do_list": to_do_list,
    "bulleted_list_item": bulleted_list_item,
    "bulleted_list": bulleted_list,
    "numbered_list_item": numbered_list_item,
    "numbered_list": numbered_list,
    "toggle": toggle,
    "quote": quote,
    "divider": divider,
    "table": table,
    "table_row": table_row,
    "callout": callout,
    "link_to_page": link_to_page,
    "child_page": child_page,
    "image": image,
    "video": video,
    "bookmark": bookmark,
    "embed": embed,
    "code": code,
    "column_list": column_list,
    "column": column,
    "unsupported": unsupported,
    "default": default,
})
