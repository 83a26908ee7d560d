"""
Block tree rendering for blockrender.

Walks an ordered block list with a single forward cursor. Ordinary blocks are
rendered one by one (inline content first, then children, then the block's own
renderer); runs of list items are handed to the list grouper and come out as a
single element.
"""

import asyncio
import logging
from typing import Any, Iterable, List, Optional

from ..models import Block, Page
from .context import RenderContext
from .defaults import default_block_renderers
from .grouping import collect_run, is_list_item, render_list_run
from .registry import Registry, renderer_name


def error_placeholder(type_name: str) -> str:
    return f"<!-- Render error: {type_name or 'untyped'} -->\n"


def _context_for(registry: Optional[Registry]) -> RenderContext:
    if registry is None:
        registry = default_block_renderers
    elif not isinstance(registry, Registry):
        registry = Registry(registry)
    return RenderContext(registry=registry)


async def render_block(ctx: RenderContext, block: Block) -> str:
    """
    Render a single block with its inline content and children.

    Args:
        ctx: Render context of the current pass
        block: The block to render

    Returns:
        The rendered markup (an error placeholder if the renderer fails)
    """
    renderer = ctx.resolve(block.type)
    if block.is_unknown:
        logging.debug(f"Unknown block type '{block.type}' on {block.id} - {renderer_name(renderer)}")
    content = await ctx.rich_text(block.payload)

    children: List[str] = []
    if block.has_children or block.children:
        children = await _walk(ctx, block.children)

    result = await ctx.invoke(
        renderer,
        block.payload,
        content or "",
        children,
        block.id,
        error_result=error_placeholder(block.type),
        label=f"{block.type} block {block.id}",
    )
    return result if isinstance(result, str) else ""


async def _walk(ctx: RenderContext, blocks: List[Block]) -> List[str]:
    rendered: List[str] = []
    index = 0
    total = len(blocks)

    while index < total:
        block = blocks[index]

        if is_list_item(block):
            run, index = collect_run(blocks, index)
            rendered.append(await render_list_run(ctx, run, render_block))
            continue

        logging.debug(
            f"Rendering {index + 1} of {total} - {block.type} - {renderer_name(ctx.resolve(block.type))}"
        )
        rendered.append(await render_block(ctx, block))
        index += 1

    return rendered


async def render_blocks(blocks: Iterable[Any], registry: Optional[Registry] = None) -> List[str]:
    """
    Render an ordered block list to an ordered list of markup strings.

    Each contiguous run of same-typed list items yields one entry; every other
    block yields exactly one entry, in input order.

    Args:
        blocks: Block models or raw API block objects
        registry: Renderer registry; defaults to the bundled Markdown renderers

    Returns:
        The rendered strings
    """
    ctx = _context_for(registry)
    return await _walk(ctx, [Block.coerce(block) for block in blocks])


def render_blocks_sync(blocks: Iterable[Any], registry: Optional[Registry] = None) -> List[str]:
    """Blocking wrapper around ``render_blocks`` for callers outside an event loop."""
    return asyncio.run(render_blocks(blocks, registry))


async def render_page(page: Any, registry: Optional[Registry] = None) -> str:
    """
    Render the body of a page as one Markdown document.

    Args:
        page: A Page model or raw page object with attached children
        registry: Renderer registry; defaults to the bundled Markdown renderers

    Returns:
        The rendered blocks separated by blank lines
    """
    if not isinstance(page, Page):
        page = Page.from_api(page)
    rendered = await render_blocks(page.children, registry)
    return "\n".join(part for part in rendered if part)
