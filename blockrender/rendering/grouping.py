"""
List grouping for blockrender.

The platform stores a list as a flat run of same-typed sibling item blocks with
no container. Runs are detected here and rendered through one container call.
"""

import logging
from typing import Awaitable, Callable, Dict, List, Sequence, Tuple

from ..models import Block, BlockType
from .context import RenderContext
from .registry import renderer_name


# List item type -> container renderer name
LIST_CONTAINERS: Dict[str, str] = {
    BlockType.BULLETED_LIST_ITEM.value: "bulleted_list",
    BlockType.NUMBERED_LIST_ITEM.value: "numbered_list",
    BlockType.TO_DO.value: "to_do_list",
}


def is_list_item(block: Block) -> bool:
    """Whether ``block`` belongs to a list family and must be grouped."""
    return block.type in LIST_CONTAINERS


def collect_run(blocks: Sequence[Block], start: int) -> Tuple[List[Block], int]:
    """
    Collect the run of blocks sharing the exact type of ``blocks[start]``.

    The run stops at the first block of any other type, so bulleted and
    numbered items never merge.

    Args:
        blocks: Sibling blocks
        start: Index of the first item of the run

    Returns:
        The run and the index of the first block after it
    """
    run_type = blocks[start].type
    end = start
    while end < len(blocks) and blocks[end].type == run_type:
        end += 1
    return list(blocks[start:end]), end


async def render_list_run(
    ctx: RenderContext,
    run: Sequence[Block],
    render_item: Callable[[RenderContext, Block], Awaitable[str]],
) -> str:
    """
    Render a run of list items as a single list container.

    Args:
        ctx: Render context of the current pass
        run: Contiguous same-typed list item blocks
        render_item: Renders one item block to a string

    Returns:
        The rendered list container
    """
    list_type = run[0].type
    container = ctx.resolve(LIST_CONTAINERS[list_type])
    logging.debug(f"Grouping {len(run)} {list_type} blocks - {renderer_name(container)}")

    items = [await render_item(ctx, block) for block in run]

    result = await ctx.invoke(
        container,
        items,
        error_result=f"<!-- Render error: {LIST_CONTAINERS[list_type]} -->\n",
        label=f"{LIST_CONTAINERS[list_type]} of {len(items)} items",
    )
    return result if isinstance(result, str) else ""
