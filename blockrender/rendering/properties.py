"""
Page property rendering for blockrender.

Each page property (plus the synthetic ``cover`` and ``icon`` entries) is
rendered by a renderer looked up by property name first and by property type
second. Renderers are called ``fn(ctx, value, page_id)`` where ``value`` is the
type-indexed part of the property object.
"""

import logging
from typing import Any, Dict, List, Optional

from ..models import Page
from .context import RenderContext
from .defaults import date, default_inline_renderers
from .registry import Registry, renderer_name, to_snake_case


async def title(ctx, value, page_id=None) -> Optional[str]:
    return await ctx.rich_text(value or [])


async def rich_text(ctx, value, page_id=None) -> Optional[str]:
    return await ctx.rich_text(value or [])


async def number(ctx, value, page_id=None) -> Any:
    return value


async def select(ctx, value, page_id=None) -> Optional[str]:
    return (value or {}).get("name")


async def status(ctx, value, page_id=None) -> Optional[str]:
    return (value or {}).get("name")


async def multi_select(ctx, value, page_id=None) -> List[str]:
    return [option.get("name", "") for option in value or []]


async def checkbox(ctx, value, page_id=None) -> bool:
    return bool(value)


async def url(ctx, value, page_id=None) -> Optional[str]:
    return value


async def email(ctx, value, page_id=None) -> Optional[str]:
    return value


async def phone_number(ctx, value, page_id=None) -> Optional[str]:
    return value


async def people(ctx, value, page_id=None) -> List[str]:
    return [person.get("name") or person.get("id", "") for person in value or []]


async def files(ctx, value, page_id=None) -> List[str]:
    urls = []
    for item in value or []:
        file_type = item.get("type") or ""
        urls.append((item.get(file_type) or {}).get("url", ""))
    return urls


async def created_time(ctx, value, page_id=None) -> Optional[str]:
    return value


async def last_edited_time(ctx, value, page_id=None) -> Optional[str]:
    return value


async def relation(ctx, value, page_id=None) -> List[str]:
    return [item.get("id", "") for item in value or []]


async def formula(ctx, value, page_id=None) -> Any:
    if not value:
        return None
    return value.get(value.get("type") or "")


async def external(ctx, value, page_id=None) -> Optional[str]:
    return (value or {}).get("url")


async def file(ctx, value, page_id=None) -> Optional[str]:
    return (value or {}).get("url")


async def emoji(ctx, value, page_id=None) -> Optional[str]:
    return value


async def default(ctx, value=None, page_id=None) -> None:
    logging.debug(f"No property renderer matched on page {page_id}")
    return None


# Global default registry for page properties. Rich text values are composed
# through a separate inline registry so property names never reach span renderers.
default_property_renderers = Registry({
    "title": title,
    "rich_text": rich_text,
    "number": number,
    "date": date,
    "select": select,
    "status": status,
    "multi_select": multi_select,
    "checkbox": checkbox,
    "url": url,
    "email": email,
    "phone_number": phone_number,
    "people": people,
    "files": files,
    "created_time": created_time,
    "last_edited_time": last_edited_time,
    "relation": relation,
    "formula": formula,
    "external": external,
    "file": file,
    "emoji": emoji,
    "default": default,
})


async def render_properties(page: Any, registry: Optional[Registry] = None,
                            inline_registry: Optional[Registry] = None) -> Dict[str, Any]:
    """
    Render the metadata of a page.

    Args:
        page: A Page model or raw page object
        registry: Renderer registry; defaults to the bundled property renderers
        inline_registry: Span and markup renderers for rich text values; defaults
            to the bundled inline renderers

    Returns:
        Rendered values keyed by snake_case property name
    """
    if not isinstance(page, Page):
        page = Page.from_api(page)
    if registry is None:
        registry = default_property_renderers
    elif not isinstance(registry, Registry):
        registry = Registry(registry)
    if inline_registry is None:
        inline_registry = default_inline_renderers
    elif not isinstance(inline_registry, Registry):
        inline_registry = Registry(inline_registry)
    ctx = RenderContext(registry=registry, inline_registry=inline_registry)

    properties: Dict[str, Optional[Dict[str, Any]]] = dict(page.properties)
    properties["cover"] = page.cover
    properties["icon"] = page.icon

    rendered: Dict[str, Any] = {}
    for name, prop in properties.items():
        prop = prop or {}
        prop_type = prop.get("type") or ""

        renderer = registry.lookup(name) or ctx.resolve(prop_type)
        logging.debug(f"Rendering property {name} - {prop_type} - {renderer_name(renderer)}")

        rendered[to_snake_case(name)] = await ctx.invoke(
            renderer,
            prop.get(prop_type) if prop_type else None,
            page.id,
            error_result=None,
            label=f"property '{name}' of page {page.id}",
        )

    return rendered
