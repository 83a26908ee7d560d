"""
Renderer registry for blockrender.

A registry maps a block, span or property type name to the function that
renders it. Resolution never fails: a miss walks a fixed fallback chain that
ends in a no-op renderer, so an unknown type coming from the platform degrades
to a placeholder instead of aborting a render pass.
"""

import logging
import re
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional


RenderFunction = Callable[..., Any]

DEFAULT_KEY = "default"
UNSUPPORTED_PLACEHOLDER = "<!-- Unsupported block -->\n"


def to_snake_case(name: str) -> str:
    """
    Normalize a name to snake_case.

    Examples:
        to_snake_case("richText")   # "rich_text"
        to_snake_case("Due Date")   # "due_date"
    """
    value = re.sub(r"[\s\-]+", "_", name.strip())
    value = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", value)
    return re.sub(r"_+", "_", value).lower()


def to_camel_case(name: str) -> str:
    """
    Normalize a name to camelCase.

    Examples:
        to_camel_case("rich_text")  # "richText"
        to_camel_case("heading_1")  # "heading1"
    """
    parts = [part for part in re.split(r"[\s_\-]+", name.strip()) if part]
    if not parts:
        return ""
    return parts[0][:1].lower() + parts[0][1:] + "".join(part[:1].upper() + part[1:] for part in parts[1:])


def renderer_name(renderer: RenderFunction) -> str:
    """Readable name of a render function for log lines."""
    return getattr(renderer, "__name__", type(renderer).__name__)


class Registry(Mapping[str, RenderFunction]):
    """
    Read-only mapping from type name to render function.

    Registries are never mutated during a render pass; use ``extend`` or
    ``with_overrides`` to derive a customised copy.
    """

    def __init__(self, renderers: Optional[Mapping[str, RenderFunction]] = None):
        """
        Initialize the registry.

        Args:
            renderers: Mapping of type name to render function
        """
        self._renderers: Dict[str, RenderFunction] = dict(renderers or {})

    def __getitem__(self, key: str) -> RenderFunction:
        return self._renderers[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._renderers)

    def __len__(self) -> int:
        return len(self._renderers)

    def __repr__(self) -> str:
        return f"Registry({len(self)} renderers)"

    @staticmethod
    def candidates(name: str) -> List[str]:
        """
        Ordered list of keys tried for ``name``: as given, snake_case, camelCase.
        """
        keys: List[str] = []
        for key in (name, to_snake_case(name), to_camel_case(name)):
            if key and key not in keys:
                keys.append(key)
        return keys

    def lookup(self, name: Optional[str]) -> Optional[RenderFunction]:
        """
        Find a renderer by exact name or casing variant, without any fallback.

        Args:
            name: Type or property name

        Returns:
            The render function, or None if the registry has no entry
        """
        if not name:
            return None
        for key in self.candidates(name):
            renderer = self._renderers.get(key)
            if renderer is not None:
                return renderer
        return None

    @property
    def default(self) -> Optional[RenderFunction]:
        """The registry's own ``default`` entry, if any."""
        return self._renderers.get(DEFAULT_KEY)

    def extend(self, renderers: Mapping[str, RenderFunction]) -> "Registry":
        """Return a new registry with ``renderers`` layered over this one."""
        merged = dict(self._renderers)
        merged.update(renderers)
        return Registry(merged)

    def with_overrides(self, **renderers: RenderFunction) -> "Registry":
        """Keyword form of ``extend``."""
        return self.extend(renderers)


def _terminal_renderer(type_name: Optional[str]) -> RenderFunction:
    """Build the final fallback renderer for ``type_name``."""

    async def no_renderer(*args: Any, **kwargs: Any) -> str:
        logging.info(f"No renderer found for '{type_name or 'untyped'}' - unsupported block")
        return UNSUPPORTED_PLACEHOLDER

    return no_renderer


def resolve(
    type_name: Optional[str],
    registry: Optional[Mapping[str, RenderFunction]],
    fallback: Optional[RenderFunction] = None,
) -> RenderFunction:
    """
    Resolve the render function for ``type_name``.

    Resolution order:
      1. exact key match
      2. casing variants of the key (snake_case, camelCase)
      3. ``fallback`` when supplied
      4. the registry's ``default`` entry
      5. a terminal no-op renderer returning a placeholder

    Args:
        type_name: Block, span or property type name
        registry: Registry (or plain mapping) to search
        fallback: Optional renderer tried before the registry default

    Returns:
        A render function; resolution never fails
    """
    if registry is not None and not isinstance(registry, Registry):
        registry = Registry(registry)

    if registry is not None:
        renderer = registry.lookup(type_name)
        if renderer is not None:
            return renderer

    if fallback is not None:
        return fallback

    if registry is not None and registry.default is not None:
        return registry.default

    return _terminal_renderer(type_name)
