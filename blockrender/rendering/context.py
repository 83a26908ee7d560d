"""
Render context passed to every render function.

The context carries the registry of the current pass so composite renderers
(table rows, mentions, list items) can call back into rich text rendering or
resolve sibling renderers without any implicit binding.
"""

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Optional

from .registry import Registry, RenderFunction, renderer_name, resolve
from .rich_text import render_rich_text


@dataclass(frozen=True)
class RenderContext:
    """Read-only state shared by all renderers of one render pass."""

    registry: Registry
    inline_registry: Optional[Registry] = None

    def resolve(self, type_name: Optional[str], fallback: Optional[RenderFunction] = None) -> RenderFunction:
        """Resolve a renderer through the full fallback chain."""
        return resolve(type_name, self.registry, fallback)

    def markup(self, name: str) -> Optional[RenderFunction]:
        """Look up a plain markup function (bold, italic, ...) with no fallback."""
        return self.registry.lookup(name)

    async def rich_text(self, container: Any) -> Optional[str]:
        """
        Render a rich text container.

        Spans resolve through ``inline_registry`` when one is set, otherwise
        through this context's own registry.
        """
        if self.inline_registry is None:
            return await render_rich_text(self, container)
        return await render_rich_text(RenderContext(registry=self.inline_registry), container)

    async def invoke(
        self,
        renderer: RenderFunction,
        *args: Any,
        error_result: Any = None,
        label: str = "",
    ) -> Any:
        """
        Call ``renderer(self, *args)``, awaiting the result when needed.

        Exceptions raised by the renderer are logged and replaced by
        ``error_result`` so one faulty renderer never aborts a pass.

        Args:
            renderer: The render function to call
            *args: Arguments following the context
            error_result: Value returned when the renderer raises
            label: Description of the rendered item for log lines

        Returns:
            The rendered value, or ``error_result`` on failure
        """
        try:
            result = renderer(self, *args)
            if inspect.isawaitable(result):
                result = await result
            return result
        except Exception as e:
            logging.error(f"Renderer '{renderer_name(renderer)}' failed for {label or 'item'}: {e}", exc_info=True)
            return error_result
