"""
Compiled template.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping, Optional

from .nodes import NodeList

if TYPE_CHECKING:
    from .engine import TemplateEngine


class Template:
    """
    A parsed node tree bound to the engine that compiled it.

    Immutable after construction; one template may be rendered any
    number of times, also concurrently, each render with its own context.
    """

    def __init__(self, nodelist: NodeList, engine: TemplateEngine, name: Optional[str] = None):
        self.nodelist = nodelist
        self.engine = engine
        self.name = name

    def render(self, namespace: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> str:
        """
        Renders the template.

        Args:
            namespace: Root variables; keyword arguments are merged on top

        Returns:
            Rendered text
        """
        if kwargs:
            data = dict(namespace or {})
            data.update(kwargs)
            namespace = data
        return self.engine.render(self.nodelist, namespace)

    def __repr__(self) -> str:
        return f"Template({self.name!r})"


__all__ = ["Template"]
