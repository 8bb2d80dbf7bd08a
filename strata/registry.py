"""
Tag and filter registries.

Registries are plain objects constructed once and passed into the
engine, so several independent configurations can coexist in one
process.
"""

from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

from .errors import TemplateRuntimeError

if TYPE_CHECKING:
    from .context import Context
    from .nodes import Node
    from .parser import Parser

logger = logging.getLogger(__name__)

# Builds a node from the parser and the text after the tag keyword
TagFactory = Callable[["Parser", str], "Node"]

# (context, value, *args) -> value
FilterFunc = Callable[..., Any]


class TagRegistry:
    """Maps tag keywords to the factories that parse them."""

    def __init__(self):
        self._tags: Dict[str, TagFactory] = {}

    def register(self, name: str, factory: TagFactory) -> None:
        """
        Registers a tag factory under a keyword.

        Args:
            name: Keyword, the first word inside ``{% ... %}``
            factory: Tag class or callable taking (parser, argstring)
        """
        if name in self._tags:
            logger.warning(f"Tag '{name}' overwrites existing tag")
        self._tags[name] = factory

    def unregister(self, name: str) -> None:
        """Removes a tag; unknown names are ignored."""
        self._tags.pop(name, None)

    def get(self, name: str) -> Optional[TagFactory]:
        return self._tags.get(name)

    def names(self) -> List[str]:
        """Returns all registered keywords, sorted."""
        return sorted(self._tags)

    def __contains__(self, name: str) -> bool:
        return name in self._tags

    def copy(self) -> TagRegistry:
        registry = TagRegistry()
        registry._tags = dict(self._tags)
        return registry


class FilterRegistry:
    """
    Maps filter names to pure functions ``(context, value, *args) -> value``.
    """

    def __init__(self):
        self._filters: Dict[str, FilterFunc] = {}

    def register(self, name: str, func: FilterFunc) -> None:
        if name in self._filters:
            logger.warning(f"Filter '{name}' overwrites existing filter")
        self._filters[name] = func

    def filter(self, name: Optional[str] = None) -> Callable[[FilterFunc], FilterFunc]:
        """
        Decorator form of register().

        Example:
            >>> filters = FilterRegistry()
            >>> @filters.filter()
            ... def swapcase(context, value):
            ...     return str(value).swapcase()
        """
        def decorator(func: FilterFunc) -> FilterFunc:
            self.register(name or func.__name__, func)
            return func
        return decorator

    def register_collection(self, collection: Any) -> None:
        """
        Registers every public method of a filter collection.

        Args:
            collection: FilterCollection class or instance
        """
        instance = collection() if inspect.isclass(collection) else collection
        for name, member in inspect.getmembers(instance, inspect.ismethod):
            if not name.startswith("_"):
                self.register(name, member)

    def unregister(self, name: str) -> None:
        self._filters.pop(name, None)

    def get(self, name: str) -> Optional[FilterFunc]:
        return self._filters.get(name)

    def lookup(self, name: str) -> FilterFunc:
        """
        Returns a filter by name.

        Raises:
            TemplateRuntimeError: If the filter is not registered
        """
        func = self._filters.get(name)
        if func is None:
            raise TemplateRuntimeError(f"filter '{name}' missing")
        return func

    def names(self) -> List[str]:
        return sorted(self._filters)

    def __contains__(self, name: str) -> bool:
        return name in self._filters

    def copy(self) -> FilterRegistry:
        registry = FilterRegistry()
        registry._filters = dict(self._filters)
        return registry


__all__ = ["TagRegistry", "FilterRegistry", "TagFactory", "FilterFunc"]
