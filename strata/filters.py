"""
Built-in filters.

A filter is a pure function ``(context, value, *args) -> value``.
Filters are grouped in collections whose public methods are registered
by name; see FilterRegistry.register_collection().
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any
from urllib.parse import quote

from .nodes import to_text
from .registry import FilterRegistry

# Characters kept unescaped by urlencode, in addition to letters, digits and "_.-~"
_URL_SAFE = ";/?:@&=+$,[]!*'()"


class FilterCollection:
    """Base class for filter collections; every public method is a filter."""
    pass


class StandardFilters(FilterCollection):
    """Filters available in every engine."""

    def lower(self, context, value):
        return to_text(value).lower()

    def upper(self, context, value):
        return to_text(value).upper()

    def capitalize(self, context, value):
        return to_text(value).capitalize()

    def truncate(self, context, value, n=80, ellipsis="..."):
        """Cuts the text down to n characters and appends the ellipsis."""
        if value is None or value is False:
            return ""
        n = int(n)
        text = to_text(value)
        if len(text) > n:
            return text[:n] + to_text(ellipsis)
        return text

    def join(self, context, value, sep=""):
        """Joins the items of a sequence; other values pass unchanged."""
        if _is_collection(value):
            return to_text(sep).join(to_text(item) for item in value)
        return value

    def replace(self, context, value, search, repl=""):
        return to_text(value).replace(to_text(search), to_text(repl))

    def sort(self, context, value):
        """Sorted list of the items; mappings sort their (key, value) pairs."""
        if isinstance(value, Mapping):
            items = list(value.items())
        elif _is_collection(value):
            items = list(value)
        else:
            return value
        try:
            return sorted(items)
        except TypeError:
            # Items are not mutually comparable
            return value

    def reverse(self, context, value):
        if isinstance(value, str):
            return value[::-1]
        if isinstance(value, Sequence):
            return list(reversed(value))
        return value

    def first(self, context, value):
        if isinstance(value, Mapping):
            return next(iter(value.items()), None)
        if isinstance(value, Sequence):
            return value[0] if value else None
        if _is_collection(value):
            return next(iter(value), None)
        return value

    def last(self, context, value):
        if isinstance(value, Mapping):
            items = list(value.items())
            return items[-1] if items else None
        if isinstance(value, Sequence):
            return value[-1] if value else None
        return value

    def escape(self, context, value, attribute=False):
        """XML-escapes text; with attribute=True double quotes are escaped too."""
        text = to_text(value).replace("&", "&amp;").replace(">", "&gt;").replace("<", "&lt;")
        if attribute:
            text = text.replace('"', "&quot;")
        return text

    def urlencode(self, context, value):
        return quote(to_text(value), safe=_URL_SAFE)

    def length(self, context, value):
        if hasattr(value, "__len__"):
            return len(value)
        return 0


def _is_collection(value: Any) -> bool:
    return hasattr(value, "__iter__") and not isinstance(value, (str, bytes))


def create_filter_registry() -> FilterRegistry:
    """Creates a registry preloaded with the standard filters."""
    registry = FilterRegistry()
    registry.register_collection(StandardFilters)
    return registry


__all__ = ["FilterCollection", "StandardFilters", "create_filter_registry"]
