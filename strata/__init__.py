"""
Strata: a small Django/Jinja-style text template engine.

Sources are compiled into immutable node trees that render against a
layered context. Tags and filters are pluggable through registries owned
by a TemplateEngine.
"""

from __future__ import annotations

from .context import Context, TemplateAccessible
from .engine import TemplateEngine, compile, default_engine, render
from .errors import TemplateError, TemplateNotFound, TemplateRuntimeError, TemplateSyntaxError
from .filters import FilterCollection, StandardFilters
from .loaders import CachingFileSystemLoader, DictLoader, FileSystemLoader, Loader
from .nodes import Node, NodeList, Tag
from .registry import FilterRegistry, TagRegistry
from .template import Template

__all__ = [
    "TemplateEngine",
    "Template",
    "compile",
    "render",
    "default_engine",
    "Context",
    "TemplateAccessible",
    "TemplateError",
    "TemplateSyntaxError",
    "TemplateRuntimeError",
    "TemplateNotFound",
    "FilterCollection",
    "StandardFilters",
    "Loader",
    "FileSystemLoader",
    "CachingFileSystemLoader",
    "DictLoader",
    "Node",
    "NodeList",
    "Tag",
    "TagRegistry",
    "FilterRegistry",
]
