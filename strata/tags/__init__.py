"""
Built-in tags.
"""

from __future__ import annotations

from typing import Dict

from ..registry import TagFactory, TagRegistry
from .capture import Capture
from .conditional import If
from .debug import Debug
from .filter import FilterBlock
from .forloop import ForLoop
from .inclusion import Include
from .inheritance import Block, Deferred, Extends
from .looptools import Cycle, IfChanged

BUILTIN_TAGS: Dict[str, TagFactory] = {
    "if": If,
    "for": ForLoop,
    "cycle": Cycle,
    "ifchanged": IfChanged,
    "capture": Capture,
    "filter": FilterBlock,
    "debug": Debug,
    "block": Block,
    "extends": Extends,
    "include": Include,
}


def create_tag_registry() -> TagRegistry:
    """Returns a fresh registry holding every built-in tag."""
    registry = TagRegistry()
    for name, factory in BUILTIN_TAGS.items():
        registry.register(name, factory)
    return registry


__all__ = [
    "BUILTIN_TAGS",
    "create_tag_registry",
    "If",
    "ForLoop",
    "Cycle",
    "IfChanged",
    "Capture",
    "FilterBlock",
    "Debug",
    "Block",
    "Extends",
    "Deferred",
    "Include",
]
