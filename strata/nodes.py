"""
Node tree.

A compiled template is a NodeList of immutable nodes. Every node renders
itself into an output buffer (a list of strings) given a Context. Nodes
never keep render-time state: per-render values live in the Context,
keyed by the node's id.
"""

from __future__ import annotations

import itertools
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Iterable, Iterator, List, Optional, Tuple

from .arguments import FilterCall, Name

if TYPE_CHECKING:
    from .context import Context
    from .parser import Parser

# Output buffer that nodes append rendered text to
Output = List[str]

# Process-wide source of node ids; unique across every parse so that
# nodes from a child and its parent templates never share state keys
_node_ids = itertools.count(1)


def next_node_id() -> int:
    return next(_node_ids)


class Node(ABC):
    """Base class for every node of the template tree."""

    @abstractmethod
    def render(self, context: Context, output: Output) -> None:
        """Appends the node's rendering to output."""
        pass


class NodeList(Node):
    """
    Ordered immutable sequence of nodes.

    Optionally remembers the parser that produced it; template inheritance
    uses it to reach that parse's block registry.
    """

    def __init__(self, nodes: Iterable[Node] = (), parser: Optional[Parser] = None):
        self._nodes: Tuple[Node, ...] = tuple(nodes)
        self.parser = parser

    def render(self, context: Context, output: Output) -> None:
        for node in self._nodes:
            node.render(context, output)

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __getitem__(self, index: int) -> Node:
        return self._nodes[index]

    def __repr__(self) -> str:
        return f"NodeList({list(self._nodes)!r})"


class TextNode(Node):
    """Static text, emitted as is."""

    def __init__(self, text: str):
        self.text = text

    def render(self, context: Context, output: Output) -> None:
        output.append(self.text)

    def __repr__(self) -> str:
        return f"TextNode({self.text!r})"


class VariableNode(Node):
    """
    Variable interpolation ``{{ name|filter ... }}``.

    Resolves the path, applies the filter chain and appends the result
    only when its text is non-empty.
    """

    def __init__(self, name: Name, filters: Iterable[FilterCall] = ()):
        self.name = name
        self.filters: Tuple[FilterCall, ...] = tuple(filters)

    def render(self, context: Context, output: Output) -> None:
        value = context.apply_filters(context.resolve(self.name.path), self.filters)
        text = to_text(value)
        if text:
            output.append(text)

    def __repr__(self) -> str:
        return f"VariableNode({self.name.path!r}, {list(self.filters)!r})"


class Tag(Node):
    """
    Base class for tags.

    A tag is constructed by the parser with the text that follows its
    keyword and may consume further tokens to build its body. Each tag
    gets a node id at parse time for keying render-time state.
    """

    def __init__(self, parser: Parser, argstring: str):
        self.node_id = next_node_id()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(#{self.node_id})"


def to_text(value) -> str:
    """Converts a rendered value to text: None is empty, booleans are lowercase."""
    if value is None:
        return ""
    if value is True:
        return "true"
    if value is False:
        return "false"
    return str(value)


def render_to_string(node: Node, context: Context) -> str:
    """Renders a node into a scratch buffer and returns the text."""
    buffer: Output = []
    node.render(context, buffer)
    return "".join(buffer)


__all__ = [
    "Output",
    "Node",
    "NodeList",
    "TextNode",
    "VariableNode",
    "Tag",
    "next_node_id",
    "to_text",
    "render_to_string",
]
