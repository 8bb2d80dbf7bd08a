"""
Recursive-descent template parser.

There is no fixed grammar table: the parser turns text and variable
tokens into nodes itself and hands every block tag to the factory
registered for its keyword. A tag builds its own body by calling
parse_until() with a predicate that recognises its terminators
(``endif``, ``else``, ...), which allows arbitrary nesting.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, List, NoReturn, Optional

from .arguments import Argument, Name, parse_arguments, split_arguments
from .errors import TemplateRuntimeError, TemplateSyntaxError
from .lexer import TemplateLexer
from .nodes import Node, NodeList, TextNode, VariableNode
from .tokens import TokenStream, TokenType

if TYPE_CHECKING:
    from .loaders import Loader
    from .registry import TagRegistry

logger = logging.getLogger(__name__)

# Called with (keyword, remainder) for every block tag; True stops the body
StopPredicate = Callable[[str, str], bool]


def _never(keyword: str, args: str) -> bool:
    return False


class Parser:
    """
    Parser for one template source.

    Holds the per-parse state shared by every tag parsed from the same
    source: the token stream, the ``storage`` mapping (block registry and
    similar), and the ``first`` flag that stays True until the first
    meaningful token has been consumed.
    """

    def __init__(
        self,
        stream: TokenStream,
        tags: TagRegistry,
        loader: Optional[Loader] = None,
        name: Optional[str] = None,
    ):
        self.tokenstream = stream
        self.tags = tags
        self.loader = loader
        self.name = name

        self.storage: Dict[str, Any] = {}
        self.first = True
        self.depth = 0
        self.lineno = 1

        # Keyword of the tag that stopped the last parse_until() call
        self.stopped_at: Optional[str] = None

    @classmethod
    def from_source(
        cls,
        source: str,
        tags: TagRegistry,
        loader: Optional[Loader] = None,
        name: Optional[str] = None,
    ) -> Parser:
        """Tokenizes source and creates a parser over the resulting stream."""
        return cls(TemplateLexer(source).tokenize(), tags, loader, name)

    def fail(self, message: str) -> NoReturn:
        """Raises a syntax error located at the token being parsed."""
        raise TemplateSyntaxError(message, self.name, self.lineno)

    def parse_arguments(self, text: str) -> List[Argument]:
        """Parses tag contents, attaching the current location to syntax errors."""
        try:
            return parse_arguments(text)
        except TemplateSyntaxError as e:
            raise TemplateSyntaxError(e.message, self.name, self.lineno) from e

    def load_local(self, name: str) -> NodeList:
        """
        Loads and parses another template through the loader.

        The template is always parsed afresh; its name is resolved relative
        to the template being parsed.

        Raises:
            TemplateRuntimeError: If no loader is configured
        """
        if self.loader is None:
            raise TemplateRuntimeError(f"no loader defined, cannot load '{name}'", self.name, self.lineno)
        return self.loader.load_local(name, self.name)

    def parse_until(self, predicate: StopPredicate, closing: Optional[str] = None) -> NodeList:
        """
        Parses tokens until predicate accepts a block tag.

        The terminating tag is consumed and its keyword stored in
        ``stopped_at``.

        Args:
            predicate: Called with (keyword, remainder) before tag dispatch
            closing: Tag name expected to terminate the body; if given,
                reaching the end of the template first is a syntax error

        Returns:
            Nodes collected before the terminator
        """
        nodes: List[Node] = []
        self.depth += 1
        try:
            while not self.tokenstream.eos():
                token = self.tokenstream.next()
                self.lineno = token.lineno

                if token.type is TokenType.TEXT:
                    if self.first and token.value.strip():
                        self.first = False
                    if token.value:
                        nodes.append(TextNode(token.value))

                elif token.type is TokenType.VARIABLE:
                    self.first = False
                    nodes.append(self._parse_variable(token.value))

                elif token.type is TokenType.BLOCK:
                    parts = token.value.split(None, 1)
                    keyword = parts[0] if parts else ""
                    args = parts[1] if len(parts) > 1 else ""

                    if predicate(keyword, args):
                        self.first = False
                        self.stopped_at = keyword
                        return NodeList(nodes, self)

                    factory = self.tags.get(keyword)
                    if factory is None:
                        self.fail(f"unknown tag '{keyword}'")
                    logger.debug(f"Parsing tag '{keyword}' at line {token.lineno}")
                    nodes.append(factory(self, args))
                    self.first = False

                # Comments produce no nodes and do not clear the first flag

            if closing is not None:
                self.fail(f"unexpected end of template, expected '{closing}'")
            self.stopped_at = None
            return NodeList(nodes, self)
        finally:
            self.depth -= 1

    def parse_all(self) -> NodeList:
        """Parses everything up to the end of the template."""
        return self.parse_until(_never)

    def _parse_variable(self, text: str) -> VariableNode:
        values, filters = split_arguments(self.parse_arguments(text))
        if len(values) != 1 or not isinstance(values[0], Name):
            self.fail(f"invalid syntax for variable node: {text!r}")
        return VariableNode(values[0], filters)


__all__ = ["Parser", "StopPredicate"]
