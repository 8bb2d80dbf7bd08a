"""
Template tokenizer.

Splits raw template source into a flat stream of text, block tag,
variable tag and comment tokens. Delimiters are tried in the order
block, variable, comment at every position.
"""

from __future__ import annotations

import logging
import re

from .constants import (
    BLOCK_START, BLOCK_END, VAR_START, VAR_END, COMMENT_START, COMMENT_END,
)
from .tokens import Token, TokenStream, TokenType

logger = logging.getLogger(__name__)

# Non-greedy text prefix followed by exactly one tag of any kind
TAG_PATTERN = re.compile(
    r"(.*?)(?:"
    + re.escape(BLOCK_START) + r"(.*?)" + re.escape(BLOCK_END)
    + r"|"
    + re.escape(VAR_START) + r"(.*?)" + re.escape(VAR_END)
    + r"|"
    + re.escape(COMMENT_START) + r"(.*?)" + re.escape(COMMENT_END)
    + r")",
    re.DOTALL,
)


class TemplateLexer:
    """
    Tokenizer for template source text.

    Produces a closed TokenStream. Text between tags becomes TEXT tokens
    (only when non-empty), tag contents are trimmed of surrounding
    whitespace, and text after the last tag becomes a final TEXT token.
    """

    def __init__(self, source: str):
        self.source = source

    def tokenize(self) -> TokenStream:
        """
        Tokenizes the whole source.

        Returns:
            Closed token stream
        """
        stream = TokenStream()
        lineno = 1
        end = 0

        for match in TAG_PATTERN.finditer(self.source):
            text, block, variable, comment = match.groups()

            if text:
                stream.append(Token(TokenType.TEXT, text, lineno))
                lineno += text.count("\n")

            if block is not None:
                stream.append(Token(TokenType.BLOCK, block.strip(), lineno))
            elif variable is not None:
                stream.append(Token(TokenType.VARIABLE, variable.strip(), lineno))
            else:
                stream.append(Token(TokenType.COMMENT, comment.strip(), lineno))

            # Line numbers advance past newlines inside the tag as well
            lineno += self.source.count("\n", match.end(1), match.end())
            end = match.end()

        rest = self.source[end:]
        if rest:
            stream.append(Token(TokenType.TEXT, rest, lineno))

        logger.debug(f"Tokenized template of length {len(self.source)} into {len(stream)} tokens")
        return stream.close()


def tokenize(source: str) -> TokenStream:
    """Convenience wrapper around TemplateLexer."""
    return TemplateLexer(source).tokenize()


__all__ = ["TemplateLexer", "tokenize", "TAG_PATTERN"]
